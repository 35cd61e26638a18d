"""
Integration tests for referral resolution and signup attribution.

Runs against an in-memory SQLite database.
"""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError

from affiliate_ledger.models import Affiliate, AffiliateStatus, Attribution, AttributionType
from affiliate_ledger.services import (
    AttributionService,
    AttributionSkipReason,
    CookieAttributionBridge,
    ReferralLinkService,
    ReferralResolver,
)


class TestReferralResolver:
    """Tests for ReferralResolver."""

    @pytest.mark.asyncio
    async def test_resolves_active_code(self, session, make_affiliate) -> None:
        """Test an active link of an active affiliate resolves."""
        affiliate = await make_affiliate("aff-1", code="REFAFF1")

        resolver = ReferralResolver(session)

        assert await resolver.resolve("refaff1") == affiliate.id
        assert await resolver.resolve("  REFAFF1 ") == affiliate.id

    @pytest.mark.asyncio
    async def test_unknown_code(self, session, make_affiliate) -> None:
        """Test unknown and blank codes resolve to None."""
        await make_affiliate("aff-1")
        resolver = ReferralResolver(session)

        assert await resolver.resolve("NOPE") is None
        assert await resolver.resolve("") is None
        assert await resolver.resolve(None) is None

    @pytest.mark.asyncio
    async def test_inactive_affiliate(self, session, make_affiliate) -> None:
        """Test codes of suspended affiliates do not resolve."""
        await make_affiliate("aff-1", status=AffiliateStatus.SUSPENDED, code="REFSUSP")

        assert await ReferralResolver(session).resolve("REFSUSP") is None

    @pytest.mark.asyncio
    async def test_deactivated_link(self, session, make_affiliate) -> None:
        """Test a deactivated link stops resolving while new links work."""
        affiliate = await make_affiliate("aff-1", code="REFOLD")
        link_service = ReferralLinkService(session)

        assert await link_service.deactivate_link("refold") is True
        assert await link_service.deactivate_link("refold") is False
        new_link = await link_service.issue_link(affiliate.id)

        resolver = ReferralResolver(session)
        assert await resolver.resolve("REFOLD") is None
        assert await resolver.resolve(new_link.code) == affiliate.id


class TestSignupAttribution:
    """Tests for AttributionService.record_signup_attribution."""

    @pytest.mark.asyncio
    async def test_records_user_attribution(self, session, make_affiliate) -> None:
        """Test a referred signup is attributed for the full window."""
        affiliate = await make_affiliate("aff-1")
        service = AttributionService(session, attribution_window_days=365)

        result = await service.record_signup_attribution("user-1", "REFAFF-1")
        await session.commit()

        assert result.recorded
        assert result.affiliate_id == affiliate.id
        assert result.skip_reason is None

        attribution = await service.find_active_attribution("user-1", AttributionType.USER_SIGNUP)
        assert attribution is not None
        assert attribution.id == result.attribution_id
        assert (attribution.ends_at - attribution.starts_at).days == 365

    @pytest.mark.asyncio
    async def test_business_signup_type(self, session, make_affiliate) -> None:
        """Test business signups get a BUSINESS_SIGNUP attribution only."""
        await make_affiliate("aff-1")
        service = AttributionService(session)

        result = await service.record_signup_attribution("biz-1", "REFAFF-1", is_business=True)
        await session.commit()

        assert result.recorded
        assert await service.find_active_attribution(
            "biz-1", AttributionType.BUSINESS_SIGNUP
        ) is not None
        assert await service.find_active_attribution(
            "biz-1", AttributionType.USER_SIGNUP
        ) is None

    @pytest.mark.asyncio
    async def test_self_referral_blocked(self, session, make_affiliate) -> None:
        """Test an affiliate cannot attribute itself."""
        affiliate = await make_affiliate("aff-1")
        service = AttributionService(session)

        result = await service.record_signup_attribution("aff-1", "REFAFF-1")

        assert not result.recorded
        assert result.skip_reason == AttributionSkipReason.SELF_REFERRAL
        assert result.affiliate_id == affiliate.id

    @pytest.mark.asyncio
    async def test_no_referral(self, session) -> None:
        """Test signups without a code are skipped."""
        result = await AttributionService(session).record_signup_attribution("user-1", None)

        assert not result.recorded
        assert result.skip_reason == AttributionSkipReason.NO_REFERRAL

    @pytest.mark.asyncio
    async def test_inactive_affiliate_code(self, session, make_affiliate) -> None:
        """Test a code of an inactive affiliate is treated as no referral."""
        await make_affiliate("aff-1", status=AffiliateStatus.INACTIVE)

        result = await AttributionService(session).record_signup_attribution(
            "user-1", "REFAFF-1"
        )

        assert result.skip_reason == AttributionSkipReason.NO_REFERRAL

    @pytest.mark.asyncio
    async def test_first_attribution_wins(self, session, make_affiliate) -> None:
        """Test a second signup attribution of the same type is skipped."""
        first = await make_affiliate("aff-1")
        await make_affiliate("aff-2")
        service = AttributionService(session)

        await service.record_signup_attribution("user-1", "REFAFF-1")
        await session.commit()
        result = await service.record_signup_attribution("user-1", "REFAFF-2")

        assert not result.recorded
        assert result.skip_reason == AttributionSkipReason.ALREADY_ATTRIBUTED
        assert result.affiliate_id == first.id

    @pytest.mark.asyncio
    async def test_storage_error_is_swallowed(self, session, make_affiliate) -> None:
        """Test storage failures never abort the signup."""
        await make_affiliate("aff-1")
        service = AttributionService(session)
        service.attribution_repo.create = AsyncMock(side_effect=SQLAlchemyError("db down"))

        result = await service.record_signup_attribution("user-1", "REFAFF-1")

        assert not result.recorded
        assert result.skip_reason == AttributionSkipReason.STORAGE_ERROR

    @pytest.mark.asyncio
    async def test_failed_lookup_keeps_signup_transaction(
        self, session, make_affiliate
    ) -> None:
        """Test a failing attribution query rolls back only its savepoint."""
        referrer_id = (await make_affiliate("aff-1")).id
        service = AttributionService(session)

        async def broken_find_active(*args, **kwargs):
            await session.execute(text("SELECT * FROM missing_table"))

        service.attribution_repo.find_active = broken_find_active

        # Pending signup write owned by the caller
        session.add(Affiliate(user_id="user-1", status=AffiliateStatus.ACTIVE))
        await session.flush()

        result = await service.record_signup_attribution("user-1", "REFAFF-1")
        await session.commit()

        assert result.skip_reason == AttributionSkipReason.STORAGE_ERROR
        assert result.affiliate_id == referrer_id
        signups = await session.scalar(
            select(func.count()).select_from(Affiliate).where(Affiliate.user_id == "user-1")
        )
        attributions = await session.scalar(select(func.count()).select_from(Attribution))
        assert signups == 1
        assert attributions == 0

    @pytest.mark.asyncio
    async def test_failed_insert_keeps_signup_transaction(
        self, session, make_affiliate
    ) -> None:
        """Test a failing attribution insert leaves earlier caller writes intact."""
        await make_affiliate("aff-1")
        service = AttributionService(session)
        original_create = service.attribution_repo.create

        async def failing_create(**data):
            await original_create(**data)
            await session.execute(text("INSERT INTO missing_table VALUES (1)"))

        service.attribution_repo.create = failing_create

        session.add(Affiliate(user_id="user-1", status=AffiliateStatus.ACTIVE))
        await session.flush()

        result = await service.record_signup_attribution("user-1", "REFAFF-1")
        await session.commit()

        assert result.skip_reason == AttributionSkipReason.STORAGE_ERROR
        signups = await session.scalar(
            select(func.count()).select_from(Affiliate).where(Affiliate.user_id == "user-1")
        )
        attributions = await session.scalar(select(func.count()).select_from(Attribution))
        assert signups == 1
        assert attributions == 0

    @pytest.mark.asyncio
    async def test_expired_attribution_not_active(
        self, session, make_affiliate, make_attribution
    ) -> None:
        """Test attributions past their window are not found."""
        affiliate = await make_affiliate("aff-1")
        await make_attribution("user-1", affiliate, started_days_ago=400, window_days=365)

        found = await AttributionService(session).find_active_attribution(
            "user-1", AttributionType.USER_SIGNUP
        )

        assert found is None

    @pytest.mark.asyncio
    async def test_reattribution_after_expiry(
        self, session, make_affiliate, make_attribution
    ) -> None:
        """Test a user can be attributed again once the old window has closed."""
        old = await make_affiliate("aff-1")
        new = await make_affiliate("aff-2")
        await make_attribution("user-1", old, started_days_ago=400, window_days=365)

        result = await AttributionService(session).record_signup_attribution(
            "user-1", "REFAFF-2"
        )

        assert result.recorded
        assert result.affiliate_id == new.id


class TestCookieBridge:
    """Tests for CookieAttributionBridge against the store."""

    @pytest.mark.asyncio
    async def test_attributes_from_cookie_header(self, session, make_affiliate) -> None:
        """Test signup with a referral cookie is attributed."""
        affiliate = await make_affiliate("aff-1")
        bridge = CookieAttributionBridge(AttributionService(session), cookie_name="hc_ref")

        result = await bridge.attribute_signup("user-1", "lang=nl; hc_ref=refaff-1")
        await session.commit()

        assert result.recorded
        assert result.affiliate_id == affiliate.id

    @pytest.mark.asyncio
    async def test_unknown_cookie_code(self, session) -> None:
        """Test a stale cookie code is ignored."""
        bridge = CookieAttributionBridge(AttributionService(session), cookie_name="hc_ref")

        result = await bridge.attribute_signup("user-1", {"hc_ref": "REFGONE"})

        assert result.skip_reason == AttributionSkipReason.NO_REFERRAL
