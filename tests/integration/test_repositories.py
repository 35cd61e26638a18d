"""
Integration tests for repository queries not covered through services.
"""

import pytest

from affiliate_ledger.models import AttributionType, LedgerStatus
from affiliate_ledger.repositories import (
    AffiliateRepository,
    AttributionRepository,
    CommissionLedgerRepository,
    PromoCodeRepository,
    ReferralLinkRepository,
)
from affiliate_ledger.services import CommissionLedgerService


class TestAffiliateRepository:
    """Tests for AffiliateRepository."""

    @pytest.mark.asyncio
    async def test_downline(self, session, make_affiliate) -> None:
        """Test sub-affiliates are listed oldest first and counted."""
        parent = await make_affiliate("parent-1")
        first = await make_affiliate("sub-1", parent=parent)
        second = await make_affiliate("sub-2", parent=parent)
        await make_affiliate("other-1")
        repo = AffiliateRepository(session)

        downline = await repo.get_sub_affiliates(parent.id)

        assert [a.id for a in downline] == [first.id, second.id]
        assert await repo.count_sub_affiliates(parent.id) == 2
        assert await repo.count_sub_affiliates(first.id) == 0

    @pytest.mark.asyncio
    async def test_get_by_user_id(self, session, make_affiliate) -> None:
        """Test lookup by owning user."""
        affiliate = await make_affiliate("aff-1")
        repo = AffiliateRepository(session)

        assert (await repo.get_by_user_id("aff-1")).id == affiliate.id
        assert await repo.get_by_user_id("nobody") is None


class TestReferralLinkRepository:
    """Tests for ReferralLinkRepository."""

    @pytest.mark.asyncio
    async def test_active_links(self, session, make_affiliate) -> None:
        """Test deactivated links drop out of the active list but keep existing."""
        affiliate = await make_affiliate("aff-1", code="REFONE")
        repo = ReferralLinkRepository(session)
        link = await repo.get_by_code("REFONE")

        active = await repo.get_active_for_affiliate(affiliate.id)
        assert [a.code for a in active] == ["REFONE"]

        assert await repo.deactivate(link.id) is True
        assert await repo.deactivate(link.id) is False
        assert await repo.get_active_for_affiliate(affiliate.id) == []
        assert await repo.code_exists("REFONE") is True


class TestPerAffiliateListings:
    """Tests for per-affiliate listings."""

    @pytest.mark.asyncio
    async def test_attributions_and_promo_codes(
        self, session, make_affiliate, make_attribution, make_promo_code
    ) -> None:
        """Test attributions and promo codes are listed per affiliate."""
        affiliate = await make_affiliate("aff-1")
        other = await make_affiliate("aff-2")
        await make_attribution("user-1", affiliate)
        await make_attribution("biz-1", affiliate, AttributionType.BUSINESS_SIGNUP)
        await make_attribution("user-2", other)
        await make_promo_code(affiliate, "SAVE10", 10)

        attributions = await AttributionRepository(session).get_by_affiliate(affiliate.id)
        promos = await PromoCodeRepository(session).get_by_affiliate(affiliate.id)

        assert {a.user_id for a in attributions} == {"user-1", "biz-1"}
        assert [p.code for p in promos] == ["SAVE10"]


class TestCommissionLedgerRepository:
    """Tests for CommissionLedgerRepository."""

    @pytest.mark.asyncio
    async def test_lookup_and_status_filter(
        self, session, make_affiliate, make_attribution
    ) -> None:
        """Test event lookup and per-status listing."""
        affiliate = await make_affiliate("aff-1")
        await make_attribution("buyer-1", affiliate)
        await CommissionLedgerService(session).record_order_paid(
            "ord_1", 1200, "buyer-1", "seller-1"
        )
        repo = CommissionLedgerRepository(session)

        entry = await repo.get_by_event_id("ord_1")

        assert entry.amount_cents == 300
        assert await repo.get_by_event_id("ord_missing") is None
        assert len(await repo.get_by_affiliate(affiliate.id, status=LedgerStatus.PENDING)) == 1
        assert await repo.get_by_affiliate(affiliate.id, status=LedgerStatus.AVAILABLE) == []
        assert await repo.sum_by_status(affiliate.id) == {
            "PENDING": 300,
            "AVAILABLE": 0,
            "REVERSED": 0,
        }
