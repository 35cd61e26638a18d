"""
Attribution service.

Records and looks up time-windowed signup attributions. Recording is a
side effect of signup and must never abort it.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from sqlalchemy.ext.asyncio import AsyncSession

from affiliate_ledger.config.settings import settings
from affiliate_ledger.models.attribution import Attribution
from affiliate_ledger.models.enums import AttributionSource, AttributionType
from affiliate_ledger.repositories.attribution_repository import AttributionRepository
from affiliate_ledger.services.base_service import BaseService
from affiliate_ledger.services.referral.resolver import ReferralResolver
from affiliate_ledger.utils.datetime_utils import days_from, utc_now
from affiliate_ledger.utils.exceptions import MUST_LOG


class AttributionSkipReason(StrEnum):
    """Why a signup was not attributed."""

    NO_REFERRAL = "NO_REFERRAL"
    SELF_REFERRAL = "SELF_REFERRAL"
    ALREADY_ATTRIBUTED = "ALREADY_ATTRIBUTED"
    STORAGE_ERROR = "STORAGE_ERROR"


@dataclass
class AttributionResult:
    """Outcome of a signup attribution attempt."""

    recorded: bool
    attribution_id: int | None = None
    affiliate_id: int | None = None
    skip_reason: AttributionSkipReason | None = None

    @classmethod
    def skipped(
        cls, reason: AttributionSkipReason, affiliate_id: int | None = None
    ) -> "AttributionResult":
        return cls(recorded=False, affiliate_id=affiliate_id, skip_reason=reason)


class AttributionService(BaseService):
    """
    Attribution store.

    Attributions are created once at signup and never mutated; they
    expire naturally at ``ends_at``.
    """

    def __init__(
        self,
        session: AsyncSession,
        attribution_window_days: int | None = None,
    ) -> None:
        super().__init__(session)
        self.attribution_repo = AttributionRepository(session)
        self.resolver = ReferralResolver(session)
        self.attribution_window_days = (
            attribution_window_days or settings.attribution_window_days
        )

    async def record_signup_attribution(
        self,
        new_user_id: str,
        referral_code: str | None,
        is_business: bool = False,
    ) -> AttributionResult:
        """
        Attribute a new signup to the affiliate owning ``referral_code``.

        Never raises: every failure becomes a skip reason. Lookups and the
        insert run in one savepoint, so a storage error rolls back only the
        attribution and leaves the caller's signup transaction usable. The
        caller commits.

        Args:
            new_user_id: Freshly created user
            referral_code: Code from the referral cookie (may be None)
            is_business: Business signups get a BUSINESS_SIGNUP record

        Returns:
            AttributionResult
        """
        attribution_type = (
            AttributionType.BUSINESS_SIGNUP if is_business else AttributionType.USER_SIGNUP
        )
        affiliate_id: int | None = None

        try:
            async with self.session.begin_nested():
                affiliate = await self.resolver.resolve_affiliate(referral_code)
                if affiliate is None:
                    return AttributionResult.skipped(AttributionSkipReason.NO_REFERRAL)
                affiliate_id = affiliate.id

                if affiliate.user_id == new_user_id:
                    self.logger.warning(
                        "Self-referral attempt blocked",
                        extra={"user_id": new_user_id, "affiliate_id": affiliate_id},
                    )
                    return AttributionResult.skipped(
                        AttributionSkipReason.SELF_REFERRAL, affiliate_id
                    )

                now = utc_now()
                existing = await self.attribution_repo.find_active(
                    new_user_id, attribution_type, now
                )
                if existing:
                    self.logger.info(
                        "User already attributed",
                        extra={
                            "user_id": new_user_id,
                            "type": attribution_type,
                            "affiliate_id": existing.affiliate_id,
                        },
                    )
                    return AttributionResult.skipped(
                        AttributionSkipReason.ALREADY_ATTRIBUTED, existing.affiliate_id
                    )

                attribution = await self.attribution_repo.create(
                    user_id=new_user_id,
                    affiliate_id=affiliate_id,
                    type=attribution_type,
                    source=AttributionSource.REFERRAL_LINK,
                    starts_at=now,
                    ends_at=days_from(now, self.attribution_window_days),
                )
                attribution_id = attribution.id

        except MUST_LOG as e:
            self.logger.error(
                "Failed to record attribution",
                extra={
                    "user_id": new_user_id,
                    "affiliate_id": affiliate_id,
                    "error": type(e).__name__,
                },
            )
            return AttributionResult.skipped(AttributionSkipReason.STORAGE_ERROR, affiliate_id)

        self.logger.info(
            "Attribution recorded",
            extra={
                "attribution_id": attribution_id,
                "user_id": new_user_id,
                "affiliate_id": affiliate_id,
                "type": attribution_type,
            },
        )
        return AttributionResult(
            recorded=True,
            attribution_id=attribution_id,
            affiliate_id=affiliate_id,
        )

    async def find_active_attribution(
        self,
        user_id: str,
        attribution_type: AttributionType | str,
        as_of: datetime | None = None,
    ) -> Attribution | None:
        """
        Find the attribution covering ``as_of`` (defaults to now).

        Args:
            user_id: Attributed user ID
            attribution_type: USER_SIGNUP or BUSINESS_SIGNUP
            as_of: Point in time

        Returns:
            Attribution or None
        """
        return await self.attribution_repo.find_active(
            user_id, attribution_type, as_of or utc_now()
        )
