"""
Affiliate service.

Onboarding and administration of affiliates within the two-level
hierarchy (direct affiliates and their sub-affiliates).
"""

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from affiliate_ledger.models.affiliate import Affiliate
from affiliate_ledger.models.enums import AffiliateStatus
from affiliate_ledger.repositories.affiliate_repository import AffiliateRepository
from affiliate_ledger.services.base_service import BaseService, transaction
from affiliate_ledger.services.referral.link_service import ReferralLinkService
from affiliate_ledger.utils.exceptions import AffiliateError, AffiliateHierarchyError
from commission_calculator import format_rate


_CUSTOM_RATE_FIELDS = {
    "user": "custom_user_commission_pct",
    "business": "custom_business_commission_pct",
    "parent_user": "custom_parent_user_commission_pct",
    "parent_business": "custom_parent_business_commission_pct",
}


class AffiliateService(BaseService):
    """Affiliate onboarding, status and hierarchy management."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.affiliate_repo = AffiliateRepository(session)
        self.link_service = ReferralLinkService(session)

    async def validate_parent(
        self, parent_affiliate_id: int, child_affiliate_id: int | None = None
    ) -> Affiliate:
        """
        Check that an affiliate may act as an upline.

        The hierarchy is at most two levels deep: a parent must be a
        top-level, ACTIVE affiliate and cannot be the child itself.

        Returns:
            Parent affiliate

        Raises:
            AffiliateHierarchyError: If the parent is not eligible
        """
        if child_affiliate_id is not None and parent_affiliate_id == child_affiliate_id:
            raise AffiliateHierarchyError("Affiliate cannot be its own parent")

        parent = await self.affiliate_repo.get_by_id(parent_affiliate_id)
        if parent is None:
            raise AffiliateHierarchyError(f"Parent affiliate {parent_affiliate_id} not found")
        if not parent.is_active:
            raise AffiliateHierarchyError(
                f"Parent affiliate {parent_affiliate_id} is {parent.status}"
            )
        if parent.is_sub_affiliate:
            raise AffiliateHierarchyError(
                f"Affiliate {parent_affiliate_id} is a sub-affiliate and cannot have a downline"
            )
        return parent

    @transaction
    async def create_affiliate(
        self, user_id: str, parent_affiliate_id: int | None = None
    ) -> Affiliate:
        """
        Onboard a user as an affiliate and issue their first referral link.

        Args:
            user_id: Owning user ID
            parent_affiliate_id: Upline for a sub-affiliate

        Returns:
            Created affiliate (or the existing one for this user)

        Raises:
            AffiliateHierarchyError: If the parent is not eligible
        """
        existing = await self.affiliate_repo.get_by_user_id(user_id)
        if existing:
            self.logger.info(
                "User is already an affiliate",
                extra={"user_id": user_id, "affiliate_id": existing.id},
            )
            return existing

        if parent_affiliate_id is not None:
            await self.validate_parent(parent_affiliate_id)

        affiliate = await self.affiliate_repo.create(
            user_id=user_id,
            status=AffiliateStatus.ACTIVE,
            parent_affiliate_id=parent_affiliate_id,
        )
        await self.link_service.create_link_for(affiliate)

        self.logger.info(
            "Affiliate created",
            extra={
                "affiliate_id": affiliate.id,
                "user_id": user_id,
                "parent_affiliate_id": parent_affiliate_id,
            },
        )
        return affiliate

    @transaction
    async def set_status(self, affiliate_id: int, status: AffiliateStatus | str) -> Affiliate:
        """
        Change affiliate status.

        Soft state only; existing ledger entries stay attributable.

        Raises:
            AffiliateError: If the affiliate does not exist or status is unknown
        """
        try:
            new_status = AffiliateStatus(status)
        except ValueError as e:
            raise AffiliateError(f"Unknown affiliate status: {status}") from e

        affiliate = await self.affiliate_repo.update(affiliate_id, status=new_status)
        if affiliate is None:
            raise AffiliateError(f"Affiliate {affiliate_id} not found")

        self.logger.info(
            "Affiliate status changed",
            extra={"affiliate_id": affiliate_id, "status": new_status},
        )
        return affiliate

    @transaction
    async def assign_parent(
        self, affiliate_id: int, parent_affiliate_id: int | None
    ) -> Affiliate:
        """
        Attach an affiliate to an upline, or detach it with ``None``.

        An affiliate that already has a downline cannot become a
        sub-affiliate itself.

        Raises:
            AffiliateError: If the affiliate does not exist
            AffiliateHierarchyError: If the hierarchy would break
        """
        affiliate = await self.affiliate_repo.get_by_id(affiliate_id)
        if affiliate is None:
            raise AffiliateError(f"Affiliate {affiliate_id} not found")

        if parent_affiliate_id is not None:
            await self.validate_parent(parent_affiliate_id, affiliate_id)
            if await self.affiliate_repo.count_sub_affiliates(affiliate_id) > 0:
                raise AffiliateHierarchyError(
                    f"Affiliate {affiliate_id} has sub-affiliates and cannot get a parent"
                )

        affiliate = await self.affiliate_repo.update(
            affiliate_id, parent_affiliate_id=parent_affiliate_id
        )
        self.logger.info(
            "Affiliate parent assigned",
            extra={"affiliate_id": affiliate_id, "parent_affiliate_id": parent_affiliate_id},
        )
        return affiliate

    @transaction
    async def set_custom_commission(
        self,
        affiliate_id: int,
        **rates: Decimal | None,
    ) -> Affiliate:
        """
        Set per-affiliate commission overrides.

        Keyword names: ``user``, ``business``, ``parent_user``,
        ``parent_business``. Values are fractions in [0, 1]; ``None``
        clears an override.

        Raises:
            AffiliateError: If the affiliate does not exist
            ValueError: If a name or value is invalid
        """
        updates: dict[str, Decimal | None] = {}
        for name, value in rates.items():
            if name not in _CUSTOM_RATE_FIELDS:
                raise ValueError(f"Unknown commission override: {name}")
            if value is not None:
                value = Decimal(str(value))
                if not Decimal("0") <= value <= Decimal("1"):
                    raise ValueError(f"Commission override {name} must be between 0 and 1")
            updates[_CUSTOM_RATE_FIELDS[name]] = value

        affiliate = await self.affiliate_repo.update(affiliate_id, **updates)
        if affiliate is None:
            raise AffiliateError(f"Affiliate {affiliate_id} not found")

        self.logger.info(
            "Affiliate commission overrides updated",
            extra={
                "affiliate_id": affiliate_id,
                "overrides": {
                    k: format_rate(v, decimals=2) if v is not None else None
                    for k, v in updates.items()
                },
            },
        )
        return affiliate
