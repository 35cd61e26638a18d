"""
Promo code service.

Affiliate-funded discount codes for business subscriptions and the
checkout price preview they drive.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from affiliate_ledger.config.settings import settings
from affiliate_ledger.models.affiliate import Affiliate
from affiliate_ledger.models.promo_code import PromoCode
from affiliate_ledger.repositories.affiliate_repository import AffiliateRepository
from affiliate_ledger.repositories.promo_code_repository import PromoCodeRepository
from affiliate_ledger.services.base_service import BaseService, transaction
from affiliate_ledger.services.referral.resolver import normalize_code
from affiliate_ledger.utils.exceptions import InvalidPromoCodeError
from commission_calculator import BusinessCommissionResult, CommissionCalculator


class PromoCodeService(BaseService):
    """Promo code management and pricing."""

    def __init__(
        self, session: AsyncSession, calculator: CommissionCalculator | None = None
    ) -> None:
        super().__init__(session)
        self.promo_repo = PromoCodeRepository(session)
        self.affiliate_repo = AffiliateRepository(session)
        self.calculator = calculator or CommissionCalculator(settings.commission_config())

    def _validate_discount(self, affiliate: Affiliate, discount_share_pct: int) -> None:
        if not 0 <= discount_share_pct <= 100:
            raise InvalidPromoCodeError("Discount share must be between 0 and 100")

        cap = self.calculator.max_discount_pct(affiliate.is_sub_affiliate)
        if discount_share_pct > cap:
            raise InvalidPromoCodeError(
                f"Discount share {discount_share_pct}% exceeds the {cap}% cap "
                f"for this affiliate tier"
            )

    async def _get_active_affiliate(self, affiliate_id: int) -> Affiliate:
        affiliate = await self.affiliate_repo.get_by_id(affiliate_id)
        if affiliate is None or not affiliate.is_active:
            raise InvalidPromoCodeError(f"Affiliate {affiliate_id} is not active")
        return affiliate

    @transaction
    async def create_promo_code(
        self, affiliate_id: int, code: str, discount_share_pct: int = 0
    ) -> PromoCode:
        """
        Create a promo code.

        Args:
            affiliate_id: Funding affiliate
            code: Desired code (normalised to upper-case)
            discount_share_pct: Percent of the affiliate's commission given away

        Returns:
            Created PromoCode

        Raises:
            InvalidPromoCodeError: If the code is taken or the discount is out of range
        """
        normalized = normalize_code(code)
        if normalized is None:
            raise InvalidPromoCodeError("Promo code cannot be empty")

        affiliate = await self._get_active_affiliate(affiliate_id)
        self._validate_discount(affiliate, discount_share_pct)

        if await self.promo_repo.get_by_code(normalized):
            raise InvalidPromoCodeError(f"Promo code {normalized} already exists")

        promo = await self.promo_repo.create(
            affiliate_id=affiliate_id,
            code=normalized,
            discount_share_pct=discount_share_pct,
            is_active=True,
        )
        self.logger.info(
            "Promo code created",
            extra={
                "affiliate_id": affiliate_id,
                "code": normalized,
                "discount_share_pct": discount_share_pct,
            },
        )
        return promo

    @transaction
    async def update_discount(self, promo_code_id: int, discount_share_pct: int) -> PromoCode:
        """
        Change the discount of an existing promo code.

        Raises:
            InvalidPromoCodeError: If the code is unknown or the discount is out of range
        """
        promo = await self.promo_repo.get_by_id(promo_code_id)
        if promo is None:
            raise InvalidPromoCodeError(f"Promo code {promo_code_id} not found")

        affiliate = await self._get_active_affiliate(promo.affiliate_id)
        self._validate_discount(affiliate, discount_share_pct)

        promo = await self.promo_repo.update(
            promo_code_id, discount_share_pct=discount_share_pct
        )
        self.logger.info(
            "Promo code discount updated",
            extra={"code": promo.code, "discount_share_pct": discount_share_pct},
        )
        return promo

    @transaction
    async def deactivate(self, promo_code_id: int) -> bool:
        """Deactivate a promo code; False if unknown or already inactive."""
        promo = await self.promo_repo.get_by_id(promo_code_id)
        if promo is None or not promo.is_active:
            return False

        await self.promo_repo.update(promo_code_id, is_active=False)
        self.logger.info("Promo code deactivated", extra={"code": promo.code})
        return True

    async def get_active(self, code: str) -> PromoCode | None:
        """Look up an active promo code by user input."""
        normalized = normalize_code(code)
        if normalized is None:
            return None
        return await self.promo_repo.get_active_by_code(normalized)

    async def price_preview(self, code: str, base_price_cents: int) -> BusinessCommissionResult:
        """
        Preview what a business pays with a promo code.

        Args:
            code: Promo code entered at checkout
            base_price_cents: Undiscounted subscription price

        Returns:
            Full price breakdown

        Raises:
            InvalidPromoCodeError: If the code is unknown or inactive
        """
        promo = await self.get_active(code)
        if promo is None:
            raise InvalidPromoCodeError(f"Promo code {code} is not valid")

        affiliate = await self.affiliate_repo.get_by_id(promo.affiliate_id)
        return self.calculator.calculate_subscription_price(
            base_price_cents,
            promo.discount_share_pct,
            is_sub_affiliate=affiliate.is_sub_affiliate,
        )
