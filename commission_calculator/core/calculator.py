"""
Pure business logic calculator for affiliate commissions.

This module contains standalone calculation logic without any
dependencies on database, ORM, or app-specific code. All amounts are
integer cents; rates are Decimal fractions.
"""

from decimal import ROUND_HALF_UP, Decimal

from commission_calculator.core.models import BusinessCommissionResult, CommissionConfig


_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def round_cents(value: Decimal) -> int:
    """
    Round a Decimal amount to the nearest whole cent (half up).

    Example:
        >>> round_cents(Decimal("1237.5"))
        1238
    """
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _as_rate(value: Decimal | float | str | None) -> Decimal | None:
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class CommissionCalculator:
    """
    Pure business logic calculator for affiliate commissions.

    Two independent formulas:
    - business subscription revenue share (with self-funded discount)
    - per-order user transaction fee share (per attributed side)

    Both select a base rate from the hierarchy position (direct vs
    sub-affiliate); a per-affiliate custom rate takes precedence.
    """

    def __init__(self, config: CommissionConfig | None = None) -> None:
        """
        Initialize calculator.

        Args:
            config: Immutable commission configuration (defaults if omitted)
        """
        self.config = config or CommissionConfig()

    # === Tier helpers ===

    def business_commission_pct(
        self,
        is_sub_affiliate: bool = False,
        custom_commission_pct: Decimal | float | None = None,
    ) -> Decimal:
        """Affiliate rate for business subscriptions."""
        custom = _as_rate(custom_commission_pct)
        if custom is not None:
            return custom
        if is_sub_affiliate:
            return self.config.sub_business_commission_pct
        return self.config.business_commission_pct

    def user_commission_pct(
        self,
        is_sub_affiliate: bool = False,
        custom_commission_pct: Decimal | float | None = None,
    ) -> Decimal:
        """Per-side affiliate rate for user transactions."""
        custom = _as_rate(custom_commission_pct)
        if custom is not None:
            return custom
        if is_sub_affiliate:
            return self.config.sub_user_commission_pct
        return self.config.user_commission_pct

    def min_commission_pct(self, is_sub_affiliate: bool = False) -> Decimal:
        """Fraction of the nominal commission an affiliate always retains."""
        if is_sub_affiliate:
            return self.config.sub_min_commission_pct
        return self.config.main_min_commission_pct

    def max_discount_pct(self, is_sub_affiliate: bool = False) -> Decimal:
        """
        Effective discount cap (percent of the affiliate's commission).

        The configured cap is bounded by the retained-commission floor, so
        reconfiguring either value can never promise a discount the floor
        would later claw back.

        Example:
            >>> calc = CommissionCalculator()
            >>> calc.max_discount_pct(is_sub_affiliate=False)
            Decimal('80')
            >>> calc.max_discount_pct(is_sub_affiliate=True)
            Decimal('75')
        """
        configured = (
            self.config.sub_max_discount_pct
            if is_sub_affiliate
            else self.config.main_max_discount_pct
        )
        floor_bound = _HUNDRED - self.min_commission_pct(is_sub_affiliate) * _HUNDRED
        return min(configured, floor_bound)

    # === Business subscriptions ===

    def apply_discount(
        self,
        commission_cents: int,
        discount_pct: Decimal | float | int,
        is_sub_affiliate: bool = False,
    ) -> tuple[int, int]:
        """
        Apply a self-funded discount to the affiliate's commission.

        The retained-commission floor always wins over the requested
        discount.

        Args:
            commission_cents: Nominal affiliate commission
            discount_pct: Discount as percent (0-100) of the commission
            is_sub_affiliate: Selects the tier floor

        Returns:
            Tuple of (discount_cents, remaining_commission_cents)

        Example:
            >>> calc = CommissionCalculator()
            >>> calc.apply_discount(4950, 80)
            (3960, 990)
        """
        if commission_cents <= 0:
            return 0, 0

        pct = min(max(Decimal(str(discount_pct)), _ZERO), _HUNDRED)
        discount_cents = round_cents(Decimal(commission_cents) * pct / _HUNDRED)

        min_commission_cents = round_cents(
            Decimal(commission_cents) * self.min_commission_pct(is_sub_affiliate)
        )
        if commission_cents - discount_cents < min_commission_cents:
            discount_cents = commission_cents - min_commission_cents

        return discount_cents, commission_cents - discount_cents

    def calculate_business_subscription_commission(
        self,
        subscription_fee_cents: int,
        discount_share_pct: Decimal | float | int = 0,
        is_sub_affiliate: bool = False,
        custom_commission_pct: Decimal | float | None = None,
    ) -> BusinessCommissionResult:
        """
        Calculate the split of a business subscription payment.

        Formula:
            commission = round(fee * rate)          50% direct / 40% sub
            platform   = round(fee * 50%)           independent of discount
            discount   = round(commission * min(requested, cap) / 100),
                         clamped so commission - discount >= floor

        Args:
            subscription_fee_cents: Pre-discount base price
            discount_share_pct: Affiliate-chosen discount (0-100)
            is_sub_affiliate: Whether the affiliate has a parent
            custom_commission_pct: Per-affiliate override

        Returns:
            BusinessCommissionResult

        Example:
            >>> calc = CommissionCalculator()
            >>> r = calc.calculate_business_subscription_commission(9900, 80)
            >>> (r.final_affiliate_commission_cents, r.final_price_cents)
            (990, 5940)
        """
        fee = Decimal(max(subscription_fee_cents, 0))
        commission_pct = self.business_commission_pct(is_sub_affiliate, custom_commission_pct)

        affiliate_commission_cents = round_cents(fee * commission_pct)
        homecheff_share_cents = round_cents(fee * self.config.homecheff_business_share_pct)

        requested = min(max(Decimal(str(discount_share_pct)), _ZERO), _HUNDRED)
        applied_discount_pct = min(requested, self.max_discount_pct(is_sub_affiliate))

        discount_cents, final_commission_cents = self.apply_discount(
            affiliate_commission_cents, applied_discount_pct, is_sub_affiliate
        )

        return BusinessCommissionResult(
            subscription_fee_cents=int(fee),
            commission_pct=commission_pct,
            applied_discount_pct=applied_discount_pct,
            affiliate_commission_cents=affiliate_commission_cents,
            discount_cents=discount_cents,
            final_price_cents=int(fee) - discount_cents,
            homecheff_share_cents=homecheff_share_cents,
            final_affiliate_commission_cents=final_commission_cents,
        )

    def calculate_parent_business_commission(
        self,
        subscription_fee_cents: int,
        custom_parent_commission_pct: Decimal | float | None = None,
    ) -> int:
        """
        Calculate the upline's share of a sub-affiliate's subscription.

        Additive: never subtracted from the sub-affiliate's commission.

        Example:
            >>> CommissionCalculator().calculate_parent_business_commission(9900)
            990
        """
        if subscription_fee_cents <= 0:
            return 0

        custom = _as_rate(custom_parent_commission_pct)
        pct = custom if custom is not None else self.config.parent_business_commission_pct
        return round_cents(Decimal(subscription_fee_cents) * pct)

    def calculate_subscription_price(
        self,
        base_price_cents: int,
        discount_share_pct: Decimal | float | int,
        is_sub_affiliate: bool = False,
    ) -> BusinessCommissionResult:
        """
        Preview the price a business pays with an affiliate promo code.

        Same breakdown as the invoice-time split, for checkout display.
        """
        return self.calculate_business_subscription_commission(
            base_price_cents, discount_share_pct, is_sub_affiliate
        )

    # === User transactions ===

    def calculate_user_transaction_commission(
        self,
        homecheff_fee_cents: int,
        buyer_attributed: bool,
        seller_attributed: bool,
        is_sub_affiliate: bool = False,
        custom_commission_pct: Decimal | float | None = None,
    ) -> int:
        """
        Calculate the direct affiliate's share of one order's platform fee.

        The per-side share is rounded once and added for every attributed
        side, so a two-sided order earns exactly twice a one-sided one.

        Args:
            homecheff_fee_cents: Platform fee, net of processor costs
            buyer_attributed: Buyer acquired by the affiliate
            seller_attributed: Seller acquired by the affiliate
            is_sub_affiliate: Whether the affiliate has a parent
            custom_commission_pct: Per-affiliate per-side override

        Returns:
            Commission in cents

        Example:
            >>> calc = CommissionCalculator()
            >>> calc.calculate_user_transaction_commission(1200, True, True, True)
            480
        """
        pct = self.user_commission_pct(is_sub_affiliate, custom_commission_pct)
        return self._per_side_commission(
            homecheff_fee_cents, pct, buyer_attributed, seller_attributed
        )

    def calculate_parent_user_transaction_commission(
        self,
        homecheff_fee_cents: int,
        buyer_attributed: bool,
        seller_attributed: bool,
        custom_parent_commission_pct: Decimal | float | None = None,
    ) -> int:
        """
        Calculate the upline's share of a sub-affiliate's order.

        Example:
            >>> calc = CommissionCalculator()
            >>> calc.calculate_parent_user_transaction_commission(1200, True, False)
            60
        """
        custom = _as_rate(custom_parent_commission_pct)
        pct = custom if custom is not None else self.config.parent_user_commission_pct
        return self._per_side_commission(
            homecheff_fee_cents, pct, buyer_attributed, seller_attributed
        )

    def _per_side_commission(
        self,
        fee_cents: int,
        pct: Decimal,
        buyer_attributed: bool,
        seller_attributed: bool,
    ) -> int:
        if fee_cents <= 0 or pct <= 0:
            return 0

        sides = int(buyer_attributed) + int(seller_attributed)
        return round_cents(Decimal(fee_cents) * pct) * sides
