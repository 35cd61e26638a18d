"""
Affiliate Commission Calculator.

Standalone package for affiliate commission splits.

Example:
    >>> from commission_calculator import CommissionCalculator
    >>>
    >>> calc = CommissionCalculator()
    >>> result = calc.calculate_business_subscription_commission(
    ...     9900, discount_share_pct=80
    ... )
    >>> result.final_affiliate_commission_cents
    990
"""

from commission_calculator.core.calculator import CommissionCalculator, round_cents
from commission_calculator.core.models import BusinessCommissionResult, CommissionConfig
from commission_calculator.utils import format_cents, format_rate


__version__ = "1.0.0"
__all__ = [
    # Core
    "CommissionCalculator",
    "round_cents",
    # Models
    "CommissionConfig",
    "BusinessCommissionResult",
    # Formatters
    "format_cents",
    "format_rate",
]
