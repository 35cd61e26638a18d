"""
Core calculator functionality.

Commission formulas and their data models.
"""

from commission_calculator.core.calculator import CommissionCalculator, round_cents
from commission_calculator.core.models import BusinessCommissionResult, CommissionConfig

__all__ = [
    "CommissionCalculator",
    "CommissionConfig",
    "BusinessCommissionResult",
    "round_cents",
]
