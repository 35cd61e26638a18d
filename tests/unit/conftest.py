"""
Shared fixtures for unit tests.

This module provides common fixtures used across multiple test modules:
- CommissionCalculator with default configuration
- CommissionCalculator with a non-default configuration
"""

from decimal import Decimal

import pytest

from commission_calculator import CommissionCalculator, CommissionConfig


@pytest.fixture
def calc() -> CommissionCalculator:
    """
    Create calculator with programme defaults.

    Returns:
        CommissionCalculator: 50/40/10 business, 25/20/5 per-side user rates
    """
    return CommissionCalculator()


@pytest.fixture
def custom_calc() -> CommissionCalculator:
    """
    Create calculator with a reconfigured floor.

    Returns:
        CommissionCalculator: 30% retained floor, configured cap of 80%
    """
    return CommissionCalculator(
        CommissionConfig(
            main_min_commission_pct=Decimal("0.30"),
            sub_min_commission_pct=Decimal("0.30"),
        )
    )
