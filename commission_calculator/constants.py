"""
Default commission constants for the affiliate programme.

Percentages are fractions of the base amount (0.25 = 25%), except the
discount caps which are whole percentages of the affiliate's own share.
"""

from decimal import Decimal


# User transactions (buyer / seller side of a marketplace order)
USER_COMMISSION_PCT = Decimal("0.25")  # per attributed side, direct affiliate
SUB_USER_COMMISSION_PCT = Decimal("0.20")  # per attributed side, sub-affiliate
PARENT_USER_COMMISSION_PCT = Decimal("0.05")  # per attributed side, upline

# Business subscriptions
BUSINESS_COMMISSION_PCT = Decimal("0.50")
SUB_BUSINESS_COMMISSION_PCT = Decimal("0.40")
PARENT_BUSINESS_COMMISSION_PCT = Decimal("0.10")
HOMECHEFF_BUSINESS_SHARE_PCT = Decimal("0.50")  # never discounted

# Self-funded discount caps (percent of the affiliate's commission)
MAIN_MAX_DISCOUNT_PCT = Decimal("80")
SUB_MAX_DISCOUNT_PCT = Decimal("75")

# Retained commission floor (fraction of the affiliate's commission)
MAIN_MIN_COMMISSION_PCT = Decimal("0.20")
SUB_MIN_COMMISSION_PCT = Decimal("0.20")
