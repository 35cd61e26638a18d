"""
Business logic constants for the affiliate programme.

Central location for programme rules used across services. Commission
rates come from the standalone calculator package so there is a single
source of truth for the maths.
"""

from commission_calculator.constants import (  # noqa: F401
    BUSINESS_COMMISSION_PCT,
    HOMECHEFF_BUSINESS_SHARE_PCT,
    MAIN_MAX_DISCOUNT_PCT,
    MAIN_MIN_COMMISSION_PCT,
    PARENT_BUSINESS_COMMISSION_PCT,
    PARENT_USER_COMMISSION_PCT,
    SUB_BUSINESS_COMMISSION_PCT,
    SUB_MAX_DISCOUNT_PCT,
    SUB_MIN_COMMISSION_PCT,
    SUB_USER_COMMISSION_PCT,
    USER_COMMISSION_PCT,
)


# Revenue-share / attribution window
ATTRIBUTION_WINDOW_DAYS = 365

# Days a new ledger entry stays PENDING before it can be paid out
LEDGER_PENDING_DAYS = 14

# Referral cookie set by the landing page, read once at signup
REFERRAL_COOKIE_NAME = "hc_ref"
REFERRAL_COOKIE_TTL_DAYS = 30

# Minimum AVAILABLE balance before a payout can be requested
MIN_PAYOUT_AMOUNT_CENTS = 1000

DEFAULT_CURRENCY = "eur"

# Referral code format: REF + 8 chars of the user id + 4 hex chars
REFERRAL_CODE_PREFIX = "REF"
REFERRAL_CODE_USER_CHARS = 8
REFERRAL_CODE_RANDOM_BYTES = 2
REFERRAL_CODE_MAX_ATTEMPTS = 5

# Sub-affiliate invites
SUB_AFFILIATE_INVITE_TTL_DAYS = 7

# Suffix for the upline entry written next to a sub-affiliate entry
PARENT_EVENT_SUFFIX = "_parent"
