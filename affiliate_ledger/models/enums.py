"""
Enumerations shared by affiliate models.
"""

from enum import StrEnum


class AffiliateStatus(StrEnum):
    """Affiliate account status (soft state only, never deleted)."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


class AttributionType(StrEnum):
    """What kind of signup an attribution covers."""

    USER_SIGNUP = "USER_SIGNUP"
    BUSINESS_SIGNUP = "BUSINESS_SIGNUP"


class AttributionSource(StrEnum):
    """How the referral reached the platform."""

    REFERRAL_LINK = "REFERRAL_LINK"


class LedgerEventType(StrEnum):
    """Upstream event that produced a ledger entry."""

    INVOICE_PAID = "INVOICE_PAID"
    ORDER_PAID = "ORDER_PAID"
    REFUND = "REFUND"
    CHARGEBACK = "CHARGEBACK"


class LedgerStatus(StrEnum):
    """Ledger entry lifecycle: PENDING -> AVAILABLE, PENDING|AVAILABLE -> REVERSED."""

    PENDING = "PENDING"
    AVAILABLE = "AVAILABLE"
    REVERSED = "REVERSED"


class CommissionTier(StrEnum):
    """Position of the credited affiliate in the hierarchy."""

    DIRECT = "DIRECT"
    SUB = "SUB"
    PARENT = "PARENT"


class InviteStatus(StrEnum):
    """Sub-affiliate invite status."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    EXPIRED = "EXPIRED"
