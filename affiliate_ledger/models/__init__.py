"""
Database models.

Exports all SQLAlchemy models so metadata is complete on import.
"""

from affiliate_ledger.models.affiliate import Affiliate
from affiliate_ledger.models.attribution import Attribution
from affiliate_ledger.models.base import Base
from affiliate_ledger.models.business_subscription import BusinessSubscription
from affiliate_ledger.models.commission_ledger import CommissionLedgerEntry
from affiliate_ledger.models.enums import (
    AffiliateStatus,
    AttributionSource,
    AttributionType,
    CommissionTier,
    InviteStatus,
    LedgerEventType,
    LedgerStatus,
)
from affiliate_ledger.models.promo_code import PromoCode
from affiliate_ledger.models.referral_link import ReferralLink
from affiliate_ledger.models.sub_affiliate_invite import SubAffiliateInvite


__all__ = [
    "Base",
    "Affiliate",
    "ReferralLink",
    "Attribution",
    "PromoCode",
    "BusinessSubscription",
    "CommissionLedgerEntry",
    "SubAffiliateInvite",
    # Enums
    "AffiliateStatus",
    "AttributionType",
    "AttributionSource",
    "LedgerEventType",
    "LedgerStatus",
    "CommissionTier",
    "InviteStatus",
]
