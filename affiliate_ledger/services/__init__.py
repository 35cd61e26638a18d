"""
Services.

Business logic layer of the affiliate programme.
"""

from affiliate_ledger.services.affiliate_service import AffiliateService
from affiliate_ledger.services.attribution import (
    AttributionResult,
    AttributionService,
    AttributionSkipReason,
    CookieAttributionBridge,
)
from affiliate_ledger.services.business_subscription_service import (
    BusinessSubscriptionService,
)
from affiliate_ledger.services.invite_service import SubAffiliateInviteService
from affiliate_ledger.services.ledger import (
    CommissionLedgerService,
    LedgerQueryService,
    LedgerReleaseService,
    LedgerResult,
    LedgerSkipReason,
)
from affiliate_ledger.services.promo_code_service import PromoCodeService
from affiliate_ledger.services.referral import ReferralLinkService, ReferralResolver


__all__ = [
    "AffiliateService",
    "ReferralResolver",
    "ReferralLinkService",
    "AttributionService",
    "AttributionResult",
    "AttributionSkipReason",
    "CookieAttributionBridge",
    "CommissionLedgerService",
    "LedgerResult",
    "LedgerSkipReason",
    "LedgerReleaseService",
    "LedgerQueryService",
    "PromoCodeService",
    "BusinessSubscriptionService",
    "SubAffiliateInviteService",
]
