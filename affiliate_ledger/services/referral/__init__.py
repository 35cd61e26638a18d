"""
Referral services.

Code resolution and referral link issuance.
"""

from affiliate_ledger.services.referral.link_service import ReferralLinkService
from affiliate_ledger.services.referral.resolver import ReferralResolver, normalize_code


__all__ = [
    "ReferralResolver",
    "ReferralLinkService",
    "normalize_code",
]
