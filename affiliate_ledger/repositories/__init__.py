"""
Repositories.

Data access layer with one repository per entity.
"""

from affiliate_ledger.repositories.affiliate_repository import AffiliateRepository
from affiliate_ledger.repositories.attribution_repository import AttributionRepository
from affiliate_ledger.repositories.base import BaseRepository
from affiliate_ledger.repositories.business_subscription_repository import (
    BusinessSubscriptionRepository,
)
from affiliate_ledger.repositories.commission_ledger_repository import (
    CommissionLedgerRepository,
)
from affiliate_ledger.repositories.promo_code_repository import PromoCodeRepository
from affiliate_ledger.repositories.referral_link_repository import ReferralLinkRepository
from affiliate_ledger.repositories.sub_affiliate_invite_repository import (
    SubAffiliateInviteRepository,
)


__all__ = [
    "BaseRepository",
    "AffiliateRepository",
    "ReferralLinkRepository",
    "AttributionRepository",
    "PromoCodeRepository",
    "BusinessSubscriptionRepository",
    "CommissionLedgerRepository",
    "SubAffiliateInviteRepository",
]
