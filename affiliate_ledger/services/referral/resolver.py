"""
Referral code resolver.

Maps an inbound referral code to the affiliate that owns it.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from affiliate_ledger.models.affiliate import Affiliate
from affiliate_ledger.repositories.referral_link_repository import ReferralLinkRepository
from affiliate_ledger.services.base_service import BaseService


def normalize_code(code: str | None) -> str | None:
    """
    Normalise a user-supplied code (strip, upper-case).

    Returns:
        Normalised code or None if blank
    """
    if code is None:
        return None
    normalized = code.strip().upper()
    return normalized or None


class ReferralResolver(BaseService):
    """
    Resolves referral codes.

    Pure read: never writes, never raises for unknown codes since most
    signups carry no referral at all.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.link_repo = ReferralLinkRepository(session)

    async def resolve_affiliate(self, code: str | None) -> Affiliate | None:
        """
        Resolve a code to its affiliate.

        Args:
            code: Raw referral code

        Returns:
            Affiliate, or None if the code is blank, unknown, deactivated
            or its affiliate is not ACTIVE
        """
        normalized = normalize_code(code)
        if normalized is None:
            return None

        link = await self.link_repo.get_active_by_code(normalized)
        if link is None:
            self.logger.debug(
                "Referral code not found or inactive",
                extra={"code": normalized},
            )
            return None

        affiliate = link.affiliate
        if affiliate is None or not affiliate.is_active:
            self.logger.debug(
                "Referral code belongs to an inactive affiliate",
                extra={"code": normalized, "affiliate_id": link.affiliate_id},
            )
            return None

        return affiliate

    async def resolve(self, code: str | None) -> int | None:
        """
        Resolve a code to an affiliate ID.

        Args:
            code: Raw referral code

        Returns:
            Affiliate ID or None
        """
        affiliate = await self.resolve_affiliate(code)
        return affiliate.id if affiliate else None
