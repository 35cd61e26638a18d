"""
Referral link service.

Issues and deactivates affiliate referral codes.
"""

import secrets

from sqlalchemy.ext.asyncio import AsyncSession

from affiliate_ledger.config.business_constants import (
    REFERRAL_CODE_MAX_ATTEMPTS,
    REFERRAL_CODE_PREFIX,
    REFERRAL_CODE_RANDOM_BYTES,
    REFERRAL_CODE_USER_CHARS,
)
from affiliate_ledger.models.affiliate import Affiliate
from affiliate_ledger.models.referral_link import ReferralLink
from affiliate_ledger.repositories.affiliate_repository import AffiliateRepository
from affiliate_ledger.repositories.referral_link_repository import ReferralLinkRepository
from affiliate_ledger.services.base_service import BaseService, transaction
from affiliate_ledger.services.referral.resolver import normalize_code
from affiliate_ledger.utils.exceptions import AffiliateError


def generate_referral_code(user_id: str) -> str:
    """
    Build a referral code for a user.

    Format: ``REF`` + first 8 characters of the user id + 4 random hex
    characters, all upper-case.

    Example:
        >>> code = generate_referral_code("ckx9a8b7c6d5")
        >>> code.startswith("REFCKX9A8B7")
        True
    """
    user_part = "".join(ch for ch in user_id if ch.isalnum())[:REFERRAL_CODE_USER_CHARS]
    random_part = secrets.token_hex(REFERRAL_CODE_RANDOM_BYTES)
    return f"{REFERRAL_CODE_PREFIX}{user_part}{random_part}".upper()


class ReferralLinkService(BaseService):
    """Referral link issuance and deactivation."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.link_repo = ReferralLinkRepository(session)
        self.affiliate_repo = AffiliateRepository(session)

    async def create_link_for(self, affiliate: Affiliate) -> ReferralLink:
        """
        Create a unique link for an affiliate without committing.

        Used inside larger units of work (e.g. invite acceptance).

        Raises:
            AffiliateError: If no unique code could be generated
        """
        for _ in range(REFERRAL_CODE_MAX_ATTEMPTS):
            code = generate_referral_code(affiliate.user_id)
            if not await self.link_repo.code_exists(code):
                return await self.link_repo.create(
                    affiliate_id=affiliate.id,
                    code=code,
                    is_active=True,
                )

        raise AffiliateError(
            f"Could not generate a unique referral code for affiliate {affiliate.id}"
        )

    @transaction
    async def issue_link(self, affiliate_id: int) -> ReferralLink:
        """
        Issue a new referral link.

        Args:
            affiliate_id: Owning affiliate

        Returns:
            Created ReferralLink

        Raises:
            AffiliateError: If the affiliate does not exist
        """
        affiliate = await self.affiliate_repo.get_by_id(affiliate_id)
        if affiliate is None:
            raise AffiliateError(f"Affiliate {affiliate_id} not found")

        link = await self.create_link_for(affiliate)
        self.logger.info(
            "Referral link issued",
            extra={"affiliate_id": affiliate_id, "code": link.code},
        )
        return link

    @transaction
    async def deactivate_link(self, code: str) -> bool:
        """
        Deactivate a referral link.

        Attributions already recorded through the link are unaffected.

        Returns:
            True if the link existed and was active
        """
        normalized = normalize_code(code)
        if normalized is None:
            return False

        link = await self.link_repo.get_by_code(normalized)
        if link is None:
            return False

        deactivated = await self.link_repo.deactivate(link.id)
        if deactivated:
            self.logger.info(
                "Referral link deactivated",
                extra={"affiliate_id": link.affiliate_id, "code": normalized},
            )
        return deactivated
