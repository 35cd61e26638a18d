"""
ReferralLink repository.

Data access layer for ReferralLink model.
"""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from affiliate_ledger.models.referral_link import ReferralLink
from affiliate_ledger.repositories.base import BaseRepository
from affiliate_ledger.utils.datetime_utils import utc_now


class ReferralLinkRepository(BaseRepository[ReferralLink]):
    """ReferralLink repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize referral link repository."""
        super().__init__(ReferralLink, session)

    async def get_active_by_code(self, code: str) -> ReferralLink | None:
        """
        Get active link by its (already normalised) code.

        The owning affiliate is eagerly loaded.

        Args:
            code: Upper-case referral code

        Returns:
            ReferralLink or None if missing or deactivated
        """
        stmt = select(ReferralLink).where(
            ReferralLink.code == code,
            ReferralLink.is_active.is_(True),
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_code(self, code: str) -> ReferralLink | None:
        """Get link by code regardless of status."""
        return await self.get_by(code=code)

    async def code_exists(self, code: str) -> bool:
        """Check if a code has ever been issued."""
        return await self.exists(code=code)

    async def get_active_for_affiliate(self, affiliate_id: int) -> list[ReferralLink]:
        """Get all active links of an affiliate."""
        return await self.find_by(affiliate_id=affiliate_id, is_active=True)

    async def deactivate(self, link_id: int) -> bool:
        """
        Deactivate a link.

        Args:
            link_id: Link ID

        Returns:
            True if the link was active and is now deactivated
        """
        stmt = (
            update(ReferralLink)
            .where(ReferralLink.id == link_id, ReferralLink.is_active.is_(True))
            .values(is_active=False, deactivated_at=utc_now())
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0
