"""
Affiliate repository.

Data access layer for Affiliate model.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from affiliate_ledger.models.affiliate import Affiliate
from affiliate_ledger.repositories.base import BaseRepository


class AffiliateRepository(BaseRepository[Affiliate]):
    """Affiliate repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize affiliate repository."""
        super().__init__(Affiliate, session)

    async def get_by_user_id(self, user_id: str) -> Affiliate | None:
        """
        Get affiliate owned by a user.

        Args:
            user_id: Owning user ID

        Returns:
            Affiliate or None
        """
        return await self.get_by(user_id=user_id)

    async def get_sub_affiliates(self, parent_affiliate_id: int) -> list[Affiliate]:
        """
        Get direct downline of an affiliate.

        Args:
            parent_affiliate_id: Upline affiliate ID

        Returns:
            List of sub-affiliates, oldest first
        """
        stmt = (
            select(Affiliate)
            .where(Affiliate.parent_affiliate_id == parent_affiliate_id)
            .order_by(Affiliate.created_at, Affiliate.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_sub_affiliates(self, parent_affiliate_id: int) -> int:
        """Count direct downline of an affiliate."""
        return await self.count(parent_affiliate_id=parent_affiliate_id)
