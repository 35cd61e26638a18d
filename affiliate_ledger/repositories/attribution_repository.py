"""
Attribution repository.

Data access layer for Attribution model.
"""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from affiliate_ledger.models.attribution import Attribution
from affiliate_ledger.repositories.base import BaseRepository


class AttributionRepository(BaseRepository[Attribution]):
    """Attribution repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize attribution repository."""
        super().__init__(Attribution, session)

    async def find_active(
        self, user_id: str, attribution_type: str, as_of: datetime
    ) -> Attribution | None:
        """
        Find the attribution covering ``as_of``.

        ``starts_at <= as_of <= ends_at``. Historical duplicates are
        possible, so the earliest-created record wins.

        Args:
            user_id: Attributed user ID
            attribution_type: USER_SIGNUP or BUSINESS_SIGNUP
            as_of: Point in time to check

        Returns:
            Attribution or None
        """
        stmt = (
            select(Attribution)
            .where(
                Attribution.user_id == user_id,
                Attribution.type == attribution_type,
                Attribution.starts_at <= as_of,
                Attribution.ends_at >= as_of,
            )
            .order_by(Attribution.created_at, Attribution.id)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_affiliate(self, affiliate_id: int) -> list[Attribution]:
        """Get every attribution credited to an affiliate."""
        return await self.find_by(affiliate_id=affiliate_id)
