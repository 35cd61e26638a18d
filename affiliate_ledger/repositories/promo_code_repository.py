"""
PromoCode repository.

Data access layer for PromoCode model.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from affiliate_ledger.models.promo_code import PromoCode
from affiliate_ledger.repositories.base import BaseRepository


class PromoCodeRepository(BaseRepository[PromoCode]):
    """PromoCode repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize promo code repository."""
        super().__init__(PromoCode, session)

    async def get_by_code(self, code: str) -> PromoCode | None:
        """Get promo code regardless of status."""
        return await self.get_by(code=code)

    async def get_active_by_code(self, code: str) -> PromoCode | None:
        """
        Get active promo code.

        Args:
            code: Upper-case promo code

        Returns:
            PromoCode or None if missing or deactivated
        """
        stmt = select(PromoCode).where(
            PromoCode.code == code,
            PromoCode.is_active.is_(True),
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_affiliate(self, affiliate_id: int) -> list[PromoCode]:
        """Get all promo codes of an affiliate."""
        return await self.find_by(affiliate_id=affiliate_id)
