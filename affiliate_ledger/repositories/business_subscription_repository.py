"""
BusinessSubscription repository.

Data access layer for BusinessSubscription model.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from affiliate_ledger.models.business_subscription import BusinessSubscription
from affiliate_ledger.repositories.base import BaseRepository


class BusinessSubscriptionRepository(BaseRepository[BusinessSubscription]):
    """BusinessSubscription repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize business subscription repository."""
        super().__init__(BusinessSubscription, session)

    async def get_by_external_id(
        self, external_subscription_id: str
    ) -> BusinessSubscription | None:
        """
        Get subscription by the payment provider's id.

        Attribution (with its affiliate) and promo code are eagerly loaded.

        Args:
            external_subscription_id: Provider subscription ID

        Returns:
            BusinessSubscription or None
        """
        return await self.get_by(external_subscription_id=external_subscription_id)
