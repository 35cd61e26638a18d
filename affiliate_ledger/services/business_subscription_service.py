"""
Business subscription service.

Registers recurring business subscriptions so paid invoices can be
matched to their attribution and promo code.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from affiliate_ledger.config.settings import settings
from affiliate_ledger.models.business_subscription import BusinessSubscription
from affiliate_ledger.models.enums import AttributionType
from affiliate_ledger.repositories.business_subscription_repository import (
    BusinessSubscriptionRepository,
)
from affiliate_ledger.services.attribution.attribution_service import AttributionService
from affiliate_ledger.services.base_service import BaseService
from affiliate_ledger.utils.datetime_utils import days_from, utc_now
from affiliate_ledger.utils.db_decorators import with_auto_commit


class BusinessSubscriptionService(BaseService):
    """Business subscription registration."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.subscription_repo = BusinessSubscriptionRepository(session)
        self.attribution_service = AttributionService(session)

    @with_auto_commit
    async def register_subscription(
        self,
        business_user_id: str,
        external_subscription_id: str,
        price_cents: int,
        attribution_id: int | None = None,
        promo_code_id: int | None = None,
    ) -> BusinessSubscription:
        """
        Register a subscription created by the payment provider.

        Idempotent on ``external_subscription_id``. When no attribution is
        given the business user's active BUSINESS_SIGNUP attribution is
        used. The revenue-share window starts now.

        Args:
            business_user_id: Subscribing business
            external_subscription_id: Provider subscription id
            price_cents: Base price per period
            attribution_id: Originating attribution
            promo_code_id: Applied promo code

        Returns:
            BusinessSubscription
        """
        existing = await self.subscription_repo.get_by_external_id(external_subscription_id)
        if existing:
            self.logger.info(
                "Subscription already registered",
                extra={"external_subscription_id": external_subscription_id},
            )
            return existing

        now = utc_now()
        if attribution_id is None:
            attribution = await self.attribution_service.find_active_attribution(
                business_user_id, AttributionType.BUSINESS_SIGNUP, now
            )
            attribution_id = attribution.id if attribution else None

        subscription = await self.subscription_repo.create(
            business_user_id=business_user_id,
            external_subscription_id=external_subscription_id,
            attribution_id=attribution_id,
            promo_code_id=promo_code_id,
            price_cents=price_cents,
            currency=settings.currency,
            starts_at=now,
            ends_at=days_from(now, settings.attribution_window_days),
        )
        self.logger.info(
            "Business subscription registered",
            extra={
                "subscription_id": subscription.id,
                "external_subscription_id": external_subscription_id,
                "attribution_id": attribution_id,
                "promo_code_id": promo_code_id,
            },
        )
        return subscription
