"""
BusinessSubscription model.

Recurring billing record whose invoices earn affiliate commission while
its revenue-share window is open.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from affiliate_ledger.models.base import Base
from affiliate_ledger.models.types import CentsType


if TYPE_CHECKING:
    from affiliate_ledger.models.attribution import Attribution
    from affiliate_ledger.models.promo_code import PromoCode


class BusinessSubscription(Base):
    """
    BusinessSubscription entity.

    Attributes:
        id: Primary key
        business_user_id: Subscribing business (external reference)
        external_subscription_id: Payment provider subscription id
        attribution_id: Originating attribution (nullable)
        promo_code_id: Applied promo code (nullable)
        price_cents: Price the business pays per period
        currency: ISO currency code
        status: Provider status (active, canceled, ...)
        starts_at: Revenue-share window start
        ends_at: Revenue-share window end
    """

    __tablename__ = "business_subscriptions"

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    business_user_id: Mapped[str] = mapped_column(
        String(64), nullable=False, index=True
    )
    external_subscription_id: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True
    )

    attribution_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("attributions.id"), nullable=True
    )
    promo_code_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("promo_codes.id"), nullable=True
    )

    price_cents: Mapped[int] = mapped_column(CentsType, nullable=False)
    currency: Mapped[str] = mapped_column(
        String(3), nullable=False, default="eur"
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="active"
    )

    # Revenue-share window
    starts_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    ends_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Relationships
    attribution: Mapped[Optional["Attribution"]] = relationship(
        "Attribution", lazy="joined"
    )
    promo_code: Mapped[Optional["PromoCode"]] = relationship(
        "PromoCode", lazy="joined"
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<BusinessSubscription(id={self.id}, "
            f"external_id={self.external_subscription_id}, ends_at={self.ends_at})>"
        )
