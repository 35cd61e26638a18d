"""
PromoCode model.

Affiliate-funded discount code for business subscriptions.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from affiliate_ledger.models.base import Base


if TYPE_CHECKING:
    from affiliate_ledger.models.affiliate import Affiliate


class PromoCode(Base):
    """
    PromoCode entity.

    ``discount_share_pct`` is the percent (0-100) of the affiliate's own
    commission given away as a discount.
    """

    __tablename__ = "promo_codes"
    __table_args__ = (
        CheckConstraint(
            "discount_share_pct >= 0 AND discount_share_pct <= 100",
            name="check_promo_discount_share_range",
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    affiliate_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("affiliates.id"),
        nullable=False,
        index=True,
    )
    code: Mapped[str] = mapped_column(
        String(32), nullable=False, unique=True, index=True
    )
    discount_share_pct: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Relationships
    affiliate: Mapped["Affiliate"] = relationship("Affiliate", lazy="joined")

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<PromoCode(code={self.code}, affiliate_id={self.affiliate_id}, "
            f"discount={self.discount_share_pct}%)>"
        )
