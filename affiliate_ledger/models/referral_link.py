"""
ReferralLink model.

Trackable short code bound to exactly one affiliate.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from affiliate_ledger.models.base import Base


if TYPE_CHECKING:
    from affiliate_ledger.models.affiliate import Affiliate


class ReferralLink(Base):
    """
    ReferralLink entity.

    Immutable once issued except for deactivation.
    """

    __tablename__ = "referral_links"

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

    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    deactivated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Relationships
    affiliate: Mapped["Affiliate"] = relationship("Affiliate", lazy="joined")

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ReferralLink(code={self.code}, affiliate_id={self.affiliate_id}, "
            f"active={self.is_active})>"
        )
