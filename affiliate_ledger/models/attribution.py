"""
Attribution model.

Time-windowed claim that a user was acquired through an affiliate.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from affiliate_ledger.models.base import Base
from affiliate_ledger.models.enums import AttributionSource


if TYPE_CHECKING:
    from affiliate_ledger.models.affiliate import Affiliate


class Attribution(Base):
    """
    Attribution entity.

    Created once at signup and never mutated; it expires naturally when
    ``now > ends_at``. At most one active record per (user, type) is
    intended, but historical duplicates are tolerated.

    Attributes:
        id: Primary key
        user_id: Acquired user (external reference)
        affiliate_id: Affiliate credited with the acquisition
        type: USER_SIGNUP or BUSINESS_SIGNUP
        source: Acquisition channel (REFERRAL_LINK)
        starts_at: Window start
        ends_at: Window end (starts_at + attribution window)
        created_at: Insert timestamp
    """

    __tablename__ = "attributions"
    __table_args__ = (
        Index("idx_attributions_user_type_window", "user_id", "type", "ends_at"),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    user_id: Mapped[str] = mapped_column(
        String(64), nullable=False, index=True
    )
    affiliate_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("affiliates.id"),
        nullable=False,
        index=True,
    )

    type: Mapped[str] = mapped_column(
        String(32), nullable=False, comment="USER_SIGNUP, BUSINESS_SIGNUP"
    )
    source: Mapped[str] = mapped_column(
        String(32), nullable=False, default=AttributionSource.REFERRAL_LINK
    )

    # Window
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
    affiliate: Mapped["Affiliate"] = relationship("Affiliate", lazy="joined")

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Attribution(user_id={self.user_id}, affiliate_id={self.affiliate_id}, "
            f"type={self.type}, ends_at={self.ends_at})>"
        )
