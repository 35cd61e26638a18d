"""
Affiliate model.

Identity of a referrer in the two-level affiliate hierarchy.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from affiliate_ledger.models.base import Base
from affiliate_ledger.models.enums import AffiliateStatus
from affiliate_ledger.models.types import RateType


class Affiliate(Base):
    """
    Affiliate entity.

    A sub-affiliate is an affiliate with a parent; parents never have a
    parent themselves (depth 0 or 1). Status changes are soft: historical
    ledger entries must remain attributable.

    Attributes:
        id: Primary key
        user_id: Owning user (external reference)
        status: ACTIVE / INACTIVE / SUSPENDED
        parent_affiliate_id: Upline affiliate (sub-affiliates only)
        custom_user_commission_pct: Per-side override for order fees
        custom_business_commission_pct: Override for subscriptions
        custom_parent_user_commission_pct: Upline per-side override
        custom_parent_business_commission_pct: Upline subscription override
        created_at: Onboarding timestamp
        updated_at: Last change timestamp
    """

    __tablename__ = "affiliates"
    __table_args__ = (
        CheckConstraint(
            "parent_affiliate_id IS NULL OR parent_affiliate_id != id",
            name="check_affiliate_not_own_parent",
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Owning user
    user_id: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True, index=True
    )

    # Status
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AffiliateStatus.ACTIVE,
        index=True,
        comment="ACTIVE, INACTIVE, SUSPENDED",
    )

    # Hierarchy
    parent_affiliate_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("affiliates.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Custom commission overrides (fractions, e.g. 0.2000 = 20%)
    custom_user_commission_pct: Mapped[Decimal | None] = mapped_column(
        RateType, nullable=True
    )
    custom_business_commission_pct: Mapped[Decimal | None] = mapped_column(
        RateType, nullable=True
    )
    custom_parent_user_commission_pct: Mapped[Decimal | None] = mapped_column(
        RateType, nullable=True
    )
    custom_parent_business_commission_pct: Mapped[Decimal | None] = mapped_column(
        RateType, nullable=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    @property
    def is_sub_affiliate(self) -> bool:
        """Check if affiliate has an upline."""
        return self.parent_affiliate_id is not None

    @property
    def is_active(self) -> bool:
        """Check if affiliate may earn commission and resolve codes."""
        return self.status == AffiliateStatus.ACTIVE

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Affiliate(id={self.id}, user_id={self.user_id}, "
            f"status={self.status}, parent={self.parent_affiliate_id})>"
        )
