"""
CommissionLedgerEntry model.

Append-only, signed, idempotent record of affiliate earnings.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from affiliate_ledger.models.base import Base
from affiliate_ledger.models.enums import LedgerStatus
from affiliate_ledger.models.types import CentsType


class CommissionLedgerEntry(Base):
    """
    CommissionLedgerEntry entity.

    ``event_id`` is the idempotency key: one upstream event produces at
    most one entry per key. Reversals are new negative entries with
    status REVERSED, never deletions.

    Attributes:
        id: Primary key
        event_id: Idempotency key (invoice id, order id, "<id>_parent", ...)
        event_type: INVOICE_PAID, ORDER_PAID, REFUND, CHARGEBACK
        affiliate_id: Credited affiliate
        amount_cents: Signed amount (negative for reversals)
        currency: ISO currency code
        status: PENDING, AVAILABLE, REVERSED
        available_at: When a PENDING entry matures (null for reversals)
        business_subscription_id: Source subscription (invoice entries)
        meta: Calculation context (tier, base amount, discount, counterparts)
    """

    __tablename__ = "commission_ledger"
    __table_args__ = (
        Index("idx_commission_ledger_affiliate_status", "affiliate_id", "status"),
        Index("idx_commission_ledger_status_available", "status", "available_at"),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Idempotency key
    event_id: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True
    )
    event_type: Mapped[str] = mapped_column(
        String(32), nullable=False, comment="INVOICE_PAID, ORDER_PAID, REFUND, CHARGEBACK"
    )

    affiliate_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("affiliates.id"),
        nullable=False,
        index=True,
    )

    # Amount
    amount_cents: Mapped[int] = mapped_column(CentsType, nullable=False)
    currency: Mapped[str] = mapped_column(
        String(3), nullable=False, default="eur"
    )

    # Lifecycle
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=LedgerStatus.PENDING
    )
    available_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    business_subscription_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("business_subscriptions.id"),
        nullable=True,
    )

    meta: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

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
    def tier(self) -> str | None:
        """Hierarchy tier recorded at calculation time."""
        return (self.meta or {}).get("tier")

    @property
    def is_reversal(self) -> bool:
        """Check if entry is a negative reversal."""
        return self.amount_cents < 0

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<CommissionLedgerEntry(event_id={self.event_id}, "
            f"affiliate_id={self.affiliate_id}, amount={self.amount_cents}, "
            f"status={self.status})>"
        )
