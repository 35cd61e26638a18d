"""
SubAffiliateInvite model.

Invitation issued by a top-level affiliate to recruit a sub-affiliate.
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from affiliate_ledger.models.base import Base
from affiliate_ledger.models.enums import InviteStatus


class SubAffiliateInvite(Base):
    """SubAffiliateInvite entity."""

    __tablename__ = "sub_affiliate_invites"

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    parent_affiliate_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("affiliates.id"),
        nullable=False,
        index=True,
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    invite_token: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True, index=True
    )

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=InviteStatus.PENDING
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    accepted_affiliate_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("affiliates.id"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<SubAffiliateInvite(id={self.id}, parent={self.parent_affiliate_id}, "
            f"status={self.status})>"
        )
