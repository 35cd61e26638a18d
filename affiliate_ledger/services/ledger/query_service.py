"""
Ledger query service.

Read-only views over the commission ledger for affiliate and admin
dashboards. No money is moved here.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from affiliate_ledger.config.settings import settings
from affiliate_ledger.models.commission_ledger import CommissionLedgerEntry
from affiliate_ledger.models.enums import CommissionTier, LedgerEventType, LedgerStatus
from affiliate_ledger.repositories.commission_ledger_repository import (
    CommissionLedgerRepository,
)
from affiliate_ledger.services.base_service import BaseService


@dataclass
class BalanceSummary:
    """Affiliate balance per lifecycle state, in cents."""

    pending_cents: int
    available_cents: int
    reversed_cents: int
    retained_cents: int = 0

    @property
    def total_cents(self) -> int:
        """Net of every entry, reversals included."""
        return self.pending_cents + self.available_cents + self.retained_cents


@dataclass
class CommissionBreakdown:
    """Net commission by source, in cents (reversals deducted)."""

    user_transaction_cents: int = 0
    business_subscription_cents: int = 0
    parent_cents: int = 0

    @property
    def total_cents(self) -> int:
        return (
            self.user_transaction_cents
            + self.business_subscription_cents
            + self.parent_cents
        )


class LedgerQueryService(BaseService):
    """Read queries over ledger entries by affiliate and status."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.ledger_repo = CommissionLedgerRepository(session)

    async def list_entries(
        self,
        affiliate_id: int,
        status: LedgerStatus | str | None = None,
        page: int = 1,
        per_page: int = 50,
    ) -> tuple[list[CommissionLedgerEntry], int]:
        """
        List an affiliate's ledger entries, newest first.

        Args:
            affiliate_id: Affiliate ID
            status: Optional status filter
            page: Page number (1-indexed)
            per_page: Items per page

        Returns:
            Tuple of (entries, total_count)
        """
        filters: dict = {"affiliate_id": affiliate_id}
        if status:
            filters["status"] = LedgerStatus(status)
        return await self.ledger_repo.find_paginated(page=page, per_page=per_page, **filters)

    async def get_balance_summary(self, affiliate_id: int) -> BalanceSummary:
        """
        Get pending, available and clawed-back totals.

        A refunded entry is flipped to REVERSED as a whole, so the part a
        partial refund did not claw back is the signed sum of the REVERSED
        rows (original plus its negative reversal). It is reported as
        ``retained_cents`` and counted in the net total.
        """
        totals = await self.ledger_repo.sum_by_status(affiliate_id)
        reversed_cents = await self.ledger_repo.sum_reversals(affiliate_id)
        return BalanceSummary(
            pending_cents=totals[LedgerStatus.PENDING],
            available_cents=totals[LedgerStatus.AVAILABLE],
            reversed_cents=reversed_cents,
            retained_cents=totals[LedgerStatus.REVERSED],
        )

    async def get_commission_breakdown(self, affiliate_id: int) -> CommissionBreakdown:
        """
        Split net commission into user, business and upline income.

        Upline entries are told apart by ``meta.tier``. Reversals count
        against the source of the entry they reverse.
        """
        breakdown = CommissionBreakdown()
        for entry in await self.ledger_repo.get_by_affiliate(affiliate_id):
            source = (entry.meta or {}).get("original_event_type", entry.event_type)
            if entry.tier == CommissionTier.PARENT:
                breakdown.parent_cents += entry.amount_cents
            elif source == LedgerEventType.ORDER_PAID:
                breakdown.user_transaction_cents += entry.amount_cents
            elif source == LedgerEventType.INVOICE_PAID:
                breakdown.business_subscription_cents += entry.amount_cents
        return breakdown

    async def is_payout_eligible(self, affiliate_id: int) -> bool:
        """Check if the AVAILABLE balance reaches the payout minimum."""
        summary = await self.get_balance_summary(affiliate_id)
        eligible = summary.available_cents >= settings.min_payout_amount_cents
        self.logger.debug(
            "Payout eligibility checked",
            extra={
                "affiliate_id": affiliate_id,
                "available_cents": summary.available_cents,
                "eligible": eligible,
            },
        )
        return eligible
