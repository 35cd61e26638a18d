"""
CommissionLedger repository.

Data access layer for CommissionLedgerEntry model: idempotent inserts,
conditional status flips and per-affiliate aggregates.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from affiliate_ledger.models.commission_ledger import CommissionLedgerEntry
from affiliate_ledger.models.enums import LedgerStatus
from affiliate_ledger.repositories.base import BaseRepository


_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class CommissionLedgerRepository(BaseRepository[CommissionLedgerEntry]):
    """CommissionLedger repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize commission ledger repository."""
        super().__init__(CommissionLedgerEntry, session)

    async def get_by_event_id(self, event_id: str) -> CommissionLedgerEntry | None:
        """Get entry by idempotency key."""
        return await self.get_by(event_id=event_id)

    async def event_exists(self, event_id: str) -> bool:
        """Check if an event has already been recorded."""
        return await self.exists(event_id=event_id)

    async def insert_ignore(self, **data: Any) -> int | None:
        """
        Insert an entry unless its event_id already exists.

        Uses ``ON CONFLICT (event_id) DO NOTHING`` where the dialect
        supports it, otherwise a savepoint around a plain insert.

        Args:
            **data: Entry columns (event_id required)

        Returns:
            New entry ID, or None on an idempotency conflict
        """
        dialect = self.session.get_bind().dialect.name
        insert_factory = _UPSERT_DIALECTS.get(dialect)

        if insert_factory is not None:
            stmt = (
                insert_factory(CommissionLedgerEntry)
                .values(**data)
                .on_conflict_do_nothing(index_elements=["event_id"])
                .returning(CommissionLedgerEntry.id)
            )
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()

        try:
            async with self.session.begin_nested():
                entry = CommissionLedgerEntry(**data)
                self.session.add(entry)
                await self.session.flush()
        except IntegrityError:
            return None
        return entry.id

    async def find_reversible(self, event_ids: list[str]) -> list[CommissionLedgerEntry]:
        """
        Get entries that can still be reversed.

        Args:
            event_ids: Candidate idempotency keys

        Returns:
            Non-REVERSED entries, in insertion order
        """
        stmt = (
            select(CommissionLedgerEntry)
            .where(
                CommissionLedgerEntry.event_id.in_(event_ids),
                CommissionLedgerEntry.status != LedgerStatus.REVERSED,
            )
            .order_by(CommissionLedgerEntry.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def mark_reversed(self, entry_id: int) -> bool:
        """
        Flip an entry to REVERSED unless it already is.

        Returns:
            True if this call performed the transition
        """
        stmt = (
            update(CommissionLedgerEntry)
            .where(
                CommissionLedgerEntry.id == entry_id,
                CommissionLedgerEntry.status != LedgerStatus.REVERSED,
            )
            .values(status=LedgerStatus.REVERSED)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def release_matured(self, as_of: datetime) -> int:
        """
        Flip matured PENDING entries to AVAILABLE.

        Args:
            as_of: Entries with ``available_at <= as_of`` are released

        Returns:
            Number of released entries
        """
        stmt = (
            update(CommissionLedgerEntry)
            .where(
                CommissionLedgerEntry.status == LedgerStatus.PENDING,
                CommissionLedgerEntry.available_at.is_not(None),
                CommissionLedgerEntry.available_at <= as_of,
            )
            .values(status=LedgerStatus.AVAILABLE)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0

    async def sum_by_status(self, affiliate_id: int) -> dict[str, int]:
        """
        Sum amounts per status in a single query.

        Args:
            affiliate_id: Affiliate ID

        Returns:
            Dict mapping status to total cents (missing statuses are 0)
        """
        stmt = (
            select(
                CommissionLedgerEntry.status,
                func.coalesce(func.sum(CommissionLedgerEntry.amount_cents), 0),
            )
            .where(CommissionLedgerEntry.affiliate_id == affiliate_id)
            .group_by(CommissionLedgerEntry.status)
        )
        result = await self.session.execute(stmt)

        totals = {status.value: 0 for status in LedgerStatus}
        for status, total in result.all():
            totals[status] = int(total)
        return totals

    async def sum_reversals(self, affiliate_id: int) -> int:
        """
        Total clawed back from an affiliate by refunds and chargebacks.

        Returns:
            Positive cents (sum of the negative reversal entries, negated)
        """
        stmt = select(
            func.coalesce(func.sum(CommissionLedgerEntry.amount_cents), 0)
        ).where(
            CommissionLedgerEntry.affiliate_id == affiliate_id,
            CommissionLedgerEntry.amount_cents < 0,
        )
        result = await self.session.execute(stmt)
        return -int(result.scalar() or 0)

    async def get_by_affiliate(
        self, affiliate_id: int, status: str | None = None
    ) -> list[CommissionLedgerEntry]:
        """Get every entry of an affiliate, optionally filtered by status."""
        filters: dict[str, Any] = {"affiliate_id": affiliate_id}
        if status:
            filters["status"] = status
        return await self.find_by(**filters)
