"""
Ledger release service.

Sweeps matured PENDING commission entries to AVAILABLE.
"""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from affiliate_ledger.repositories.commission_ledger_repository import (
    CommissionLedgerRepository,
)
from affiliate_ledger.services.base_service import BaseService, log_operation
from affiliate_ledger.utils.datetime_utils import utc_now
from affiliate_ledger.utils.db_decorators import with_auto_commit


class LedgerReleaseService(BaseService):
    """Release sweep for the PENDING -> AVAILABLE transition."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.ledger_repo = CommissionLedgerRepository(session)

    @log_operation
    @with_auto_commit
    async def release_matured(self, as_of: datetime | None = None) -> int:
        """
        Make matured commissions available for payout.

        One conditional update; REVERSED entries and entries whose
        ``available_at`` lies after ``as_of`` are untouched, so running the
        sweep twice is harmless.

        Args:
            as_of: Cut-off time (defaults to now)

        Returns:
            Number of entries released
        """
        cutoff = as_of or utc_now()
        released = await self.ledger_repo.release_matured(cutoff)

        self.logger.info(
            "Matured commissions released",
            extra={"released": released, "as_of": cutoff.isoformat()},
        )
        return released
