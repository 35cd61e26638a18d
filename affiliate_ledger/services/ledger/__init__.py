"""
Ledger services.

Commission ledger writes, the pending release sweep and read queries.
"""

from affiliate_ledger.services.ledger.commission_ledger_service import (
    CommissionLedgerService,
    LedgerResult,
    LedgerSkipReason,
    parent_event_id,
)
from affiliate_ledger.services.ledger.query_service import (
    BalanceSummary,
    CommissionBreakdown,
    LedgerQueryService,
)
from affiliate_ledger.services.ledger.release_service import LedgerReleaseService


__all__ = [
    "CommissionLedgerService",
    "LedgerResult",
    "LedgerSkipReason",
    "parent_event_id",
    "LedgerReleaseService",
    "LedgerQueryService",
    "BalanceSummary",
    "CommissionBreakdown",
]
