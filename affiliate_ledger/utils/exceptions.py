"""
Exception handling utilities.

Defines the affiliate error hierarchy and the storage error category
caught on non-critical paths.
"""

from sqlalchemy.exc import OperationalError, SQLAlchemyError


class AffiliateError(Exception):
    """Base class for affiliate programme errors."""
    pass


class LedgerWriteError(AffiliateError):
    """
    Raised when a commission ledger write fails.

    A silently dropped ledger entry is a financial correctness bug, so
    storage failures are surfaced to the payment-event caller.
    """

    def __init__(self, event_id: str, message: str = "Ledger write failed") -> None:
        self.event_id = event_id
        super().__init__(f"{message}: {event_id}")


class AffiliateHierarchyError(AffiliateError):
    """Raised when an operation would break the two-level hierarchy."""
    pass


class InvalidPromoCodeError(AffiliateError):
    """Raised when a promo code is unknown, inactive or out of range."""
    pass


class InviteError(AffiliateError):
    """Raised when a sub-affiliate invite cannot be created."""
    pass


# Storage failures on paths that must not abort the surrounding operation
# (signup attribution). Ledger writes convert these to LedgerWriteError.
MUST_LOG = (
    OperationalError,  # Connection drops, lock timeouts
    SQLAlchemyError,   # Any other storage failure
)
