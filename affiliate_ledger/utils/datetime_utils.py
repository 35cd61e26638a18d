"""
Datetime utilities.

Provides timezone-aware datetime functions.
"""

from datetime import UTC, datetime, timedelta


def utc_now() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Returns:
        Current datetime in UTC with timezone awareness
    """
    return datetime.now(UTC)


def ensure_aware(value: datetime | None) -> datetime | None:
    """
    Attach UTC to a naive datetime.

    Some backends (SQLite) return naive values for timezone-aware columns;
    everything is stored in UTC, so naive means UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def days_from(start: datetime, days: int) -> datetime:
    """Return ``start`` shifted forward by whole days."""
    return start + timedelta(days=days)
