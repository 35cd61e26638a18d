#!/usr/bin/env python3
"""
Release matured affiliate commissions.

Flips PENDING ledger entries whose hold period has passed to AVAILABLE.
Meant to run from cron, e.g. hourly:

    python scripts/release_pending_commissions.py
    python scripts/release_pending_commissions.py --as-of 2026-01-31T00:00:00+00:00
"""

import argparse
import asyncio
import sys
from datetime import datetime

from loguru import logger

from affiliate_ledger.config.database import async_session_maker, engine
from affiliate_ledger.config.logging import setup_logging
from affiliate_ledger.services.ledger import LedgerReleaseService
from affiliate_ledger.utils.datetime_utils import ensure_aware


async def release(as_of: datetime | None) -> int:
    """Run one release sweep."""
    try:
        async with async_session_maker() as session:
            service = LedgerReleaseService(session)
            return await service.release_matured(as_of)
    finally:
        await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Release matured affiliate commissions")
    parser.add_argument(
        "--as-of",
        type=datetime.fromisoformat,
        default=None,
        help="ISO timestamp cut-off (defaults to now, naive means UTC)",
    )
    args = parser.parse_args()

    setup_logging()

    try:
        released = asyncio.run(release(ensure_aware(args.as_of)))
    except Exception as e:
        logger.exception(f"Release sweep failed: {type(e).__name__}")
        sys.exit(1)

    logger.success(f"Released {released} commission entries")


if __name__ == "__main__":
    main()
