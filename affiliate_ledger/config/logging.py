"""
Logging configuration.

Configures loguru logger for scripts and workers.
Sets up log rotation and retention policies.
"""

import sys

from loguru import logger

from affiliate_ledger.config.settings import settings


def setup_logging(log_file: str | None = None) -> None:
    """Configure logger with stderr output and file rotation."""
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)
    logger.add(
        log_file or settings.log_file,
        rotation="1 day",
        retention="7 days",
        level=settings.log_level,
        encoding="utf-8",
    )
