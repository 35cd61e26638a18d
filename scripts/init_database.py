#!/usr/bin/env python3
"""Initialize database tables."""

import asyncio
import sys

from loguru import logger
from sqlalchemy.ext.asyncio import create_async_engine

from affiliate_ledger.config.settings import settings
from affiliate_ledger.models import Base

# Configure logger for script
logger.remove()
logger.add(sys.stderr, level="INFO")


async def init_database() -> None:
    """Create all affiliate tables (use Alembic for managed environments)."""
    logger.info("Connecting to database...")
    engine = create_async_engine(settings.database_url, echo=False)

    async with engine.begin() as conn:
        logger.info("Creating tables (checkfirst=True)...")
        await conn.run_sync(
            Base.metadata.create_all,
            checkfirst=True
        )

    await engine.dispose()
    logger.success("Database tables created successfully!")


if __name__ == "__main__":
    asyncio.run(init_database())
