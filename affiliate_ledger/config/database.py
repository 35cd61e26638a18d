"""
Database configuration.

Async engine and session factory shared by services and scripts.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from affiliate_ledger.config.settings import settings


def create_engine(database_url: str | None = None) -> AsyncEngine:
    """
    Create async engine.

    Pool sizing only applies to server databases; SQLite uses its own pool.
    """
    url = database_url or settings.database_url
    kwargs: dict = {"echo": settings.database_echo}
    if not url.startswith("sqlite"):
        kwargs.update(
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_pool_size * 2,
            pool_pre_ping=True,
        )
    return create_async_engine(url, **kwargs)


engine = create_engine()

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)
