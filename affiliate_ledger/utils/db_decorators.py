"""
Database decorators.

Commit/rollback wrapping for functions and service methods that are handed
a SQLAlchemy session directly or through the object they are bound to.
"""

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession


T = TypeVar("T")


def _find_session(args: tuple, kwargs: dict) -> AsyncSession | None:
    session = kwargs.get('session')
    if session is None and args:
        first = args[0]
        if isinstance(first, AsyncSession):
            session = first
        else:
            candidate = getattr(first, 'session', None)
            if isinstance(candidate, AsyncSession):
                session = candidate
    return session


def with_auto_commit(func: Callable[..., T]) -> Callable[..., T]:
    """
    Commit the located session on success, roll it back on error.

    The session is the ``session`` keyword, the first positional argument,
    or ``.session`` of the first positional argument (a service). Without
    one the call runs unwrapped.

    Usage:
        @with_auto_commit
        async def release_matured(self, as_of=None):
            ...
    """
    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        session = _find_session(args, kwargs)

        if session is None:
            logger.warning(f"No session found for {func.__name__}, running without commit")
            return await func(*args, **kwargs)

        try:
            result = await func(*args, **kwargs)
            await session.commit()
        except Exception as e:
            try:
                await session.rollback()
                logger.info(f"Rolled back {func.__name__} after {type(e).__name__}")
            except Exception as rollback_error:
                logger.error(
                    f"Rollback failed in {func.__name__}: {type(rollback_error).__name__}",
                    exc_info=True,
                )
            raise

        logger.debug(f"Committed {func.__name__}")
        return result

    return wrapper
