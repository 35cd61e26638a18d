"""
Base service class.

Session ownership, a logger bound to the service name and the unit of
work decorators shared by the affiliate services.
"""

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession


T = TypeVar("T")


class BaseService:
    """
    Base service class.

    Services either own their unit of work (``@transaction``) or run
    inside the caller's (savepoints, no commit). Repositories never
    commit.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.logger = logger.bind(service=self.__class__.__name__)

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()


def transaction(func: Callable[..., T]) -> Callable[..., T]:
    """
    Run an administrative service method as its own unit of work.

    Commits when the method returns; on any exception rolls back, logs
    and re-raises so validation errors reach the caller unchanged.

    Usage:
        @transaction
        async def create_promo_code(self, affiliate_id, code, discount_share_pct=0):
            ...
    """
    @functools.wraps(func)
    async def wrapper(self: BaseService, *args: Any, **kwargs: Any) -> Any:
        try:
            result = await func(self, *args, **kwargs)
            await self.commit()
        except Exception as e:
            await self.rollback()
            self.logger.warning(
                f"Rolled back {func.__name__}",
                extra={"function": func.__name__, "error": type(e).__name__},
            )
            raise
        return result

    return wrapper


def log_operation(func: Callable[..., T]) -> Callable[..., T]:
    """
    Log start, outcome and duration of a long-running service method.

    Meant for sweeps and batch jobs, not per-event calls.
    """
    @functools.wraps(func)
    async def wrapper(self: BaseService, *args: Any, **kwargs: Any) -> Any:
        started = time.monotonic()
        self.logger.info(f"Starting {func.__name__}", extra={"function": func.__name__})

        try:
            result = await func(self, *args, **kwargs)
        except Exception as e:
            self.logger.error(
                f"Failed {func.__name__}",
                extra={
                    "function": func.__name__,
                    "duration_seconds": round(time.monotonic() - started, 3),
                    "error": type(e).__name__,
                },
            )
            raise

        self.logger.info(
            f"Completed {func.__name__}",
            extra={
                "function": func.__name__,
                "duration_seconds": round(time.monotonic() - started, 3),
            },
        )
        return result

    return wrapper
