"""
Base repository.

Shared query helpers for the affiliate tables. Rows are soft-managed
(status flags, REVERSED entries), so there is no delete.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from affiliate_ledger.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository bound to one model and one session.

    Repositories only flush; committing belongs to the service that owns
    the unit of work.

    Example:
        class PromoCodeRepository(BaseRepository[PromoCode]):
            def __init__(self, session: AsyncSession):
                super().__init__(PromoCode, session)
    """

    def __init__(self, model: type[ModelType], session: AsyncSession) -> None:
        self.model = model
        self.session = session

    async def get_by_id(self, id: int) -> ModelType | None:
        """Get row by primary key (identity map first)."""
        return await self.session.get(self.model, id)

    async def get_by(self, **filters: Any) -> ModelType | None:
        """
        Get the first row matching column filters.

        Returns:
            Row or None
        """
        stmt = select(self.model).filter_by(**filters)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def find_by(self, **filters: Any) -> list[ModelType]:
        """Find rows matching column filters, in insertion order."""
        stmt = select(self.model).filter_by(**filters).order_by(self.model.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, **data: Any) -> ModelType:
        """
        Insert a row and load server-side values.

        Args:
            **data: Column values

        Returns:
            Flushed entity with its ID assigned
        """
        entity = self.model(**data)
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def update(self, id: int, **data: Any) -> ModelType | None:
        """
        Set attributes on a row by ID.

        Returns:
            Updated entity or None if the row does not exist
        """
        entity = await self.get_by_id(id)
        if entity is None:
            return None

        for key, value in data.items():
            setattr(entity, key, value)

        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def count(self, **filters: Any) -> int:
        stmt = select(func.count()).select_from(self.model).filter_by(**filters)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def exists(self, **filters: Any) -> bool:
        stmt = select(exists().where(
            *(getattr(self.model, key) == value for key, value in filters.items())
        ))
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    async def find_paginated(
        self,
        page: int = 1,
        per_page: int = 50,
        **filters: Any,
    ) -> tuple[list[ModelType], int]:
        """
        Page through rows, newest first.

        Args:
            page: Page number (1-indexed)
            per_page: Rows per page
            **filters: Column filters

        Returns:
            Tuple of (rows, total_count)
        """
        total = await self.count(**filters)

        stmt = (
            select(self.model)
            .filter_by(**filters)
            .order_by(self.model.id.desc())
            .offset((page - 1) * per_page)
            .limit(per_page)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total
