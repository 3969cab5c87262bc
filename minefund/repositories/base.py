"""
Base repository.

Shared async data access for the minefund models. Subclasses bind a model
and add their own queries; writes only flush, the service owns the commit.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from minefund.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository for one model.

    Example:
        class PlanRepository(BaseRepository[Plan]):
            def __init__(self, session: AsyncSession):
                super().__init__(Plan, session)
    """

    def __init__(self, model: type[ModelType], session: AsyncSession) -> None:
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    async def get_by_id(self, id: int) -> ModelType | None:
        """Get entity by primary key."""
        return await self.session.get(self.model, id)

    async def get_for_update(self, id: int) -> ModelType | None:
        """
        Get entity by ID with a row lock (SELECT ... FOR UPDATE).

        Status transitions load their row through here, so two reviewers
        cannot act on the same deposit, investment or withdrawal at once.

        Args:
            id: Entity ID

        Returns:
            Locked entity or None if not found
        """
        stmt = select(self.model).where(self.model.id == id).with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by(self, **filters: Any) -> ModelType | None:
        """Get a single entity by column filters."""
        stmt = select(self.model).filter_by(**filters)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, **data: Any) -> ModelType:
        """
        Create new entity.

        The entity is flushed and refreshed, so server defaults and the
        generated ID are available to the caller.

        Args:
            **data: Column values

        Returns:
            Created entity
        """
        entity = self.model(**data)
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def update(
        self, id: int, for_update: bool = False, **data: Any
    ) -> ModelType | None:
        """
        Update entity by ID.

        Args:
            id: Entity ID
            for_update: Lock the row before writing
            **data: Column values

        Returns:
            Updated entity or None if not found
        """
        if for_update:
            entity = await self.get_for_update(id)
        else:
            entity = await self.get_by_id(id)

        if entity is None:
            return None

        for key, value in data.items():
            setattr(entity, key, value)

        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def exists(self, **filters: Any) -> bool:
        """Check whether any row matches the filters."""
        stmt = select(exists().where(*self._criteria(filters)))
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    async def find_paginated(
        self,
        page: int = 1,
        per_page: int = 50,
        **filters: Any,
    ) -> tuple[list[ModelType], int]:
        """
        Find entities page by page, newest first.

        Args:
            page: Page number (1-indexed)
            per_page: Items per page
            **filters: Column filters

        Returns:
            Tuple of (items, total_count)
        """
        count_stmt = select(func.count(self.model.id)).filter_by(**filters)
        total = (await self.session.execute(count_stmt)).scalar() or 0

        stmt = (
            select(self.model)
            .filter_by(**filters)
            .order_by(self.model.id.desc())
            .offset((max(page, 1) - 1) * per_page)
            .limit(per_page)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    def _criteria(self, filters: dict[str, Any]) -> list[Any]:
        return [getattr(self.model, key) == value for key, value in filters.items()]
