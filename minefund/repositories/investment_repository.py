"""
Investment repository.

Data access layer for Investment and IncomeCollection models.
"""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from minefund.models.enums import InvestmentStatus
from minefund.models.income_collection import IncomeCollection
from minefund.models.investment import Investment
from minefund.repositories.base import BaseRepository


class InvestmentRepository(BaseRepository[Investment]):
    """Investment repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize investment repository."""
        super().__init__(Investment, session)

    async def get_by_user(
        self, user_id: int, status: str | None = None
    ) -> list[Investment]:
        """
        Get investments by user.

        Args:
            user_id: User ID
            status: Optional status filter

        Returns:
            List of investments, newest first
        """
        stmt = select(Investment).where(Investment.user_id == user_id)
        if status:
            stmt = stmt.where(Investment.status == status)
        stmt = stmt.order_by(Investment.created_at.desc())

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_expired_active_ids(self, now: datetime) -> list[int]:
        """
        Get IDs of active investments whose end date has passed.

        Args:
            now: Reference time

        Returns:
            List of investment IDs, oldest end date first
        """
        stmt = (
            select(Investment.id)
            .where(
                Investment.status == InvestmentStatus.ACTIVE.value,
                Investment.end_date <= now,
            )
            .order_by(Investment.end_date.asc())
        )
        result = await self.session.execute(stmt)
        return [row[0] for row in result.all()]


class IncomeCollectionRepository(BaseRepository[IncomeCollection]):
    """Income collection repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize income collection repository."""
        super().__init__(IncomeCollection, session)
