"""
Plan repository.

Data access layer for Plan model.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from minefund.models.enums import PlanStatus
from minefund.models.plan import Plan
from minefund.repositories.base import BaseRepository


class PlanRepository(BaseRepository[Plan]):
    """Plan repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize plan repository."""
        super().__init__(Plan, session)

    async def list_plans(self, active_only: bool = False) -> list[Plan]:
        """
        List plans ordered by minimum investment.

        Args:
            active_only: Return only purchasable plans

        Returns:
            List of plans
        """
        stmt = select(Plan)
        if active_only:
            stmt = stmt.where(Plan.status == PlanStatus.ACTIVE.value)
        stmt = stmt.order_by(Plan.min_investment.asc(), Plan.id.asc())

        result = await self.session.execute(stmt)
        return list(result.scalars().all())
