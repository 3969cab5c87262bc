"""
Referral commission repository.

Data access layer for ReferralCommission model.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from minefund.models.referral_commission import ReferralCommission
from minefund.repositories.base import BaseRepository


class CommissionRepository(BaseRepository[ReferralCommission]):
    """Referral commission repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize commission repository."""
        super().__init__(ReferralCommission, session)

    async def exists_for_event(
        self, commission_type: str, source_id: int
    ) -> bool:
        """
        Check whether any commission was recorded for an event.

        Args:
            commission_type: deposit or earning
            source_id: Deposit ID or income collection ID

        Returns:
            True if at least one level was already paid
        """
        return await self.exists(
            commission_type=str(commission_type), source_id=source_id
        )

    async def get_by_referrer(
        self,
        referrer_id: int,
        page: int = 1,
        per_page: int = 20,
        commission_type: str | None = None,
    ) -> tuple[list[ReferralCommission], int]:
        """
        Get commissions earned by a referrer with pagination.

        Args:
            referrer_id: Referrer user ID
            page: Page number (1-indexed)
            per_page: Items per page
            commission_type: Optional type filter

        Returns:
            Tuple of (commissions newest first, total count)
        """
        filters: dict[str, object] = {"referrer_id": referrer_id}
        if commission_type:
            filters["commission_type"] = str(commission_type)

        count_stmt = select(func.count(ReferralCommission.id)).filter_by(
            **filters
        )
        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar() or 0

        stmt = (
            select(ReferralCommission)
            .filter_by(**filters)
            .order_by(
                ReferralCommission.created_at.desc(),
                ReferralCommission.id.desc(),
            )
            .offset((page - 1) * per_page)
            .limit(per_page)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def get_level_totals(
        self, referrer_id: int
    ) -> dict[int, dict[str, int | Decimal]]:
        """
        Get commission totals grouped by level in a single query.

        Args:
            referrer_id: Referrer user ID

        Returns:
            Dict mapping level to stats {
                1: {"count": 4, "total": Decimal("120.5")},
                2: {"count": 0, "total": Decimal("0")},
                3: {"count": 1, "total": Decimal("2")}
            }
        """
        stmt = (
            select(
                ReferralCommission.level,
                func.count(ReferralCommission.id).label("count"),
                func.coalesce(
                    func.sum(ReferralCommission.commission_amount),
                    Decimal("0"),
                ).label("total"),
            )
            .where(ReferralCommission.referrer_id == referrer_id)
            .group_by(ReferralCommission.level)
        )

        result = await self.session.execute(stmt)
        rows = result.all()

        totals: dict[int, dict[str, int | Decimal]] = {
            level: {"count": 0, "total": Decimal("0")} for level in (1, 2, 3)
        }
        for row in rows:
            totals[row.level] = {"count": row.count, "total": row.total}

        return totals
