"""
Referral query management module.

Read-only views over commissions and direct referrals.
"""

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from minefund.models.enums import CommissionType
from minefund.repositories.commission_repository import CommissionRepository
from minefund.repositories.user_repository import UserRepository


class ReferralQueryManager:
    """Manages referral query operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize query manager."""
        self.session = session
        self.commission_repo = CommissionRepository(session)
        self.user_repo = UserRepository(session)

    async def get_commission_history(
        self,
        referrer_id: int,
        page: int = 1,
        per_page: int = 20,
        commission_type: CommissionType | str | None = None,
    ) -> dict:
        """
        Get commissions earned by a user, newest first.

        Args:
            referrer_id: Referrer user ID
            page: Page number (1-indexed)
            per_page: Items per page
            commission_type: Optional deposit/earning filter

        Returns:
            Dict with commissions, total, page, pages
        """
        page = max(page, 1)
        type_filter = (
            CommissionType(commission_type).value if commission_type else None
        )

        commissions, total = await self.commission_repo.get_by_referrer(
            referrer_id,
            page=page,
            per_page=per_page,
            commission_type=type_filter,
        )

        pages = (total + per_page - 1) // per_page

        return {
            "commissions": commissions,
            "total": total,
            "page": page,
            "pages": pages,
        }

    async def get_commission_totals(self, referrer_id: int) -> dict:
        """
        Get per-level commission totals for a user.

        Returns:
            Dict with "levels" (level -> count/total) and "total_earned"
        """
        levels = await self.commission_repo.get_level_totals(referrer_id)
        total_earned = sum(
            (stats["total"] for stats in levels.values()), Decimal("0")
        )
        return {"levels": levels, "total_earned": total_earned}

    async def get_direct_referrals(self, user_id: int) -> list:
        """Get users directly referred by a user."""
        return await self.user_repo.get_direct_referrals(user_id)
