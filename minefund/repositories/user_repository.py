"""
User repository.

Data access layer for User model. Also the referral graph accessor:
get_referrer_id is the single parent-pointer lookup the chain walk uses.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from minefund.models.user import User
from minefund.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """User repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user repository."""
        super().__init__(User, session)

    async def get_by_email(self, email: str) -> User | None:
        """
        Get user by email (case-insensitive).

        Args:
            email: Email address

        Returns:
            User or None
        """
        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_referral_code(
        self, referral_code: str
    ) -> User | None:
        """
        Get user by referral code.

        Args:
            referral_code: Referral code

        Returns:
            User or None
        """
        return await self.get_by(referral_code=referral_code)

    async def referral_code_exists(self, referral_code: str) -> bool:
        """Check if a referral code is taken."""
        return await self.exists(referral_code=referral_code)

    async def get_referrer_id(self, user_id: int) -> int | None:
        """
        Get the direct referrer of a user.

        Selects only the referred_by_id column, so walking the chain never
        loads full rows.

        Args:
            user_id: User ID

        Returns:
            Referrer user ID, or None if the user has no referrer or does
            not exist
        """
        stmt = select(User.referred_by_id).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_direct_referrals(self, user_id: int) -> list[User]:
        """
        Get users directly referred by a user.

        Args:
            user_id: Referrer user ID

        Returns:
            Referred users, oldest first
        """
        stmt = (
            select(User)
            .where(User.referred_by_id == user_id)
            .order_by(User.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
