"""
Referral chain management module.

Walks the referred_by pointers upward and maintains the referrer link.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from minefund.repositories.user_repository import UserRepository
from minefund.services.referral.config import REFERRAL_DEPTH
from minefund.utils.exceptions import ReferralLoopError, UserNotFoundError


class ReferralChainManager:
    """Manages referral chain operations."""

    def __init__(
        self,
        session: AsyncSession,
        user_repo: UserRepository | None = None,
    ) -> None:
        """Initialize chain manager."""
        self.session = session
        self.user_repo = user_repo or UserRepository(session)

    async def get_referral_chain(
        self, user_id: int, depth: int = REFERRAL_DEPTH
    ) -> list[int]:
        """
        Get referrer IDs above a user, nearest first.

        The walk is bounded by depth and stops early at a user without a
        referrer. A repeated ID means corrupt data (a cycle); the walk stops
        there and logs a warning instead of paying anyone twice.

        Args:
            user_id: User whose upline is requested
            depth: Maximum number of levels

        Returns:
            List of referrer IDs, index 0 is level 1
        """
        chain: list[int] = []
        visited = {user_id}
        current = user_id

        while len(chain) < depth:
            referrer_id = await self.user_repo.get_referrer_id(current)
            if referrer_id is None:
                break
            if referrer_id in visited:
                logger.warning(
                    "Referral cycle detected, chain truncated",
                    extra={
                        "user_id": user_id,
                        "repeated_id": referrer_id,
                        "chain": chain,
                    },
                )
                break
            chain.append(referrer_id)
            visited.add(referrer_id)
            current = referrer_id

        logger.debug(
            "Referral chain retrieved",
            extra={
                "user_id": user_id,
                "depth": depth,
                "chain_length": len(chain),
            },
        )
        return chain

    async def link_referrer(self, user_id: int, referrer_id: int) -> None:
        """
        Set a user's direct referrer.

        Does not commit; the calling service owns the transaction.

        Args:
            user_id: User being referred
            referrer_id: Direct referrer

        Raises:
            ReferralLoopError: On self-referral or if the link closes a cycle
            UserNotFoundError: If either user does not exist
        """
        if user_id == referrer_id:
            raise ReferralLoopError(f"User {user_id} cannot refer itself")

        if not await self.user_repo.exists(id=referrer_id):
            raise UserNotFoundError(f"Referrer {referrer_id} not found")

        # The new edge closes a cycle iff user_id is already above referrer_id.
        current: int | None = referrer_id
        seen: set[int] = set()
        while current is not None and current not in seen:
            if current == user_id:
                logger.warning(
                    "Referral loop rejected",
                    extra={"user_id": user_id, "referrer_id": referrer_id},
                )
                raise ReferralLoopError(
                    f"Linking user {user_id} to {referrer_id} creates a cycle"
                )
            seen.add(current)
            current = await self.user_repo.get_referrer_id(current)

        updated = await self.user_repo.update(user_id, referred_by_id=referrer_id)
        if updated is None:
            raise UserNotFoundError(f"User {user_id} not found")

        logger.info(
            "Referrer linked",
            extra={"user_id": user_id, "referrer_id": referrer_id},
        )
