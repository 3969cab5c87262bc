"""
Withdrawal repository.

Data access layer for Withdrawal model.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from minefund.models.withdrawal import Withdrawal
from minefund.repositories.base import BaseRepository


class WithdrawalRepository(BaseRepository[Withdrawal]):
    """Withdrawal repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize withdrawal repository."""
        super().__init__(Withdrawal, session)
