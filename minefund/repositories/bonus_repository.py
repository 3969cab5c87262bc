"""
Bonus transaction repository.

Data access layer for BonusTransaction model.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from minefund.models.bonus_transaction import BonusTransaction
from minefund.repositories.base import BaseRepository


class BonusTransactionRepository(BaseRepository[BonusTransaction]):
    """Bonus history goes through find_paginated."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize bonus transaction repository."""
        super().__init__(BonusTransaction, session)
