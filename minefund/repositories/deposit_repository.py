"""
Deposit repository.

Data access layer for Deposit model.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from minefund.models.deposit import Deposit
from minefund.repositories.base import BaseRepository


class DepositRepository(BaseRepository[Deposit]):
    """Deposit repository; review queries go through find_paginated."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize deposit repository."""
        super().__init__(Deposit, session)
