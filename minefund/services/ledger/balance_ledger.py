"""
Balance ledger.

The only writer of users.balance and users.earned_balance. Every mutation
is a single-row UPDATE ... RETURNING, so concurrent callers cannot lose
updates and no row is read-modified-written in Python.
"""

from decimal import Decimal

from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from minefund.models.user import User
from minefund.utils.exceptions import (
    InsufficientBalanceError,
    InvalidAmountError,
    UserNotFoundError,
)


class BalanceLedger:
    """Atomic balance operations on users."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize balance ledger.

        Args:
            session: Async database session (caller owns the transaction)
        """
        self.session = session

    @staticmethod
    def _check_delta(delta: Decimal) -> None:
        if delta <= 0:
            raise InvalidAmountError(f"Ledger amount must be positive, got {delta}")

    async def increment(self, user_id: int, delta: Decimal) -> Decimal:
        """
        Credit a user's spendable balance.

        Args:
            user_id: User ID
            delta: Positive amount to add

        Returns:
            Balance after the update

        Raises:
            InvalidAmountError: If delta is not positive
            UserNotFoundError: If the user does not exist
        """
        self._check_delta(delta)

        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(balance=User.balance + delta)
            .returning(User.balance)
        )
        result = await self.session.execute(stmt)
        new_balance = result.scalar_one_or_none()

        if new_balance is None:
            raise UserNotFoundError(f"User {user_id} not found")

        logger.debug(
            "Balance incremented",
            extra={
                "user_id": user_id,
                "delta": str(delta),
                "balance_after": str(new_balance),
            },
        )
        return new_balance

    async def decrement(self, user_id: int, delta: Decimal) -> Decimal:
        """
        Debit a user's spendable balance.

        The WHERE clause carries the balance guard, so the check and the
        write are one statement.

        Args:
            user_id: User ID
            delta: Positive amount to subtract

        Returns:
            Balance after the update

        Raises:
            InvalidAmountError: If delta is not positive
            InsufficientBalanceError: If balance < delta
            UserNotFoundError: If the user does not exist
        """
        self._check_delta(delta)

        stmt = (
            update(User)
            .where(User.id == user_id, User.balance >= delta)
            .values(balance=User.balance - delta)
            .returning(User.balance)
        )
        result = await self.session.execute(stmt)
        new_balance = result.scalar_one_or_none()

        if new_balance is None:
            await self._raise_for_missing_row(user_id, delta)

        logger.debug(
            "Balance decremented",
            extra={
                "user_id": user_id,
                "delta": str(delta),
                "balance_after": str(new_balance),
            },
        )
        return new_balance

    async def lock_earnings(self, user_id: int, delta: Decimal) -> Decimal:
        """
        Add investment earnings to the locked earned_balance.

        Args:
            user_id: User ID
            delta: Positive amount to lock

        Returns:
            Earned balance after the update
        """
        self._check_delta(delta)

        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(earned_balance=User.earned_balance + delta)
            .returning(User.earned_balance)
        )
        result = await self.session.execute(stmt)
        earned = result.scalar_one_or_none()

        if earned is None:
            raise UserNotFoundError(f"User {user_id} not found")

        logger.debug(
            "Earnings locked",
            extra={"user_id": user_id, "delta": str(delta)},
        )
        return earned

    async def release_earnings(self, user_id: int, amount: Decimal) -> Decimal:
        """
        Move locked earnings to the spendable balance.

        Args:
            user_id: User ID
            amount: Positive amount to release

        Returns:
            Spendable balance after the update

        Raises:
            InsufficientBalanceError: If earned_balance < amount
            UserNotFoundError: If the user does not exist
        """
        self._check_delta(amount)

        stmt = (
            update(User)
            .where(User.id == user_id, User.earned_balance >= amount)
            .values(
                earned_balance=User.earned_balance - amount,
                balance=User.balance + amount,
            )
            .returning(User.balance)
        )
        result = await self.session.execute(stmt)
        new_balance = result.scalar_one_or_none()

        if new_balance is None:
            await self._raise_for_missing_row(user_id, amount)

        logger.info(
            "Earnings released",
            extra={
                "user_id": user_id,
                "amount": str(amount),
                "balance_after": str(new_balance),
            },
        )
        return new_balance

    async def _raise_for_missing_row(self, user_id: int, delta: Decimal) -> None:
        """Tell a failed guard apart from a missing user."""
        stmt = select(User.id).where(User.id == user_id)
        result = await self.session.execute(stmt)
        if result.scalar_one_or_none() is None:
            raise UserNotFoundError(f"User {user_id} not found")

        logger.warning(
            "Insufficient balance",
            extra={"user_id": user_id, "requested": str(delta)},
        )
        raise InsufficientBalanceError(user_id, delta)
