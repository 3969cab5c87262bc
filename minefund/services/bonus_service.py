"""
Bonus service.

Admin bonus credits: the amount goes straight to the spendable balance
and is recorded in bonus_transactions. Bonuses are not referral events
and pay no commissions.
"""

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from minefund.config.business_constants import DEFAULT_BONUS_REASON
from minefund.models.bonus_transaction import BonusTransaction
from minefund.models.enums import BonusStatus
from minefund.repositories.bonus_repository import BonusTransactionRepository
from minefund.services.base_service import BaseService, transaction
from minefund.services.ledger import BalanceLedger
from minefund.utils.exceptions import InvalidAmountError
from minefund.utils.money import quantize_money


class BonusService(BaseService):
    """Service for admin bonus credits."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize bonus service."""
        super().__init__(session)
        self.bonus_repo = BonusTransactionRepository(session)
        self.ledger = BalanceLedger(session)

    @transaction
    async def credit_bonus(
        self,
        user_id: int,
        amount: Decimal,
        reason: str | None = None,
        admin_id: int | None = None,
    ) -> BonusTransaction:
        """
        Credit a bonus to a user's spendable balance.

        Args:
            user_id: Recipient
            amount: Bonus amount
            reason: Admin's reason (defaults to "Admin bonus")
            admin_id: Granting admin

        Returns:
            Recorded bonus transaction

        Raises:
            InvalidAmountError: If amount is not positive at money precision
            UserNotFoundError: If the user does not exist
        """
        amount = quantize_money(amount)
        if amount <= 0:
            raise InvalidAmountError("Bonus amount must be positive")

        new_balance = await self.ledger.increment(user_id, amount)

        bonus = await self.bonus_repo.create(
            user_id=user_id,
            admin_id=admin_id,
            amount=amount,
            reason=(reason or "").strip() or DEFAULT_BONUS_REASON,
            status=BonusStatus.COMPLETED.value,
        )

        self.logger.info(
            "Bonus credited",
            extra={
                "bonus_id": bonus.id,
                "user_id": user_id,
                "admin_id": admin_id,
                "amount": str(amount),
                "balance_after": str(new_balance),
            },
        )
        return bonus

    async def list_bonuses(
        self,
        user_id: int | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[list[BonusTransaction], int]:
        """
        Bonus history, newest first.

        Returns:
            Tuple of (bonus transactions, total count)
        """
        filters = {}
        if user_id is not None:
            filters["user_id"] = user_id
        return await self.bonus_repo.find_paginated(
            page=page, per_page=per_page, **filters
        )
