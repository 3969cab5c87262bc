"""
Withdrawal service.

Withdrawal requests and admin review. The gross amount leaves the balance
when the request is made and is refunded in full on rejection.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from minefund.models.enums import WithdrawalStatus
from minefund.models.withdrawal import Withdrawal
from minefund.repositories.admin_settings_repository import (
    AdminSettingsRepository,
)
from minefund.repositories.withdrawal_repository import WithdrawalRepository
from minefund.services.base_service import BaseService, transaction
from minefund.services.ledger import BalanceLedger
from minefund.services.withdrawal_window import WithdrawalWindow
from minefund.utils.datetime_utils import utc_now
from minefund.utils.exceptions import (
    InvalidAmountError,
    InvalidStatusTransitionError,
    SettingsNotFoundError,
    WithdrawalNotFoundError,
    WithdrawalWindowClosedError,
)
from minefund.utils.money import percent_of


def calculate_withdrawal_fee(
    amount: Decimal, fee_percent: Decimal
) -> tuple[Decimal, Decimal]:
    """
    Split a withdrawal into fee and net payout.

    Returns:
        Tuple of (fee_amount, net_amount)
    """
    fee = percent_of(amount, fee_percent)
    return fee, amount - fee


class WithdrawalService(BaseService):
    """Withdrawal lifecycle."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize withdrawal service."""
        super().__init__(session)
        self.withdrawal_repo = WithdrawalRepository(session)
        self.settings_repo = AdminSettingsRepository(session)
        self.ledger = BalanceLedger(session)

    async def get_window(self) -> WithdrawalWindow:
        """Current withdrawal window."""
        settings = await self.settings_repo.get_settings()
        if settings is None:
            raise SettingsNotFoundError("Admin settings are not configured")
        return WithdrawalWindow.from_settings(settings)

    @transaction
    async def request_withdrawal(
        self,
        user_id: int,
        amount: Decimal,
        now: datetime | None = None,
    ) -> Withdrawal:
        """
        Request a withdrawal.

        Args:
            user_id: Requesting user
            amount: Gross amount (fee included)
            now: Request time (defaults to current UTC time)

        Returns:
            Pending withdrawal

        Raises:
            WithdrawalWindowClosedError: Outside the withdrawal window
            InvalidAmountError: Below the minimum withdrawal amount
            InsufficientBalanceError: If the balance does not cover amount
        """
        settings = await self.settings_repo.get_settings()
        if settings is None:
            raise SettingsNotFoundError("Admin settings are not configured")

        window = WithdrawalWindow.from_settings(settings)
        if not window.is_open(now or utc_now()):
            raise WithdrawalWindowClosedError("Withdrawals are currently closed")

        if amount <= 0 or amount < settings.min_withdrawal_amount:
            raise InvalidAmountError(
                f"Minimum withdrawal amount is {settings.min_withdrawal_amount}"
            )

        fee, net = calculate_withdrawal_fee(amount, settings.withdrawal_fee_percent)

        await self.ledger.decrement(user_id, amount)

        withdrawal = await self.withdrawal_repo.create(
            user_id=user_id,
            amount=amount,
            fee_percent=settings.withdrawal_fee_percent,
            fee_amount=fee,
            net_amount=net,
            status=WithdrawalStatus.PENDING.value,
        )

        self.logger.info(
            "Withdrawal requested",
            extra={
                "withdrawal_id": withdrawal.id,
                "user_id": user_id,
                "amount": str(amount),
                "fee": str(fee),
                "net": str(net),
            },
        )
        return withdrawal

    async def _get_pending_for_update(
        self, withdrawal_id: int, action: str
    ) -> Withdrawal:
        withdrawal = await self.withdrawal_repo.get_for_update(withdrawal_id)
        if withdrawal is None:
            raise WithdrawalNotFoundError(f"Withdrawal {withdrawal_id} not found")
        if withdrawal.status != WithdrawalStatus.PENDING.value:
            raise InvalidStatusTransitionError(
                "withdrawal", withdrawal_id, withdrawal.status, action
            )
        return withdrawal

    @transaction
    async def approve_withdrawal(
        self, withdrawal_id: int, admin_notes: str | None = None
    ) -> Withdrawal:
        """Mark a pending withdrawal as paid out."""
        withdrawal = await self._get_pending_for_update(withdrawal_id, "approve")

        withdrawal.status = WithdrawalStatus.APPROVED.value
        withdrawal.processed_at = utc_now()
        if admin_notes:
            withdrawal.admin_notes = admin_notes
        await self.session.flush()

        self.logger.info(
            "Withdrawal approved",
            extra={
                "withdrawal_id": withdrawal_id,
                "user_id": withdrawal.user_id,
                "net": str(withdrawal.net_amount),
            },
        )
        return withdrawal

    @transaction
    async def reject_withdrawal(
        self,
        withdrawal_id: int,
        reason: str,
        admin_notes: str | None = None,
    ) -> Withdrawal:
        """
        Reject a pending withdrawal and refund the gross amount.

        Raises:
            ValueError: If reason is empty
        """
        if not reason or not reason.strip():
            raise ValueError("Rejection reason is required")

        withdrawal = await self._get_pending_for_update(withdrawal_id, "reject")

        withdrawal.status = WithdrawalStatus.REJECTED.value
        withdrawal.rejection_reason = reason.strip()
        withdrawal.processed_at = utc_now()
        if admin_notes:
            withdrawal.admin_notes = admin_notes
        await self.session.flush()

        await self.ledger.increment(withdrawal.user_id, withdrawal.amount)

        self.logger.info(
            "Withdrawal rejected and refunded",
            extra={
                "withdrawal_id": withdrawal_id,
                "user_id": withdrawal.user_id,
                "amount": str(withdrawal.amount),
            },
        )
        return withdrawal

    async def list_withdrawals(
        self,
        status: WithdrawalStatus | str | None = None,
        user_id: int | None = None,
        page: int = 1,
        per_page: int = 50,
    ) -> tuple[list[Withdrawal], int]:
        """List withdrawals for review or for one user, newest first."""
        filters = {}
        if status:
            filters["status"] = WithdrawalStatus(status).value
        if user_id is not None:
            filters["user_id"] = user_id
        return await self.withdrawal_repo.find_paginated(
            page=page, per_page=per_page, **filters
        )
