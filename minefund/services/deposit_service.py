"""
Deposit service.

Deposit lifecycle: creation, admin review and the deposit commission
trigger.
"""

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from minefund.models.deposit import Deposit
from minefund.models.enums import CommissionType, DepositStatus
from minefund.repositories.admin_settings_repository import (
    AdminSettingsRepository,
)
from minefund.repositories.deposit_repository import DepositRepository
from minefund.repositories.user_repository import UserRepository
from minefund.services.base_service import BaseService, transaction
from minefund.services.ledger import BalanceLedger
from minefund.services.referral.commission_engine import (
    CommissionEngine,
    CommissionResult,
)
from minefund.utils.datetime_utils import utc_now
from minefund.utils.exceptions import (
    DepositNotFoundError,
    InvalidAmountError,
    InvalidStatusTransitionError,
    SettingsNotFoundError,
    UserNotFoundError,
)


class DepositService(BaseService):
    """Deposit service handles deposit lifecycle."""

    def __init__(
        self,
        session: AsyncSession,
        commission_engine: CommissionEngine | None = None,
    ) -> None:
        """Initialize deposit service."""
        super().__init__(session)
        self.deposit_repo = DepositRepository(session)
        self.user_repo = UserRepository(session)
        self.settings_repo = AdminSettingsRepository(session)
        self.ledger = BalanceLedger(session)
        self.commission_engine = commission_engine or CommissionEngine(session)

    @transaction
    async def create_deposit(
        self,
        user_id: int,
        amount: Decimal,
        sender_name: str | None = None,
        sender_account_last4: str | None = None,
        proof_url: str | None = None,
    ) -> Deposit:
        """
        Create a pending deposit.

        Args:
            user_id: Depositor
            amount: Deposited amount
            sender_name: Name on the sending account
            sender_account_last4: Last four digits of the sending account
            proof_url: Payment proof location

        Returns:
            Created deposit

        Raises:
            InvalidAmountError: If amount is below the configured minimum
            UserNotFoundError: If the user does not exist
        """
        settings = await self.settings_repo.get_settings()
        if settings is None:
            raise SettingsNotFoundError("Admin settings are not configured")

        if amount <= 0 or amount < settings.min_deposit_amount:
            raise InvalidAmountError(
                f"Minimum deposit amount is {settings.min_deposit_amount}"
            )

        if not await self.user_repo.exists(id=user_id):
            raise UserNotFoundError(f"User {user_id} not found")

        deposit = await self.deposit_repo.create(
            user_id=user_id,
            amount=amount,
            sender_name=sender_name,
            sender_account_last4=sender_account_last4,
            proof_url=proof_url,
            status=DepositStatus.PENDING.value,
        )

        self.logger.info(
            "Deposit created",
            extra={
                "deposit_id": deposit.id,
                "user_id": user_id,
                "amount": str(amount),
            },
        )
        return deposit

    async def _get_pending_for_update(self, deposit_id: int, action: str) -> Deposit:
        deposit = await self.deposit_repo.get_for_update(deposit_id)
        if deposit is None:
            raise DepositNotFoundError(f"Deposit {deposit_id} not found")
        if not deposit.is_pending:
            raise InvalidStatusTransitionError(
                "deposit", deposit_id, deposit.status, action
            )
        return deposit

    @transaction
    async def approve_deposit(
        self,
        deposit_id: int,
        admin_id: int | None = None,
        admin_notes: str | None = None,
    ) -> tuple[Deposit, CommissionResult]:
        """
        Approve a pending deposit.

        The deposit row is locked first, so of two concurrent approvals only
        one sees it pending. Status change, balance credit and the deposit
        commission walk commit together.

        Args:
            deposit_id: Deposit ID
            admin_id: Reviewing admin
            admin_notes: Optional notes

        Returns:
            Tuple of (approved deposit, commission result)

        Raises:
            DepositNotFoundError: If the deposit does not exist
            InvalidStatusTransitionError: If the deposit is not pending
        """
        deposit = await self._get_pending_for_update(deposit_id, "approve")

        deposit.status = DepositStatus.APPROVED.value
        deposit.processed_at = utc_now()
        deposit.processed_by_id = admin_id
        if admin_notes:
            deposit.admin_notes = admin_notes
        await self.session.flush()

        await self.ledger.increment(deposit.user_id, deposit.amount)

        commissions = await self.commission_engine.apply_commissions(
            beneficiary_id=deposit.user_id,
            base_amount=deposit.amount,
            event_type=CommissionType.DEPOSIT,
            source_id=deposit.id,
        )

        self.logger.info(
            "Deposit approved",
            extra={
                "deposit_id": deposit.id,
                "user_id": deposit.user_id,
                "amount": str(deposit.amount),
                "commission_total": str(commissions.total_amount),
            },
        )
        return deposit, commissions

    @transaction
    async def reject_deposit(
        self,
        deposit_id: int,
        reason: str,
        admin_id: int | None = None,
        admin_notes: str | None = None,
    ) -> Deposit:
        """
        Reject a pending deposit. No money moves.

        Raises:
            ValueError: If reason is empty
            DepositNotFoundError: If the deposit does not exist
            InvalidStatusTransitionError: If the deposit is not pending
        """
        if not reason or not reason.strip():
            raise ValueError("Rejection reason is required")

        deposit = await self._get_pending_for_update(deposit_id, "reject")

        deposit.status = DepositStatus.REJECTED.value
        deposit.rejection_reason = reason.strip()
        deposit.processed_at = utc_now()
        deposit.processed_by_id = admin_id
        if admin_notes:
            deposit.admin_notes = admin_notes
        await self.session.flush()

        self.logger.info(
            "Deposit rejected",
            extra={"deposit_id": deposit.id, "user_id": deposit.user_id},
        )
        return deposit

    async def list_deposits(
        self,
        status: DepositStatus | str | None = None,
        user_id: int | None = None,
        page: int = 1,
        per_page: int = 50,
    ) -> tuple[list[Deposit], int]:
        """
        List deposits for review or for one user, newest first.

        Returns:
            Tuple of (deposits, total count)
        """
        filters = {}
        if status:
            filters["status"] = DepositStatus(status).value
        if user_id is not None:
            filters["user_id"] = user_id
        return await self.deposit_repo.find_paginated(
            page=page, per_page=per_page, **filters
        )
