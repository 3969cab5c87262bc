"""
Tests for DepositService.

Approval is the single trigger of deposit commissions: one approval, one
walk. The service runs against the commission fakes from conftest.
"""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from minefund.models import Deposit
from minefund.services.deposit_service import DepositService
from minefund.utils.exceptions import (
    CommissionWalkError,
    DepositNotFoundError,
    InvalidAmountError,
    InvalidStatusTransitionError,
)


class FakeDepositRepository:

    def __init__(self, *deposits) -> None:
        self.deposits = {d.id: d for d in deposits}

    async def get_for_update(self, deposit_id):
        return self.deposits.get(deposit_id)


def make_service(world, *deposits) -> DepositService:
    service = DepositService(world.session, commission_engine=world.engine)
    service.deposit_repo = FakeDepositRepository(*deposits)
    service.settings_repo = world.settings_repo
    service.user_repo = world.users
    service.ledger = world.ledger
    return service


@pytest.fixture
def pending_deposit():
    return Deposit(id=11, user_id=4, amount=Decimal("1000"), status="pending")


class TestApproveDeposit:

    @pytest.mark.asyncio
    async def test_credits_depositor_and_pays_direct_referrer(
        self, chain_world, pending_deposit
    ):
        service = make_service(chain_world, pending_deposit)

        deposit, commissions = await service.approve_deposit(11, admin_id=1)

        assert deposit.status == "approved"
        assert deposit.processed_by_id == 1
        assert deposit.processed_at is not None
        assert chain_world.balance(4) == Decimal("1000")
        assert chain_world.balance(3) == Decimal("100")
        assert chain_world.balance(2) == Decimal("0")
        assert commissions.levels_paid == [1]
        assert chain_world.commissions.records[0].source_id == 11
        assert chain_world.session.commits == 1

    @pytest.mark.asyncio
    async def test_second_approval_pays_nothing(self, chain_world, pending_deposit):
        service = make_service(chain_world, pending_deposit)
        await service.approve_deposit(11)

        with pytest.raises(InvalidStatusTransitionError):
            await service.approve_deposit(11)

        assert chain_world.balance(4) == Decimal("1000")
        assert chain_world.balance(3) == Decimal("100")
        assert len(chain_world.commissions.records) == 1
        assert chain_world.session.rollbacks == 1

    @pytest.mark.asyncio
    async def test_single_commission_walk_per_approval(
        self, chain_world, pending_deposit
    ):
        engine = AsyncMock()
        service = make_service(chain_world, pending_deposit)
        service.commission_engine = engine

        await service.approve_deposit(11)

        engine.apply_commissions.assert_awaited_once_with(
            beneficiary_id=4,
            base_amount=Decimal("1000"),
            event_type="deposit",
            source_id=11,
        )

    @pytest.mark.asyncio
    async def test_commission_failure_rolls_back_approval(
        self, chain_world, pending_deposit
    ):
        chain_world.ledger.fail_on = {3}
        service = make_service(chain_world, pending_deposit)

        with pytest.raises(CommissionWalkError):
            await service.approve_deposit(11)

        assert chain_world.session.rollbacks == 1
        assert chain_world.session.commits == 0
        assert chain_world.commissions.records == []

    @pytest.mark.asyncio
    async def test_unknown_deposit(self, chain_world):
        service = make_service(chain_world)

        with pytest.raises(DepositNotFoundError):
            await service.approve_deposit(404)


class TestRejectDeposit:

    @pytest.mark.asyncio
    async def test_reject_moves_no_money(self, chain_world, pending_deposit):
        service = make_service(chain_world, pending_deposit)

        deposit = await service.reject_deposit(11, reason="  proof unreadable ")

        assert deposit.status == "rejected"
        assert deposit.rejection_reason == "proof unreadable"
        assert chain_world.ledger.calls == []

    @pytest.mark.asyncio
    async def test_reason_required(self, chain_world, pending_deposit):
        service = make_service(chain_world, pending_deposit)

        with pytest.raises(ValueError):
            await service.reject_deposit(11, reason=" ")

        assert pending_deposit.status == "pending"

    @pytest.mark.asyncio
    async def test_rejected_deposit_cannot_be_approved(
        self, chain_world, pending_deposit
    ):
        service = make_service(chain_world, pending_deposit)
        await service.reject_deposit(11, reason="duplicate")

        with pytest.raises(InvalidStatusTransitionError):
            await service.approve_deposit(11)

        assert chain_world.balance(4) == Decimal("0")


class TestCreateDeposit:

    @pytest.mark.asyncio
    async def test_below_minimum(self, chain_world):
        service = make_service(chain_world)

        with pytest.raises(InvalidAmountError):
            await service.create_deposit(4, Decimal("499.99"))

    @pytest.mark.asyncio
    async def test_creates_pending_deposit(self, chain_world):
        service = make_service(chain_world)
        service.deposit_repo = AsyncMock()
        service.deposit_repo.create.return_value = Deposit(
            id=1, user_id=4, amount=Decimal("500"), status="pending"
        )

        deposit = await service.create_deposit(
            4, Decimal("500"), sender_name="A. Khan", sender_account_last4="1234"
        )

        assert deposit.is_pending
        kwargs = service.deposit_repo.create.await_args.kwargs
        assert kwargs["status"] == "pending"
        assert kwargs["sender_account_last4"] == "1234"
        assert chain_world.session.commits == 1


@pytest.mark.asyncio
async def test_list_deposits_filters(mock_session):
    service = DepositService(mock_session, commission_engine=AsyncMock())
    service.deposit_repo = AsyncMock()
    service.deposit_repo.find_paginated.return_value = ([], 0)

    await service.list_deposits(status="pending", user_id=4, page=2)

    service.deposit_repo.find_paginated.assert_awaited_once_with(
        page=2, per_page=50, status="pending", user_id=4
    )
