"""
Tests for withdrawal rules.

Window: closed when disabled, always open without auto schedule,
otherwise enabled weekdays within [start, end) in the configured timezone.
Requests take the fee out of the requested amount.
"""

from datetime import UTC, datetime, time
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from minefund.services.withdrawal_service import (
    WithdrawalService,
    calculate_withdrawal_fee,
)
from minefund.services.withdrawal_window import (
    WithdrawalWindow,
    parse_days,
    parse_hhmm,
)
from minefund.utils.exceptions import (
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidStatusTransitionError,
    WithdrawalWindowClosedError,
)

# Asia/Karachi is UTC+5 all year; 2026-10-19 is a Monday
MONDAY_NOON_PKT = datetime(2026, 10, 19, 7, 0, tzinfo=UTC)
SUNDAY_NOON_PKT = datetime(2026, 10, 18, 7, 0, tzinfo=UTC)


@pytest.fixture
def scheduled(settings_row):
    return settings_row(withdrawal_auto_schedule=True)


class TestParsing:

    def test_parse_hhmm(self):
        assert parse_hhmm("09:30") == time(9, 30)

    def test_parse_days(self):
        assert parse_days("monday, Friday,,sunday") == frozenset({0, 4, 6})


class TestWithdrawalWindow:

    def test_open_inside_hours(self, scheduled):
        window = WithdrawalWindow.from_settings(scheduled)
        assert window.is_open(MONDAY_NOON_PKT) is True

    @pytest.mark.parametrize(
        "moment",
        [
            datetime(2026, 10, 19, 5, 59, tzinfo=UTC),  # 10:59 local
            datetime(2026, 10, 19, 15, 0, tzinfo=UTC),  # 20:00 local, end excluded
        ],
    )
    def test_closed_outside_hours(self, scheduled, moment):
        window = WithdrawalWindow.from_settings(scheduled)
        assert window.is_open(moment) is False

    def test_start_is_inclusive(self, scheduled):
        window = WithdrawalWindow.from_settings(scheduled)
        assert window.is_open(datetime(2026, 10, 19, 6, 0, tzinfo=UTC)) is True

    def test_closed_on_disabled_day(self, scheduled):
        window = WithdrawalWindow.from_settings(scheduled)
        assert window.is_open(SUNDAY_NOON_PKT) is False

    def test_weekday_is_taken_in_local_time(self, settings_row):
        """Sunday 20:00 UTC is Monday 01:00 in Karachi."""
        window = WithdrawalWindow.from_settings(
            settings_row(
                withdrawal_auto_schedule=True,
                withdrawal_start_time="00:00",
                withdrawal_end_time="23:59",
            )
        )
        assert window.is_open(datetime(2026, 10, 18, 20, 0, tzinfo=UTC)) is True

    def test_without_auto_schedule_always_open(self, settings_row):
        window = WithdrawalWindow.from_settings(settings_row())
        assert window.is_open(SUNDAY_NOON_PKT) is True

    def test_disabled_always_closed(self, settings_row):
        window = WithdrawalWindow.from_settings(
            settings_row(withdrawal_enabled=False)
        )
        assert window.is_open(MONDAY_NOON_PKT) is False

    def test_naive_time_read_as_utc(self, scheduled):
        window = WithdrawalWindow.from_settings(scheduled)
        assert window.is_open(datetime(2026, 10, 19, 7, 0)) is True


class TestWithdrawalFee:

    def test_fee_is_taken_from_amount(self):
        assert calculate_withdrawal_fee(Decimal("1000"), Decimal("10")) == (
            Decimal("100"),
            Decimal("900"),
        )

    def test_zero_fee(self):
        assert calculate_withdrawal_fee(Decimal("750"), Decimal("0")) == (
            Decimal("0"),
            Decimal("750"),
        )


def make_service(world) -> WithdrawalService:
    service = WithdrawalService(world.session)
    service.settings_repo = world.settings_repo
    service.ledger = world.ledger
    service.withdrawal_repo = AsyncMock()
    service.withdrawal_repo.create.side_effect = lambda **data: SimpleNamespace(
        id=1, **data
    )
    return service


class TestRequestWithdrawal:

    @pytest.mark.asyncio
    async def test_debits_gross_amount(self, chain_world):
        chain_world.ledger.balances[4] = Decimal("2000")
        service = make_service(chain_world)

        withdrawal = await service.request_withdrawal(
            4, Decimal("1000"), now=MONDAY_NOON_PKT
        )

        assert chain_world.balance(4) == Decimal("1000")
        assert withdrawal.fee_amount == Decimal("100")
        assert withdrawal.net_amount == Decimal("900")
        assert withdrawal.status == "pending"

    @pytest.mark.asyncio
    async def test_window_closed(self, chain_world, scheduled):
        chain_world.ledger.balances[4] = Decimal("2000")
        chain_world.settings_repo.settings = scheduled
        service = make_service(chain_world)

        with pytest.raises(WithdrawalWindowClosedError):
            await service.request_withdrawal(4, Decimal("1000"), now=SUNDAY_NOON_PKT)

        assert chain_world.balance(4) == Decimal("2000")

    @pytest.mark.asyncio
    async def test_below_minimum(self, chain_world):
        chain_world.ledger.balances[4] = Decimal("2000")
        service = make_service(chain_world)

        with pytest.raises(InvalidAmountError):
            await service.request_withdrawal(4, Decimal("499"), now=MONDAY_NOON_PKT)

    @pytest.mark.asyncio
    async def test_insufficient_balance(self, chain_world):
        chain_world.ledger.balances[4] = Decimal("600")
        service = make_service(chain_world)

        with pytest.raises(InsufficientBalanceError):
            await service.request_withdrawal(4, Decimal("1000"), now=MONDAY_NOON_PKT)

        service.withdrawal_repo.create.assert_not_awaited()


class TestReviewWithdrawal:

    @pytest.mark.asyncio
    async def test_reject_refunds_gross_amount(self, chain_world):
        service = make_service(chain_world)
        withdrawal = SimpleNamespace(
            id=5, user_id=4, amount=Decimal("1000"), status="pending",
            net_amount=Decimal("900"),
        )
        service.withdrawal_repo.get_for_update.return_value = withdrawal

        await service.reject_withdrawal(5, reason="account mismatch")

        assert withdrawal.status == "rejected"
        assert chain_world.balance(4) == Decimal("1000")

    @pytest.mark.asyncio
    async def test_approve_only_pending(self, chain_world):
        service = make_service(chain_world)
        service.withdrawal_repo.get_for_update.return_value = SimpleNamespace(
            id=5, user_id=4, amount=Decimal("1000"), status="rejected",
        )

        with pytest.raises(InvalidStatusTransitionError):
            await service.approve_withdrawal(5)
