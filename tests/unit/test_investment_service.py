"""
Tests for InvestmentService.

Collections lock income in earned_balance and trigger one earning
commission walk each; the final collection releases earnings and returns
capital.
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from minefund.models import Investment, Plan
from minefund.services.investment_service import (
    InvestmentService,
    calculate_daily_profit,
)
from minefund.utils.exceptions import (
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidStatusTransitionError,
    InvestmentNotFoundError,
    NothingToCollectError,
)

START = datetime(2026, 1, 1, 9, 0, tzinfo=UTC)


class FakeInvestmentRepository:

    def __init__(self, *investments) -> None:
        self.investments = {i.id: i for i in investments}

    async def get_by_id(self, investment_id):
        return self.investments.get(investment_id)

    async def get_for_update(self, investment_id):
        return self.investments.get(investment_id)

    async def get_expired_active_ids(self, now):
        return sorted(self.investments) + [999]

    async def create(self, **data):
        investment = Investment(id=len(self.investments) + 1, **data)
        self.investments[investment.id] = investment
        return investment


class FakeCollectionRepository:

    def __init__(self) -> None:
        self.collections = []

    async def create(self, **data):
        collection = SimpleNamespace(id=100 + len(self.collections), **data)
        self.collections.append(collection)
        return collection


def make_investment(**overrides) -> Investment:
    values = {
        "id": 1,
        "user_id": 4,
        "plan_id": 1,
        "amount_invested": Decimal("1000"),
        "daily_profit_amount": Decimal("10"),
        "duration_days": 30,
        "capital_return": True,
        "status": "active",
        "start_date": START,
        "end_date": START + timedelta(days=30),
        "last_income_collection_date": None,
        "total_days_collected": 0,
        "total_earned": Decimal("0"),
    }
    values.update(overrides)
    return Investment(**values)


def make_plan(**overrides) -> Plan:
    values = {
        "id": 1,
        "name": "Starter",
        "duration_days": 30,
        "profit_percent": Decimal("30"),
        "min_investment": Decimal("500"),
        "max_investment": None,
        "capital_return": True,
        "status": "active",
    }
    values.update(overrides)
    return Plan(**values)


def make_service(world, *investments, plan=None) -> InvestmentService:
    service = InvestmentService(world.session, commission_engine=world.engine)
    service.investment_repo = FakeInvestmentRepository(*investments)
    service.collection_repo = FakeCollectionRepository()
    service.plan_repo = AsyncMock()
    service.plan_repo.get_by_id.return_value = plan
    service.settings_repo = world.settings_repo
    service.ledger = world.ledger
    return service


class TestDailyProfit:

    def test_formula(self):
        assert calculate_daily_profit(Decimal("1000"), Decimal("30"), 30) == Decimal("10")

    def test_rounds_down(self):
        assert calculate_daily_profit(Decimal("1000"), Decimal("10"), 3) == Decimal(
            "33.33333333"
        )


class TestAvailableDays:

    def test_first_collection_counts_start_day(self):
        investment = make_investment()

        assert investment.available_days(START) == 1
        assert investment.available_days(START + timedelta(days=5)) == 6

    def test_counts_from_last_collection(self):
        investment = make_investment(
            last_income_collection_date=START + timedelta(days=3),
            total_days_collected=4,
        )

        assert investment.available_days(START + timedelta(days=3, hours=23)) == 0
        assert investment.available_days(START + timedelta(days=5)) == 2

    def test_capped_by_remaining_days(self):
        investment = make_investment(total_days_collected=28)

        assert investment.available_days(START + timedelta(days=90)) == 2


class TestPurchasePlan:

    @pytest.mark.asyncio
    async def test_debits_balance_and_snapshots_terms(self, chain_world):
        chain_world.ledger.balances[4] = Decimal("5000")
        service = make_service(chain_world, plan=make_plan())

        investment = await service.purchase_plan(4, 1, Decimal("1000"), now=START)

        assert chain_world.balance(4) == Decimal("4000")
        assert investment.daily_profit_amount == Decimal("10")
        assert investment.end_date == START + timedelta(days=30)
        assert investment.duration_days == 30
        assert investment.capital_return is True
        assert chain_world.session.commits == 1

    @pytest.mark.asyncio
    async def test_insufficient_balance(self, chain_world):
        chain_world.ledger.balances[4] = Decimal("100")
        service = make_service(chain_world, plan=make_plan())

        with pytest.raises(InsufficientBalanceError):
            await service.purchase_plan(4, 1, Decimal("1000"))

        assert chain_world.session.rollbacks == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [Decimal("499"), Decimal("50001")])
    async def test_outside_limits(self, chain_world, amount):
        chain_world.ledger.balances[4] = Decimal("100000")
        service = make_service(chain_world, plan=make_plan())

        with pytest.raises(InvalidAmountError):
            await service.purchase_plan(4, 1, amount)

        assert chain_world.balance(4) == Decimal("100000")

    @pytest.mark.asyncio
    async def test_plan_max_overrides_settings_cap(self, chain_world):
        chain_world.ledger.balances[4] = Decimal("100000")
        service = make_service(
            chain_world, plan=make_plan(max_investment=Decimal("2000"))
        )

        with pytest.raises(InvalidAmountError):
            await service.purchase_plan(4, 1, Decimal("2500"))

    @pytest.mark.asyncio
    async def test_inactive_plan(self, chain_world):
        service = make_service(chain_world, plan=make_plan(status="inactive"))

        with pytest.raises(InvalidStatusTransitionError):
            await service.purchase_plan(4, 1, Decimal("1000"))


class TestCollectIncome:

    @pytest.mark.asyncio
    async def test_locks_income_and_pays_earning_commissions(self, chain_world):
        investment = make_investment()
        service = make_service(chain_world, investment)

        result = await service.collect_income(1, user_id=4, now=START + timedelta(days=5))

        assert result.days == 6
        assert result.amount == Decimal("60")
        assert result.completed is False
        assert chain_world.ledger.earned[4] == Decimal("60")
        assert chain_world.balance(4) == Decimal("0")
        assert investment.total_days_collected == 6
        assert investment.total_earned == Decimal("60")

        # 10/5/2 percent of 60, keyed by the collection id
        assert chain_world.balance(3) == Decimal("6")
        assert chain_world.balance(2) == Decimal("3")
        assert chain_world.balance(1) == Decimal("1.2")
        assert {r.source_id for r in chain_world.commissions.records} == {
            result.collection.id
        }

    @pytest.mark.asyncio
    async def test_nothing_to_collect_twice_in_a_day(self, chain_world):
        investment = make_investment()
        service = make_service(chain_world, investment)
        now = START + timedelta(days=2)
        await service.collect_income(1, user_id=4, now=now)

        with pytest.raises(NothingToCollectError):
            await service.collect_income(1, user_id=4, now=now + timedelta(hours=5))

        assert len(chain_world.commissions.records) == 3

    @pytest.mark.asyncio
    async def test_each_collection_is_its_own_event(self, chain_world):
        investment = make_investment()
        service = make_service(chain_world, investment)

        await service.collect_income(1, user_id=4, now=START)
        await service.collect_income(1, user_id=4, now=START + timedelta(days=1))

        assert len(chain_world.commissions.records) == 6
        assert chain_world.balance(3) == Decimal("2")

    @pytest.mark.asyncio
    async def test_other_users_investment(self, chain_world):
        service = make_service(chain_world, make_investment())

        with pytest.raises(InvestmentNotFoundError):
            await service.collect_income(1, user_id=3, now=START)

    @pytest.mark.asyncio
    async def test_final_collection_releases_earnings_and_capital(self, chain_world):
        investment = make_investment()
        service = make_service(chain_world, investment)

        result = await service.collect_income(
            1, user_id=4, now=START + timedelta(days=45)
        )

        assert result.days == 30
        assert result.completed is True
        assert result.collection.is_final_collection is True
        assert investment.status == "completed"
        assert chain_world.ledger.earned[4] == Decimal("0")
        # 300 profit released plus 1000 principal
        assert chain_world.balance(4) == Decimal("1300")

    @pytest.mark.asyncio
    async def test_final_collection_without_capital_return(self, chain_world):
        investment = make_investment(capital_return=False)
        service = make_service(chain_world, investment)

        await service.collect_income(1, user_id=4, now=START + timedelta(days=45))

        assert chain_world.balance(4) == Decimal("300")

    @pytest.mark.asyncio
    async def test_completed_investment_cannot_collect(self, chain_world):
        service = make_service(chain_world, make_investment(status="completed"))

        with pytest.raises(InvalidStatusTransitionError):
            await service.collect_income(1, user_id=4, now=START)


class TestSettlement:

    @pytest.mark.asyncio
    async def test_settles_remaining_days(self, chain_world):
        investment = make_investment(
            last_income_collection_date=START + timedelta(days=9),
            total_days_collected=10,
            total_earned=Decimal("100"),
        )
        chain_world.ledger.earned[4] = Decimal("100")
        service = make_service(chain_world, investment)

        result = await service.settle_investment(1, now=START + timedelta(days=31))

        assert result.days == 20
        assert result.amount == Decimal("200")
        assert investment.status == "completed"
        assert chain_world.balance(4) == Decimal("1300")

    @pytest.mark.asyncio
    async def test_not_expired_yet(self, chain_world):
        service = make_service(chain_world, make_investment())

        with pytest.raises(InvalidStatusTransitionError):
            await service.settle_investment(1, now=START + timedelta(days=10))

    @pytest.mark.asyncio
    async def test_run_continues_after_failure(self, chain_world):
        service = make_service(chain_world, make_investment())

        summary = await service.complete_expired_investments(
            now=START + timedelta(days=31)
        )

        assert summary.settled == [1]
        assert summary.failed == [999]
        assert summary.total == 2
        assert chain_world.session.commits == 1
        assert chain_world.session.rollbacks == 1


class TestManualEarnings:

    @pytest.mark.asyncio
    async def test_credits_spendable_balance(self, chain_world):
        investment = make_investment(total_days_collected=5, total_earned=Decimal("50"))
        service = make_service(chain_world, investment)

        collection = await service.credit_manual_earnings(
            1, 4, Decimal("25.5"), reason=" Downtime compensation ", admin_id=1
        )

        assert chain_world.balance(4) == Decimal("25.5")
        assert collection.is_manual is True
        assert collection.days_collected == 0
        assert collection.reason == "Downtime compensation"
        assert collection.credited_by_id == 1
        assert chain_world.session.commits == 1

    @pytest.mark.asyncio
    async def test_leaves_counters_and_commissions_alone(self, chain_world):
        investment = make_investment(total_days_collected=5, total_earned=Decimal("50"))
        service = make_service(chain_world, investment)

        await service.credit_manual_earnings(1, 4, Decimal("10"))

        assert investment.total_days_collected == 5
        assert investment.total_earned == Decimal("50")
        assert chain_world.ledger.earned[4] == Decimal("0")
        assert chain_world.commissions.records == []
        assert chain_world.balance(3) == Decimal("0")

    @pytest.mark.asyncio
    async def test_default_reason(self, chain_world):
        service = make_service(chain_world, make_investment())

        collection = await service.credit_manual_earnings(1, 4, Decimal("1"), reason="  ")

        assert collection.reason == "Manual earnings adjustment"

    @pytest.mark.asyncio
    async def test_other_users_investment_is_not_found(self, chain_world):
        service = make_service(chain_world, make_investment())

        with pytest.raises(InvestmentNotFoundError):
            await service.credit_manual_earnings(1, 3, Decimal("10"))

        assert chain_world.ledger.calls == []
        assert chain_world.session.rollbacks == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5"), Decimal("0.000000001")])
    async def test_non_positive_amount(self, chain_world, amount):
        service = make_service(chain_world, make_investment())

        with pytest.raises(InvalidAmountError):
            await service.credit_manual_earnings(1, 4, amount)

        assert chain_world.ledger.calls == []
