"""
Shared fixtures for unit tests.

In-memory stand-ins for the referral graph, the balance ledger, the
commission store and the settings row, plus a session whose savepoints
restore that state on error. Together they let the commission engine and
the services run their real logic without a database.
"""

import copy
from contextlib import asynccontextmanager
from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import IntegrityError

from minefund.config.business_constants import (
    DEFAULT_MAX_INVESTMENT_AMOUNT,
    DEFAULT_MIN_DEPOSIT_AMOUNT,
    DEFAULT_MIN_WITHDRAWAL_AMOUNT,
    DEFAULT_WITHDRAWAL_DAYS,
    DEFAULT_WITHDRAWAL_FEE_PERCENT,
)
from minefund.services.referral.chain_manager import ReferralChainManager
from minefund.services.referral.commission_engine import CommissionEngine
from minefund.utils.exceptions import (
    InsufficientBalanceError,
    UserNotFoundError,
)


class FakeUserRepository:
    """Referral graph: user_id -> referrer_id."""

    def __init__(self, referrers: dict[int, int | None]) -> None:
        self.referrers = dict(referrers)

    async def exists(self, id: int) -> bool:
        return id in self.referrers

    async def get_referrer_id(self, user_id: int) -> int | None:
        return self.referrers.get(user_id)

    async def update(self, id: int, **data):
        if id not in self.referrers:
            return None
        self.referrers[id] = data["referred_by_id"]
        return SimpleNamespace(id=id, **data)


class FakeLedger:
    """Balances keyed by user id; users in fail_on raise on credit."""

    def __init__(self, user_ids) -> None:
        self.balances = {user_id: Decimal("0") for user_id in user_ids}
        self.earned = {user_id: Decimal("0") for user_id in user_ids}
        self.fail_on: set[int] = set()
        self.calls: list[tuple[str, int, Decimal]] = []

    async def increment(self, user_id: int, delta: Decimal) -> Decimal:
        self.calls.append(("increment", user_id, delta))
        if user_id in self.fail_on:
            raise IntegrityError("UPDATE users", {}, Exception("forced failure"))
        if user_id not in self.balances:
            raise UserNotFoundError(f"User {user_id} not found")
        self.balances[user_id] += delta
        return self.balances[user_id]

    async def decrement(self, user_id: int, delta: Decimal) -> Decimal:
        self.calls.append(("decrement", user_id, delta))
        if self.balances[user_id] < delta:
            raise InsufficientBalanceError(user_id, delta)
        self.balances[user_id] -= delta
        return self.balances[user_id]

    async def lock_earnings(self, user_id: int, delta: Decimal) -> Decimal:
        self.calls.append(("lock_earnings", user_id, delta))
        self.earned[user_id] += delta
        return self.earned[user_id]

    async def release_earnings(self, user_id: int, amount: Decimal) -> Decimal:
        self.calls.append(("release_earnings", user_id, amount))
        if self.earned[user_id] < amount:
            raise InsufficientBalanceError(user_id, amount)
        self.earned[user_id] -= amount
        self.balances[user_id] += amount
        return self.balances[user_id]


class FakeCommissionRepository:
    """Commission records with the (type, source_id, level) unique key."""

    def __init__(self) -> None:
        self.records: list[SimpleNamespace] = []

    async def exists_for_event(self, commission_type: str, source_id: int) -> bool:
        return any(
            r.commission_type == commission_type and r.source_id == source_id
            for r in self.records
        )

    async def create(self, **data) -> SimpleNamespace:
        key = (data["commission_type"], data["source_id"], data["level"])
        if any((r.commission_type, r.source_id, r.level) == key for r in self.records):
            raise IntegrityError("INSERT referral_commissions", {}, Exception("duplicate"))
        record = SimpleNamespace(id=len(self.records) + 1, **data)
        self.records.append(record)
        return record


class FakeSettingsRepository:
    """Holds the admin settings row."""

    def __init__(self, settings) -> None:
        self.settings = settings

    async def get_settings(self):
        return self.settings


class FakeSession:
    """
    Session stand-in.

    begin_nested() snapshots the tracked stores and restores them when the
    block raises, like a database savepoint.
    """

    def __init__(self, *stores) -> None:
        self.stores = list(stores)
        self.savepoints = 0
        self.rolled_back_savepoints = 0
        self.commits = 0
        self.rollbacks = 0

    @asynccontextmanager
    async def begin_nested(self):
        self.savepoints += 1
        snapshot = [copy.deepcopy(store.__dict__) for store in self.stores]
        try:
            yield self
        except BaseException:
            for store, state in zip(self.stores, snapshot):
                store.__dict__.clear()
                store.__dict__.update(state)
            self.rolled_back_savepoints += 1
            raise

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


def make_settings(**overrides) -> SimpleNamespace:
    """Admin settings row with the default values."""
    values = {
        "referral_l1_percent": Decimal("10"),
        "referral_l2_percent": Decimal("5"),
        "referral_l3_percent": Decimal("2"),
        "min_deposit_amount": DEFAULT_MIN_DEPOSIT_AMOUNT,
        "min_withdrawal_amount": DEFAULT_MIN_WITHDRAWAL_AMOUNT,
        "withdrawal_fee_percent": DEFAULT_WITHDRAWAL_FEE_PERCENT,
        "max_investment_amount": DEFAULT_MAX_INVESTMENT_AMOUNT,
        "withdrawal_enabled": True,
        "withdrawal_auto_schedule": False,
        "withdrawal_start_time": "11:00",
        "withdrawal_end_time": "20:00",
        "withdrawal_days_enabled": DEFAULT_WITHDRAWAL_DAYS,
        "withdrawal_timezone": "Asia/Karachi",
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class CommissionWorld:
    """A referral graph wired to a real CommissionEngine over fakes."""

    def __init__(self, referrers: dict[int, int | None], settings=None) -> None:
        self.users = FakeUserRepository(referrers)
        self.ledger = FakeLedger(referrers)
        self.commissions = FakeCommissionRepository()
        self.settings_repo = FakeSettingsRepository(
            settings if settings is not None else make_settings()
        )
        self.session = FakeSession(self.ledger, self.commissions)
        self.chain_manager = ReferralChainManager(self.session, self.users)
        self.engine = CommissionEngine(
            self.session,
            chain_manager=self.chain_manager,
            ledger=self.ledger,
            commission_repo=self.commissions,
            settings_repo=self.settings_repo,
            user_repo=self.users,
        )

    def balance(self, user_id: int) -> Decimal:
        return self.ledger.balances[user_id]

    @property
    def total_balance(self) -> Decimal:
        return sum(self.ledger.balances.values(), Decimal("0"))


@pytest.fixture
def make_world():
    """Factory for CommissionWorld instances."""
    return CommissionWorld


@pytest.fixture
def chain_world():
    """
    Four-user chain: 4 was referred by 3, 3 by 2, 2 by 1.

    User 4 is the beneficiary; 3, 2 and 1 are its L1, L2 and L3 referrers.
    """
    return CommissionWorld({1: None, 2: 1, 3: 2, 4: 3})


@pytest.fixture
def settings_row():
    """Factory for admin settings rows with overrides."""
    return make_settings
