"""
Investment service.

Plan purchases, daily income collection and settlement of completed
investments. Collected income is locked in earned_balance until the
investment completes; every collection triggers one earning commission
walk keyed by the collection's ID.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from minefund.config.business_constants import DEFAULT_MANUAL_EARNINGS_REASON
from minefund.models.enums import CommissionType, InvestmentStatus
from minefund.models.income_collection import IncomeCollection
from minefund.models.investment import Investment
from minefund.repositories.admin_settings_repository import (
    AdminSettingsRepository,
)
from minefund.repositories.investment_repository import (
    IncomeCollectionRepository,
    InvestmentRepository,
)
from minefund.repositories.plan_repository import PlanRepository
from minefund.services.base_service import BaseService, log_operation, transaction
from minefund.services.ledger import BalanceLedger
from minefund.services.referral.commission_engine import (
    CommissionEngine,
    CommissionResult,
)
from minefund.utils.datetime_utils import ensure_aware, utc_now
from minefund.utils.exceptions import (
    InvalidAmountError,
    InvalidStatusTransitionError,
    InvestmentNotFoundError,
    MinefundError,
    NothingToCollectError,
    PlanNotFoundError,
    SettingsNotFoundError,
)
from minefund.utils.money import quantize_money


def calculate_daily_profit(
    amount: Decimal, profit_percent: Decimal, duration_days: int
) -> Decimal:
    """
    Daily profit of an investment.

    Formula: amount * profit_percent / 100 / duration_days

    Example:
        >>> calculate_daily_profit(Decimal("1000"), Decimal("30"), 30)
        Decimal('10.00000000')
    """
    return quantize_money(amount * profit_percent / Decimal("100") / duration_days)


@dataclass
class CollectionResult:
    """Result of one income collection."""

    investment: Investment
    collection: IncomeCollection | None
    amount: Decimal
    days: int
    completed: bool
    commissions: CommissionResult | None = None


@dataclass
class SettlementSummary:
    """Result of a settlement run."""

    settled: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Investments processed."""
        return len(self.settled) + len(self.failed)


class InvestmentService(BaseService):
    """Investment lifecycle."""

    def __init__(
        self,
        session: AsyncSession,
        commission_engine: CommissionEngine | None = None,
    ) -> None:
        """Initialize investment service."""
        super().__init__(session)
        self.investment_repo = InvestmentRepository(session)
        self.collection_repo = IncomeCollectionRepository(session)
        self.plan_repo = PlanRepository(session)
        self.settings_repo = AdminSettingsRepository(session)
        self.ledger = BalanceLedger(session)
        self.commission_engine = commission_engine or CommissionEngine(session)

    @transaction
    async def purchase_plan(
        self,
        user_id: int,
        plan_id: int,
        amount: Decimal,
        now: datetime | None = None,
    ) -> Investment:
        """
        Buy a plan from the spendable balance.

        Args:
            user_id: Investor
            plan_id: Plan to buy
            amount: Principal
            now: Purchase time (defaults to current UTC time)

        Returns:
            Created investment

        Raises:
            PlanNotFoundError: If the plan does not exist
            InvalidStatusTransitionError: If the plan is inactive
            InvalidAmountError: If amount is outside the plan limits
            InsufficientBalanceError: If the balance does not cover amount
        """
        plan = await self.plan_repo.get_by_id(plan_id)
        if plan is None:
            raise PlanNotFoundError(f"Plan {plan_id} not found")
        if not plan.is_active:
            raise InvalidStatusTransitionError("plan", plan_id, plan.status, "purchase")

        if amount < plan.min_investment:
            raise InvalidAmountError(
                f"Minimum investment for this plan is {plan.min_investment}"
            )

        max_investment = plan.max_investment
        if max_investment is None:
            settings = await self.settings_repo.get_settings()
            if settings is None:
                raise SettingsNotFoundError("Admin settings are not configured")
            max_investment = settings.max_investment_amount
        if amount > max_investment:
            raise InvalidAmountError(
                f"Maximum investment for this plan is {max_investment}"
            )

        await self.ledger.decrement(user_id, amount)

        start = ensure_aware(now) if now else utc_now()
        investment = await self.investment_repo.create(
            user_id=user_id,
            plan_id=plan.id,
            amount_invested=amount,
            daily_profit_amount=calculate_daily_profit(
                amount, plan.profit_percent, plan.duration_days
            ),
            duration_days=plan.duration_days,
            capital_return=plan.capital_return,
            status=InvestmentStatus.ACTIVE.value,
            start_date=start,
            end_date=start + timedelta(days=plan.duration_days),
            total_days_collected=0,
            total_earned=Decimal("0"),
        )

        self.logger.info(
            "Plan purchased",
            extra={
                "investment_id": investment.id,
                "user_id": user_id,
                "plan_id": plan_id,
                "amount": str(amount),
                "daily_profit": str(investment.daily_profit_amount),
            },
        )
        return investment

    @transaction
    async def collect_income(
        self,
        investment_id: int,
        user_id: int,
        now: datetime | None = None,
    ) -> CollectionResult:
        """
        Collect the income accrued since the last collection.

        Args:
            investment_id: Investment ID
            user_id: Owner (collections by other users are refused)
            now: Collection time (defaults to current UTC time)

        Returns:
            CollectionResult

        Raises:
            InvestmentNotFoundError: If missing or owned by another user
            InvalidStatusTransitionError: If the investment is completed
            NothingToCollectError: If no full day has passed
        """
        investment = await self.investment_repo.get_for_update(investment_id)
        if investment is None or investment.user_id != user_id:
            raise InvestmentNotFoundError(f"Investment {investment_id} not found")
        if not investment.is_active:
            raise InvalidStatusTransitionError(
                "investment", investment_id, investment.status, "collect"
            )

        now = ensure_aware(now) if now else utc_now()
        days = investment.available_days(now)
        if days <= 0:
            raise NothingToCollectError(
                f"Nothing to collect for investment {investment_id} yet"
            )

        return await self._collect(investment, days, now)

    @transaction
    async def settle_investment(
        self, investment_id: int, now: datetime | None = None
    ) -> CollectionResult:
        """
        Complete an expired investment by collecting all remaining days.

        Raises:
            InvestmentNotFoundError: If the investment does not exist
            InvalidStatusTransitionError: If already completed or not expired
        """
        investment = await self.investment_repo.get_for_update(investment_id)
        if investment is None:
            raise InvestmentNotFoundError(f"Investment {investment_id} not found")

        now = ensure_aware(now) if now else utc_now()
        if not investment.is_active or ensure_aware(investment.end_date) > now:
            raise InvalidStatusTransitionError(
                "investment", investment_id, investment.status, "settle"
            )

        if investment.remaining_days == 0:
            await self._complete(investment)
            return CollectionResult(
                investment=investment,
                collection=None,
                amount=Decimal("0"),
                days=0,
                completed=True,
            )

        return await self._collect(investment, investment.remaining_days, now)

    @log_operation
    async def complete_expired_investments(
        self, now: datetime | None = None
    ) -> SettlementSummary:
        """
        Settle every active investment past its end date.

        Each investment is settled in its own transaction; a failure is
        logged and does not stop the run.
        """
        now = ensure_aware(now) if now else utc_now()
        summary = SettlementSummary()

        for investment_id in await self.investment_repo.get_expired_active_ids(now):
            try:
                await self.settle_investment(investment_id, now)
            except (MinefundError, SQLAlchemyError) as e:
                self.logger.warning(
                    f"Failed to settle investment {investment_id}: {e}"
                )
                summary.failed.append(investment_id)
            else:
                summary.settled.append(investment_id)

        self.logger.info(
            "Expired investments settled",
            extra={
                "settled": len(summary.settled),
                "failed": len(summary.failed),
            },
        )
        return summary

    async def list_investments(
        self, user_id: int, status: InvestmentStatus | str | None = None
    ) -> list[Investment]:
        """List a user's investments, newest first."""
        return await self.investment_repo.get_by_user(
            user_id, InvestmentStatus(status).value if status else None
        )

    @transaction
    async def credit_manual_earnings(
        self,
        investment_id: int,
        user_id: int,
        amount: Decimal,
        reason: str | None = None,
        admin_id: int | None = None,
    ) -> IncomeCollection:
        """
        Credit admin-granted earnings against an investment.

        The amount goes straight to the spendable balance. The investment's
        day counters and locked earnings are untouched, and no commission
        walk runs.

        Args:
            investment_id: Investment the earnings are booked against
            user_id: Owner of the investment
            amount: Amount to credit
            reason: Admin's reason
            admin_id: Crediting admin

        Returns:
            Manual income collection record

        Raises:
            InvalidAmountError: If amount is not positive at money precision
            InvestmentNotFoundError: If missing or owned by another user
        """
        amount = quantize_money(amount)
        if amount <= 0:
            raise InvalidAmountError("Manual earnings amount must be positive")

        investment = await self.investment_repo.get_by_id(investment_id)
        if investment is None or investment.user_id != user_id:
            raise InvestmentNotFoundError(f"Investment {investment_id} not found")

        await self.ledger.increment(user_id, amount)

        collection = await self.collection_repo.create(
            user_id=user_id,
            investment_id=investment_id,
            amount=amount,
            days_collected=0,
            is_final_collection=False,
            is_manual=True,
            reason=(reason or "").strip() or DEFAULT_MANUAL_EARNINGS_REASON,
            credited_by_id=admin_id,
        )

        self.logger.info(
            "Manual earnings credited",
            extra={
                "collection_id": collection.id,
                "investment_id": investment_id,
                "user_id": user_id,
                "admin_id": admin_id,
                "amount": str(amount),
            },
        )
        return collection

    async def _collect(
        self, investment: Investment, days: int, now: datetime
    ) -> CollectionResult:
        """Record a collection of days, lock the income and pay commissions."""
        is_final = days >= investment.remaining_days
        amount = quantize_money(investment.daily_profit_amount * days)

        collection = None
        commissions = None
        if amount > 0:
            collection = await self.collection_repo.create(
                user_id=investment.user_id,
                investment_id=investment.id,
                amount=amount,
                days_collected=days,
                is_final_collection=is_final,
            )
            await self.ledger.lock_earnings(investment.user_id, amount)

        investment.total_days_collected += days
        investment.total_earned += amount
        investment.last_income_collection_date = now
        await self.session.flush()

        if collection is not None:
            commissions = await self.commission_engine.apply_commissions(
                beneficiary_id=investment.user_id,
                base_amount=amount,
                event_type=CommissionType.EARNING,
                source_id=collection.id,
            )

        if is_final:
            await self._complete(investment)

        self.logger.info(
            "Income collected",
            extra={
                "investment_id": investment.id,
                "user_id": investment.user_id,
                "days": days,
                "amount": str(amount),
                "final": is_final,
            },
        )
        return CollectionResult(
            investment=investment,
            collection=collection,
            amount=amount,
            days=days,
            completed=is_final,
            commissions=commissions,
        )

    async def _complete(self, investment: Investment) -> None:
        """Release locked earnings, return capital and close the investment."""
        if investment.total_earned > 0:
            await self.ledger.release_earnings(
                investment.user_id, investment.total_earned
            )
        if investment.capital_return:
            await self.ledger.increment(
                investment.user_id, investment.amount_invested
            )

        investment.status = InvestmentStatus.COMPLETED.value
        await self.session.flush()

        self.logger.info(
            "Investment completed",
            extra={
                "investment_id": investment.id,
                "user_id": investment.user_id,
                "total_earned": str(investment.total_earned),
                "capital_returned": investment.capital_return,
            },
        )
