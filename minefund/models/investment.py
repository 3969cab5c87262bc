"""
Investment model.

A purchased plan. Daily profit is collected by the investor, locked in
earned_balance and released to the spendable balance on completion.
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from minefund.models.base import Base
from minefund.models.enums import InvestmentStatus
from minefund.models.types import MoneyType

if TYPE_CHECKING:
    from minefund.models.income_collection import IncomeCollection
    from minefund.models.plan import Plan
    from minefund.models.user import User


class Investment(Base):
    """Investment model - active and completed plan purchases."""

    __tablename__ = "investments"
    __table_args__ = (
        CheckConstraint(
            'amount_invested > 0', name='check_investment_amount_positive'
        ),
        CheckConstraint(
            'total_days_collected >= 0',
            name='check_investment_days_collected_non_negative'
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    plan_id: Mapped[int] = mapped_column(
        ForeignKey("plans.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    amount_invested: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    daily_profit_amount: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False
    )
    # Snapshot of plan terms at purchase time
    duration_days: Mapped[int] = mapped_column(Integer, nullable=False)
    capital_return: Mapped[bool] = mapped_column(nullable=False, default=True)

    status: Mapped[str] = mapped_column(
        String(20),
        default=InvestmentStatus.ACTIVE.value,
        nullable=False,
        index=True
    )
    start_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    end_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    last_income_collection_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    total_days_collected: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    total_earned: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="investments")
    plan: Mapped["Plan"] = relationship("Plan", back_populates="investments")
    collections: Mapped[list["IncomeCollection"]] = relationship(
        "IncomeCollection",
        back_populates="investment",
        cascade="all, delete-orphan",
    )

    @property
    def is_active(self) -> bool:
        """Check if investment still pays."""
        return self.status == InvestmentStatus.ACTIVE.value

    @property
    def remaining_days(self) -> int:
        """Days not yet collected."""
        return max(self.duration_days - self.total_days_collected, 0)

    def available_days(self, now: datetime) -> int:
        """
        Calculate collectable days at a point in time.

        Days are counted from the last collection; an investment that was
        never collected counts from the day before its start date.

        Args:
            now: Current time (timezone-aware)

        Returns:
            Number of days that can be collected now
        """
        last = self.last_income_collection_date or (
            self.start_date - timedelta(days=1)
        )
        days_since_last = (now - last) // timedelta(days=1)
        return max(min(days_since_last, self.remaining_days), 0)

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Investment(id={self.id}, user_id={self.user_id}, "
            f"plan_id={self.plan_id}, amount={self.amount_invested}, "
            f"status={self.status})>"
        )
