"""
Plan model.

Time-boxed investment product: principal is locked for duration_days and
earns profit_percent of it in total, paid out in equal daily parts.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from minefund.models.base import Base
from minefund.models.enums import PlanStatus
from minefund.models.types import MoneyType, RatePercentType

if TYPE_CHECKING:
    from minefund.models.investment import Investment


class Plan(Base):
    """Plan model - investment products managed by admins."""

    __tablename__ = "plans"
    __table_args__ = (
        CheckConstraint(
            'duration_days > 0', name='check_plan_duration_positive'
        ),
        CheckConstraint(
            'profit_percent > 0', name='check_plan_profit_positive'
        ),
        CheckConstraint(
            'min_investment > 0', name='check_plan_min_investment_positive'
        ),
        CheckConstraint(
            'max_investment IS NULL OR max_investment >= min_investment',
            name='check_plan_max_not_below_min'
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    duration_days: Mapped[int] = mapped_column(Integer, nullable=False)
    profit_percent: Mapped[Decimal] = mapped_column(
        RatePercentType, nullable=False
    )  # total over the plan's lifetime
    min_investment: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    max_investment: Mapped[Decimal | None] = mapped_column(
        MoneyType, nullable=True
    )  # falls back to admin_settings.max_investment_amount
    capital_return: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20), default=PlanStatus.ACTIVE.value, nullable=False, index=True
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

    investments: Mapped[list["Investment"]] = relationship(
        "Investment", back_populates="plan"
    )

    @property
    def is_active(self) -> bool:
        """Check if plan can be purchased."""
        return self.status == PlanStatus.ACTIVE.value

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Plan(id={self.id}, name={self.name}, "
            f"duration_days={self.duration_days}, profit_percent={self.profit_percent})>"
        )
