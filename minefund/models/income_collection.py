"""
Income collection model.

One row per collection event. Its id is the idempotency key of the
earning commission walk triggered by the collection. Manual rows record
admin-credited earnings; they collect no days and trigger no walk.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from minefund.models.base import Base
from minefund.models.types import MoneyType

if TYPE_CHECKING:
    from minefund.models.investment import Investment


class IncomeCollection(Base):
    """Income collection model - collected investment profit."""

    __tablename__ = "income_collections"
    __table_args__ = (
        CheckConstraint(
            'amount > 0', name='check_income_collection_amount_positive'
        ),
        CheckConstraint(
            'days_collected > 0 OR (is_manual AND days_collected = 0)',
            name='check_income_collection_days'
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    investment_id: Mapped[int] = mapped_column(
        ForeignKey("investments.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    days_collected: Mapped[int] = mapped_column(Integer, nullable=False)
    is_final_collection: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )

    # Admin manual earnings
    is_manual: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    credited_by_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    investment: Mapped["Investment"] = relationship(
        "Investment", back_populates="collections"
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<IncomeCollection(id={self.id}, investment_id={self.investment_id}, "
            f"amount={self.amount}, days={self.days_collected})>"
        )
