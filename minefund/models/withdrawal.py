"""
Withdrawal model.

The gross amount leaves the spendable balance when the request is made;
the fee is kept and net_amount is paid out on approval.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from minefund.models.base import Base
from minefund.models.enums import WithdrawalStatus
from minefund.models.types import MoneyType, RatePercentType

if TYPE_CHECKING:
    from minefund.models.user import User


class Withdrawal(Base):
    """Withdrawal model - payout requests."""

    __tablename__ = "withdrawals"
    __table_args__ = (
        CheckConstraint(
            'amount > 0', name='check_withdrawal_amount_positive'
        ),
        CheckConstraint(
            'fee_amount >= 0', name='check_withdrawal_fee_non_negative'
        ),
        CheckConstraint(
            'net_amount = amount - fee_amount',
            name='check_withdrawal_net_amount'
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    fee_percent: Mapped[Decimal] = mapped_column(RatePercentType, nullable=False)
    fee_amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    net_amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        default=WithdrawalStatus.PENDING.value,
        nullable=False,
        index=True
    )  # pending, approved, rejected
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    admin_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
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

    user: Mapped["User"] = relationship("User", back_populates="withdrawals")

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Withdrawal(id={self.id}, user_id={self.user_id}, "
            f"amount={self.amount}, status={self.status})>"
        )
