"""
BonusTransaction model.

Audit trail of admin bonus credits. The amount is credited to the
spendable balance in the same transaction that writes the row.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from minefund.models.base import Base
from minefund.models.enums import BonusStatus
from minefund.models.types import MoneyType

if TYPE_CHECKING:
    from minefund.models.user import User


class BonusTransaction(Base):
    """BonusTransaction model - admin-granted balance credits."""

    __tablename__ = "bonus_transactions"
    __table_args__ = (
        CheckConstraint(
            'amount > 0', name='check_bonus_transaction_amount_positive'
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Recipient
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    # Granting admin, kept as NULL when unknown
    admin_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=BonusStatus.COMPLETED.value, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    user: Mapped["User"] = relationship("User", foreign_keys=[user_id])

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<BonusTransaction(id={self.id}, user_id={self.user_id}, "
            f"amount={self.amount}, admin_id={self.admin_id})>"
        )
