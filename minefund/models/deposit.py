"""
Deposit model.

Represents user deposits awaiting or after admin review.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from minefund.models.base import Base
from minefund.models.enums import DepositStatus
from minefund.models.types import MoneyType

if TYPE_CHECKING:
    from minefund.models.user import User


class Deposit(Base):
    """Deposit model - user deposits."""

    __tablename__ = "deposits"
    __table_args__ = (
        CheckConstraint(
            'amount > 0', name='check_deposit_amount_positive'
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # User reference
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Deposit details
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    sender_name: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    sender_account_last4: Mapped[str | None] = mapped_column(
        String(4), nullable=True
    )
    proof_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Review
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DepositStatus.PENDING.value, index=True
    )  # pending, approved, rejected
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    admin_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    processed_by_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
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

    # Relationships
    user: Mapped["User"] = relationship(
        "User", back_populates="deposits", foreign_keys=[user_id]
    )

    @property
    def is_pending(self) -> bool:
        """Check if deposit still awaits review."""
        return self.status == DepositStatus.PENDING.value

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Deposit(id={self.id}, user_id={self.user_id}, "
            f"amount={self.amount}, status={self.status})>"
        )
