"""
User model.

Represents a platform account: spendable balance, locked investment
earnings and the single referrer pointer that forms the referral tree.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from minefund.models.base import Base
from minefund.models.types import MoneyType

if TYPE_CHECKING:
    from minefund.models.deposit import Deposit
    from minefund.models.investment import Investment
    from minefund.models.withdrawal import Withdrawal


class User(Base):
    """User model - platform accounts."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            'balance >= 0', name='check_user_balance_non_negative'
        ),
        CheckConstraint(
            'earned_balance >= 0',
            name='check_user_earned_balance_non_negative'
        ),
        CheckConstraint(
            'referred_by_id IS NULL OR referred_by_id <> id',
            name='check_user_not_self_referred'
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Profile
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    full_name: Mapped[str] = mapped_column(
        String(255), nullable=False
    )
    referral_code: Mapped[str] = mapped_column(
        String(20), nullable=False, unique=True, index=True
    )

    # Balances (mutated only by BalanceLedger)
    balance: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    earned_balance: Mapped[Decimal] = mapped_column(
        MoneyType,
        default=Decimal("0"),
        nullable=False,
        comment="Investment earnings locked until the investment completes",
    )

    # Referral
    referred_by_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Status flags
    is_admin: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
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
    referred_by: Mapped[Optional["User"]] = relationship(
        "User",
        remote_side=[id],
        back_populates="referrals",
        foreign_keys=[referred_by_id],
    )
    referrals: Mapped[list["User"]] = relationship(
        "User",
        back_populates="referred_by",
        foreign_keys=[referred_by_id]
    )

    deposits: Mapped[list["Deposit"]] = relationship(
        "Deposit",
        back_populates="user",
        cascade="all, delete-orphan",
        foreign_keys="Deposit.user_id",
    )
    investments: Mapped[list["Investment"]] = relationship(
        "Investment",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    withdrawals: Mapped[list["Withdrawal"]] = relationship(
        "Withdrawal",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def total_balance(self) -> Decimal:
        """Spendable plus locked balance."""
        return self.balance + self.earned_balance

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<User(id={self.id}, email={self.email}, "
            f"referred_by_id={self.referred_by_id})>"
        )
