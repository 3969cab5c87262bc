"""
Referral commission model.

Immutable record of one commission paid to one referrer for one
triggering event at one level. Only status may change after creation.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from minefund.models.base import Base
from minefund.models.enums import CommissionStatus
from minefund.models.types import MoneyType, RatePercentType

if TYPE_CHECKING:
    from minefund.models.user import User


class ReferralCommission(Base):
    """Referral commission model - multi-level referral payouts."""

    __tablename__ = "referral_commissions"
    __table_args__ = (
        # At most one payout per (event, level)
        UniqueConstraint(
            'commission_type', 'source_id', 'level',
            name='uq_referral_commission_event_level'
        ),
        CheckConstraint(
            'level >= 1 AND level <= 3',
            name='check_referral_commission_level_range'
        ),
        CheckConstraint(
            'commission_amount > 0',
            name='check_referral_commission_amount_positive'
        ),
        CheckConstraint(
            "commission_type IN ('deposit', 'earning')",
            name='check_referral_commission_type'
        ),
        Index('idx_referral_commission_referrer_created', 'referrer_id', 'created_at'),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Who triggered the event
    referred_user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    # Who got paid
    referrer_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    level: Mapped[int] = mapped_column(Integer, nullable=False)  # 1-3
    commission_type: Mapped[str] = mapped_column(String(20), nullable=False)
    # deposit id or income collection id, depending on commission_type
    source_id: Mapped[int] = mapped_column(Integer, nullable=False)

    base_amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    commission_percent: Mapped[Decimal] = mapped_column(
        RatePercentType, nullable=False
    )
    commission_amount: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20), default=CommissionStatus.COMPLETED.value, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    # Relationships
    referrer: Mapped["User"] = relationship(
        "User",
        foreign_keys=[referrer_id],
    )
    referred_user: Mapped["User"] = relationship(
        "User",
        foreign_keys=[referred_user_id],
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ReferralCommission(id={self.id}, referrer_id={self.referrer_id}, "
            f"referred_user_id={self.referred_user_id}, level={self.level}, "
            f"type={self.commission_type}, amount={self.commission_amount})>"
        )
