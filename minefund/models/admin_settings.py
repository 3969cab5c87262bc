"""
Admin settings model.

Single-row table (id = 1) with the runtime-editable business settings:
commission rates, deposit/withdrawal limits and the withdrawal window.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from minefund.config.business_constants import (
    ADMIN_SETTINGS_ID,
    DEFAULT_MAX_INVESTMENT_AMOUNT,
    DEFAULT_MIN_DEPOSIT_AMOUNT,
    DEFAULT_MIN_WITHDRAWAL_AMOUNT,
    DEFAULT_REFERRAL_L1_PERCENT,
    DEFAULT_REFERRAL_L2_PERCENT,
    DEFAULT_REFERRAL_L3_PERCENT,
    DEFAULT_WITHDRAWAL_DAYS,
    DEFAULT_WITHDRAWAL_END_TIME,
    DEFAULT_WITHDRAWAL_FEE_PERCENT,
    DEFAULT_WITHDRAWAL_START_TIME,
    DEFAULT_WITHDRAWAL_TIMEZONE,
)
from minefund.models.base import Base
from minefund.models.types import MoneyType, RatePercentType


class AdminSettings(Base):
    """Admin settings - global business configuration."""

    __tablename__ = "admin_settings"
    __table_args__ = (
        CheckConstraint('id = 1', name='check_admin_settings_single_row'),
        CheckConstraint(
            'referral_l1_percent >= 0 AND referral_l1_percent <= 100',
            name='check_referral_l1_percent_range'
        ),
        CheckConstraint(
            'referral_l2_percent >= 0 AND referral_l2_percent <= 100',
            name='check_referral_l2_percent_range'
        ),
        CheckConstraint(
            'referral_l3_percent >= 0 AND referral_l3_percent <= 100',
            name='check_referral_l3_percent_range'
        ),
        CheckConstraint(
            'withdrawal_fee_percent >= 0 AND withdrawal_fee_percent < 100',
            name='check_withdrawal_fee_percent_range'
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, default=ADMIN_SETTINGS_ID
    )

    # Referral commission rates (percent)
    referral_l1_percent: Mapped[Decimal] = mapped_column(
        RatePercentType, default=DEFAULT_REFERRAL_L1_PERCENT, nullable=False
    )
    referral_l2_percent: Mapped[Decimal] = mapped_column(
        RatePercentType, default=DEFAULT_REFERRAL_L2_PERCENT, nullable=False
    )
    referral_l3_percent: Mapped[Decimal] = mapped_column(
        RatePercentType, default=DEFAULT_REFERRAL_L3_PERCENT, nullable=False
    )

    # Limits
    min_deposit_amount: Mapped[Decimal] = mapped_column(
        MoneyType, default=DEFAULT_MIN_DEPOSIT_AMOUNT, nullable=False
    )
    min_withdrawal_amount: Mapped[Decimal] = mapped_column(
        MoneyType, default=DEFAULT_MIN_WITHDRAWAL_AMOUNT, nullable=False
    )
    withdrawal_fee_percent: Mapped[Decimal] = mapped_column(
        RatePercentType, default=DEFAULT_WITHDRAWAL_FEE_PERCENT, nullable=False
    )
    max_investment_amount: Mapped[Decimal] = mapped_column(
        MoneyType, default=DEFAULT_MAX_INVESTMENT_AMOUNT, nullable=False
    )

    # Withdrawal window
    withdrawal_enabled: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    withdrawal_auto_schedule: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        comment="When false, withdrawals are accepted at any time",
    )
    withdrawal_start_time: Mapped[str] = mapped_column(
        String(5), default=DEFAULT_WITHDRAWAL_START_TIME, nullable=False
    )
    withdrawal_end_time: Mapped[str] = mapped_column(
        String(5), default=DEFAULT_WITHDRAWAL_END_TIME, nullable=False
    )
    withdrawal_days_enabled: Mapped[str] = mapped_column(
        String(100),
        default=DEFAULT_WITHDRAWAL_DAYS,
        nullable=False,
        comment="Comma-separated lowercase weekday names",
    )
    withdrawal_timezone: Mapped[str] = mapped_column(
        String(64), default=DEFAULT_WITHDRAWAL_TIMEZONE, nullable=False
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

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<AdminSettings(l1={self.referral_l1_percent}, "
            f"l2={self.referral_l2_percent}, l3={self.referral_l3_percent})>"
        )
