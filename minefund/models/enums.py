"""
Status and type enums shared by models and services.

Values are stored as plain strings.
"""

from enum import StrEnum


class CommissionType(StrEnum):
    """Event that triggered a referral commission."""

    DEPOSIT = "deposit"
    EARNING = "earning"


class CommissionStatus(StrEnum):
    """Referral commission status."""

    COMPLETED = "completed"


class DepositStatus(StrEnum):
    """Deposit review status."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class WithdrawalStatus(StrEnum):
    """Withdrawal review status."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PlanStatus(StrEnum):
    """Investment plan availability."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class InvestmentStatus(StrEnum):
    """Investment lifecycle status."""

    ACTIVE = "active"
    COMPLETED = "completed"


class BonusStatus(StrEnum):
    """Admin bonus credit status."""

    COMPLETED = "completed"
