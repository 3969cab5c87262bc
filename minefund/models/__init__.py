"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from minefund.models.admin_settings import AdminSettings
from minefund.models.base import Base
from minefund.models.bonus_transaction import BonusTransaction
from minefund.models.deposit import Deposit
from minefund.models.enums import (
    BonusStatus,
    CommissionStatus,
    CommissionType,
    DepositStatus,
    InvestmentStatus,
    PlanStatus,
    WithdrawalStatus,
)
from minefund.models.income_collection import IncomeCollection
from minefund.models.investment import Investment
from minefund.models.plan import Plan
from minefund.models.referral_commission import ReferralCommission
from minefund.models.user import User
from minefund.models.withdrawal import Withdrawal

__all__ = [
    # Base
    "Base",
    # Enums
    "BonusStatus",
    "CommissionStatus",
    "CommissionType",
    "DepositStatus",
    "InvestmentStatus",
    "PlanStatus",
    "WithdrawalStatus",
    # Core Models
    "User",
    "AdminSettings",
    "Deposit",
    "Plan",
    "Investment",
    "IncomeCollection",
    "ReferralCommission",
    "BonusTransaction",
    "Withdrawal",
]
