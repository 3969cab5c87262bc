"""
Repositories.

Data access layer; one repository per model, all built on BaseRepository.
"""

from minefund.repositories.admin_settings_repository import (
    AdminSettingsRepository,
)
from minefund.repositories.base import BaseRepository
from minefund.repositories.bonus_repository import BonusTransactionRepository
from minefund.repositories.commission_repository import CommissionRepository
from minefund.repositories.deposit_repository import DepositRepository
from minefund.repositories.investment_repository import (
    IncomeCollectionRepository,
    InvestmentRepository,
)
from minefund.repositories.plan_repository import PlanRepository
from minefund.repositories.user_repository import UserRepository
from minefund.repositories.withdrawal_repository import WithdrawalRepository

__all__ = [
    "AdminSettingsRepository",
    "BaseRepository",
    "BonusTransactionRepository",
    "CommissionRepository",
    "DepositRepository",
    "IncomeCollectionRepository",
    "InvestmentRepository",
    "PlanRepository",
    "UserRepository",
    "WithdrawalRepository",
]
