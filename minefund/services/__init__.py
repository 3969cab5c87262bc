"""
Services.

Business logic layer. Services own the transaction of each operation;
the ledger and the commission engine run inside it.
"""

from minefund.services.bonus_service import BonusService
from minefund.services.deposit_service import DepositService
from minefund.services.investment_service import InvestmentService
from minefund.services.plan_service import PlanService
from minefund.services.settings_service import SettingsService
from minefund.services.user_service import UserService
from minefund.services.withdrawal_service import WithdrawalService

__all__ = [
    "BonusService",
    "DepositService",
    "InvestmentService",
    "PlanService",
    "SettingsService",
    "UserService",
    "WithdrawalService",
]
