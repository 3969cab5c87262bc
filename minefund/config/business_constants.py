"""
Business logic constants.

Central location for business rules shared by services, jobs and scripts.
Commission percentages and limits are NOT here: they live in the
admin_settings row and are edited at runtime.
"""

from decimal import Decimal

# Referral tree depth paid by the commission engine
REFERRAL_DEPTH = 3

# Money precision (matches MoneyType scale)
MONEY_QUANTUM = Decimal("0.00000001")

# Single admin_settings row
ADMIN_SETTINGS_ID = 1

# Defaults used when seeding the admin_settings row
DEFAULT_REFERRAL_L1_PERCENT = Decimal("10")
DEFAULT_REFERRAL_L2_PERCENT = Decimal("5")
DEFAULT_REFERRAL_L3_PERCENT = Decimal("2")
DEFAULT_MIN_DEPOSIT_AMOUNT = Decimal("500")
DEFAULT_MIN_WITHDRAWAL_AMOUNT = Decimal("500")
DEFAULT_WITHDRAWAL_FEE_PERCENT = Decimal("10")
DEFAULT_MAX_INVESTMENT_AMOUNT = Decimal("50000")

# Withdrawal window defaults
DEFAULT_WITHDRAWAL_START_TIME = "11:00"
DEFAULT_WITHDRAWAL_END_TIME = "20:00"
DEFAULT_WITHDRAWAL_TIMEZONE = "Asia/Karachi"

WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)
DEFAULT_WITHDRAWAL_DAYS = ",".join(WEEKDAY_NAMES[:6])

# Admin credits
DEFAULT_BONUS_REASON = "Admin bonus"
DEFAULT_MANUAL_EARNINGS_REASON = "Manual earnings adjustment"
