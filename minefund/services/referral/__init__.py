"""
Referral services package.

Contains modular services for referral processing:
- config: Depth and eligibility table
- rate_policy: Per-level commission rates snapshot
- chain_manager: Referral chain walk and referrer linking
- commission_engine: Applies commissions for deposits and earnings
- query_manager: Commission history and totals
"""

from minefund.services.referral.chain_manager import ReferralChainManager
from minefund.services.referral.commission_engine import (
    CommissionEngine,
    CommissionResult,
)
from minefund.services.referral.config import ELIGIBLE_LEVELS, REFERRAL_DEPTH
from minefund.services.referral.query_manager import ReferralQueryManager
from minefund.services.referral.rate_policy import CommissionRatePolicy


__all__ = [
    # Configuration
    "ELIGIBLE_LEVELS",
    "REFERRAL_DEPTH",
    # Managers
    "ReferralChainManager",
    "ReferralQueryManager",
    # Commission processing
    "CommissionEngine",
    "CommissionRatePolicy",
    "CommissionResult",
]
