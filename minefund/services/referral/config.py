"""
Referral system configuration.

Contains constants and configuration for the referral system.
"""

from minefund.config.business_constants import REFERRAL_DEPTH
from minefund.models.enums import CommissionType

# Levels that earn a commission for each event type.
# Deposits pay only the direct referrer; collected earnings pay the whole chain.
ELIGIBLE_LEVELS: dict[CommissionType, frozenset[int]] = {
    CommissionType.DEPOSIT: frozenset({1}),
    CommissionType.EARNING: frozenset({1, 2, 3}),
}

REFERRAL_LEVELS = tuple(range(1, REFERRAL_DEPTH + 1))

__all__ = ["ELIGIBLE_LEVELS", "REFERRAL_DEPTH", "REFERRAL_LEVELS"]
