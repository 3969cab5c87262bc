"""
Commission rate policy.

A frozen snapshot of the three configured commission rates plus the
eligibility table. Built from the settings row once per computation, so a
walk never sees rates change halfway.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from minefund.models.enums import CommissionType
from minefund.services.referral.config import ELIGIBLE_LEVELS, REFERRAL_LEVELS
from minefund.utils.exceptions import RatePolicyUnavailableError
from minefund.utils.money import percent_of, to_decimal

if TYPE_CHECKING:
    from minefund.models.admin_settings import AdminSettings


_MAX_RATE = Decimal("100")


@dataclass(frozen=True)
class CommissionRatePolicy:
    """Per-level commission percentages."""

    level_1_percent: Decimal = Decimal("0")
    level_2_percent: Decimal = Decimal("0")
    level_3_percent: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        for level in REFERRAL_LEVELS:
            rate = self._configured(level)
            if rate < 0 or rate > _MAX_RATE:
                raise RatePolicyUnavailableError(
                    f"Level {level} rate {rate} is outside [0, 100]"
                )

    @classmethod
    def from_settings(
        cls, settings: "AdminSettings | None"
    ) -> "CommissionRatePolicy":
        """
        Build a policy from the admin settings row.

        Missing rate values read as 0 (level skipped).

        Raises:
            RatePolicyUnavailableError: If the row is missing or a rate is
                out of range
        """
        if settings is None:
            raise RatePolicyUnavailableError("Admin settings are not configured")

        return cls(
            level_1_percent=to_decimal(settings.referral_l1_percent),
            level_2_percent=to_decimal(settings.referral_l2_percent),
            level_3_percent=to_decimal(settings.referral_l3_percent),
        )

    def _configured(self, level: int) -> Decimal:
        return {
            1: self.level_1_percent,
            2: self.level_2_percent,
            3: self.level_3_percent,
        }.get(level, Decimal("0"))

    def rate_for(self, level: int, event_type: CommissionType | str) -> Decimal:
        """Rate paid at a level for an event type; 0 when ineligible."""
        levels = ELIGIBLE_LEVELS[CommissionType(event_type)]
        if level not in levels:
            return Decimal("0")
        return self._configured(level)

    def rates_for(
        self, event_type: CommissionType | str
    ) -> tuple[Decimal, Decimal, Decimal]:
        """L1, L2, L3 rates for an event type, ineligible levels masked to 0."""
        return tuple(  # type: ignore[return-value]
            self.rate_for(level, event_type) for level in REFERRAL_LEVELS
        )

    def is_eligible(self, level: int, event_type: CommissionType | str) -> bool:
        """Whether a level is paid for an event type."""
        return self.rate_for(level, event_type) > 0

    def max_payout(
        self, base_amount: Decimal, event_type: CommissionType | str
    ) -> Decimal:
        """Upper bound of the total paid for one event."""
        return percent_of(base_amount, sum(self.rates_for(event_type), Decimal("0")))
