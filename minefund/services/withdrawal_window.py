"""
Withdrawal window.

Decides whether withdrawals are accepted at a given moment, from the
schedule stored in admin_settings.
"""

from dataclasses import dataclass
from datetime import datetime, time
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from minefund.config.business_constants import (
    DEFAULT_WITHDRAWAL_DAYS,
    DEFAULT_WITHDRAWAL_END_TIME,
    DEFAULT_WITHDRAWAL_START_TIME,
    WEEKDAY_NAMES,
)
from minefund.config.settings import settings as app_settings
from minefund.utils.datetime_utils import ensure_aware

if TYPE_CHECKING:
    from minefund.models.admin_settings import AdminSettings


def parse_hhmm(value: str) -> time:
    """Parse an HH:MM string."""
    hours, minutes = value.strip().split(":")
    return time(int(hours), int(minutes))


def parse_days(value: str) -> frozenset[int]:
    """Parse comma-separated weekday names into weekday numbers (Monday = 0)."""
    names = {part.strip().lower() for part in value.split(",") if part.strip()}
    return frozenset(
        index for index, name in enumerate(WEEKDAY_NAMES) if name in names
    )


@dataclass(frozen=True)
class WithdrawalWindow:
    """Withdrawal schedule snapshot."""

    enabled: bool = True
    auto_schedule: bool = False
    start: time = parse_hhmm(DEFAULT_WITHDRAWAL_START_TIME)
    end: time = parse_hhmm(DEFAULT_WITHDRAWAL_END_TIME)
    days: frozenset[int] = parse_days(DEFAULT_WITHDRAWAL_DAYS)
    timezone: str = app_settings.default_withdrawal_timezone

    @classmethod
    def from_settings(cls, settings: "AdminSettings") -> "WithdrawalWindow":
        """Build the window from the admin settings row."""
        return cls(
            enabled=settings.withdrawal_enabled,
            auto_schedule=settings.withdrawal_auto_schedule,
            start=parse_hhmm(settings.withdrawal_start_time),
            end=parse_hhmm(settings.withdrawal_end_time),
            days=parse_days(settings.withdrawal_days_enabled),
            timezone=settings.withdrawal_timezone
            or app_settings.default_withdrawal_timezone,
        )

    def is_open(self, now: datetime) -> bool:
        """
        Check whether withdrawals are accepted at a moment.

        Disabled means closed. Without auto schedule, always open.
        Otherwise open on enabled days within [start, end) local time.

        Args:
            now: Moment to check (naive values are read as UTC)
        """
        if not self.enabled:
            return False
        if not self.auto_schedule:
            return True

        local = ensure_aware(now).astimezone(ZoneInfo(self.timezone))
        if local.weekday() not in self.days:
            return False
        return self.start <= local.time() < self.end
