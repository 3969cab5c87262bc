"""Pydantic models for admin input (plans and settings)."""

import re
from decimal import Decimal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from minefund.config.business_constants import WEEKDAY_NAMES

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class PlanCreate(BaseModel):
    """New investment plan.

    profit_percent is the total profit over the plan's lifetime, paid out
    in equal daily parts.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100, description="Plan name")
    duration_days: int = Field(..., gt=0, description="Plan length in days")
    profit_percent: Decimal = Field(
        ..., gt=0, le=1000, description="Total profit, percent of principal"
    )
    min_investment: Decimal = Field(..., gt=0, description="Minimum principal")
    max_investment: Decimal | None = Field(
        default=None, gt=0, description="Maximum principal, settings cap when empty"
    )
    capital_return: bool = Field(
        default=True, description="Return principal when the plan completes"
    )

    @model_validator(mode="after")
    def validate_bounds(self) -> "PlanCreate":
        """Check max_investment is not below min_investment."""
        if self.max_investment is not None and self.max_investment < self.min_investment:
            raise ValueError("max_investment must be >= min_investment")
        return self


class PlanUpdate(BaseModel):
    """Partial plan update; omitted fields stay unchanged."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=100)
    duration_days: int | None = Field(default=None, gt=0)
    profit_percent: Decimal | None = Field(default=None, gt=0, le=1000)
    min_investment: Decimal | None = Field(default=None, gt=0)
    max_investment: Decimal | None = Field(default=None, gt=0)
    capital_return: bool | None = None


class AdminSettingsUpdate(BaseModel):
    """Partial update of the admin settings row."""

    model_config = ConfigDict(str_strip_whitespace=True)

    referral_l1_percent: Decimal | None = Field(default=None, ge=0, le=100)
    referral_l2_percent: Decimal | None = Field(default=None, ge=0, le=100)
    referral_l3_percent: Decimal | None = Field(default=None, ge=0, le=100)

    min_deposit_amount: Decimal | None = Field(default=None, gt=0)
    min_withdrawal_amount: Decimal | None = Field(default=None, gt=0)
    withdrawal_fee_percent: Decimal | None = Field(default=None, ge=0, lt=100)
    max_investment_amount: Decimal | None = Field(default=None, gt=0)

    withdrawal_enabled: bool | None = None
    withdrawal_auto_schedule: bool | None = None
    withdrawal_start_time: str | None = None
    withdrawal_end_time: str | None = None
    withdrawal_days_enabled: list[str] | None = Field(
        default=None, description="Lowercase weekday names"
    )
    withdrawal_timezone: str | None = None

    @field_validator("withdrawal_start_time", "withdrawal_end_time")
    @classmethod
    def validate_time(cls, v: str | None) -> str | None:
        """Validate HH:MM."""
        if v is not None and not _TIME_PATTERN.match(v):
            raise ValueError(f"Time must be HH:MM, got {v!r}")
        return v

    @field_validator("withdrawal_days_enabled")
    @classmethod
    def validate_days(cls, v: list[str] | None) -> list[str] | None:
        """Validate and normalize weekday names."""
        if v is None:
            return v
        days = [day.strip().lower() for day in v if day.strip()]
        unknown = [day for day in days if day not in WEEKDAY_NAMES]
        if unknown:
            raise ValueError(f"Unknown weekday names: {', '.join(unknown)}")
        # Keep calendar order, drop duplicates
        return [day for day in WEEKDAY_NAMES if day in days]

    @field_validator("withdrawal_timezone")
    @classmethod
    def validate_timezone(cls, v: str | None) -> str | None:
        """Validate IANA timezone name."""
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {v}") from exc
        return v

    @model_validator(mode="after")
    def validate_schedule(self) -> "AdminSettingsUpdate":
        """Reject schedules the withdrawal window could never open."""
        if self.withdrawal_days_enabled is not None and not self.withdrawal_days_enabled:
            raise ValueError("At least one withdrawal day must be enabled")
        # HH:MM is zero-padded, so string order is time order
        if (
            self.withdrawal_start_time is not None
            and self.withdrawal_end_time is not None
            and self.withdrawal_start_time >= self.withdrawal_end_time
        ):
            raise ValueError("withdrawal_start_time must be before withdrawal_end_time")
        return self

    def to_columns(self) -> dict:
        """Column values for the fields that were set."""
        data = self.model_dump(exclude_unset=True, exclude_none=True)
        if "withdrawal_days_enabled" in data:
            data["withdrawal_days_enabled"] = ",".join(data["withdrawal_days_enabled"])
        return data
