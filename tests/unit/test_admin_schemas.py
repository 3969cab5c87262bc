"""Tests for admin input validation."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from minefund.schemas import AdminSettingsUpdate, PlanCreate, PlanUpdate


class TestAdminSettingsUpdate:

    def test_partial_update_keeps_only_set_fields(self):
        update = AdminSettingsUpdate(referral_l1_percent=Decimal("12.5"))

        assert update.to_columns() == {"referral_l1_percent": Decimal("12.5")}

    @pytest.mark.parametrize("rate", [Decimal("-0.01"), Decimal("100.5")])
    def test_rate_range(self, rate):
        with pytest.raises(ValidationError):
            AdminSettingsUpdate(referral_l2_percent=rate)

    def test_fee_must_be_below_hundred(self):
        with pytest.raises(ValidationError):
            AdminSettingsUpdate(withdrawal_fee_percent=Decimal("100"))

    @pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "noon"])
    def test_invalid_time(self, value):
        with pytest.raises(ValidationError):
            AdminSettingsUpdate(withdrawal_start_time=value)

    def test_days_are_normalized(self):
        update = AdminSettingsUpdate(
            withdrawal_days_enabled=["Friday", "monday", "friday"]
        )

        assert update.to_columns() == {"withdrawal_days_enabled": "monday,friday"}

    def test_unknown_day(self):
        with pytest.raises(ValidationError):
            AdminSettingsUpdate(withdrawal_days_enabled=["funday"])

    @pytest.mark.parametrize("days", [[], ["", " "]])
    def test_days_cannot_be_empty(self, days):
        with pytest.raises(ValidationError):
            AdminSettingsUpdate(withdrawal_days_enabled=days)

    @pytest.mark.parametrize(
        "start,end", [("20:00", "11:00"), ("11:00", "11:00")]
    )
    def test_start_must_precede_end(self, start, end):
        with pytest.raises(ValidationError):
            AdminSettingsUpdate(withdrawal_start_time=start, withdrawal_end_time=end)

    def test_valid_window(self):
        update = AdminSettingsUpdate(
            withdrawal_start_time="09:30", withdrawal_end_time="17:00"
        )

        assert update.to_columns() == {
            "withdrawal_start_time": "09:30",
            "withdrawal_end_time": "17:00",
        }

    def test_unknown_timezone(self):
        with pytest.raises(ValidationError):
            AdminSettingsUpdate(withdrawal_timezone="Mars/Olympus")

    def test_known_timezone(self):
        update = AdminSettingsUpdate(withdrawal_timezone="Europe/Berlin")
        assert update.withdrawal_timezone == "Europe/Berlin"


class TestPlanSchemas:

    def test_valid_plan(self):
        plan = PlanCreate(
            name=" Gold ",
            duration_days=60,
            profit_percent=Decimal("45"),
            min_investment=Decimal("1000"),
        )

        assert plan.name == "Gold"
        assert plan.capital_return is True
        assert plan.max_investment is None

    def test_max_below_min(self):
        with pytest.raises(ValidationError):
            PlanCreate(
                name="Bad",
                duration_days=30,
                profit_percent=Decimal("10"),
                min_investment=Decimal("1000"),
                max_investment=Decimal("500"),
            )

    @pytest.mark.parametrize(
        "field,value",
        [("duration_days", 0), ("profit_percent", Decimal("0"))],
    )
    def test_positive_terms(self, field, value):
        data = {
            "name": "Plan",
            "duration_days": 30,
            "profit_percent": Decimal("10"),
            "min_investment": Decimal("100"),
            field: value,
        }
        with pytest.raises(ValidationError):
            PlanCreate(**data)

    def test_update_dumps_only_set_fields(self):
        update = PlanUpdate(profit_percent=Decimal("20"))

        assert update.model_dump(exclude_unset=True) == {
            "profit_percent": Decimal("20")
        }
