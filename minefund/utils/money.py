"""
Money helpers.

All monetary results are quantized to the MoneyType scale, rounding down so
that a computed payout never exceeds its exact value.
"""

from decimal import ROUND_DOWN, Decimal

from minefund.config.business_constants import MONEY_QUANTUM


def quantize_money(amount: Decimal) -> Decimal:
    """Round an amount down to 8 decimal places."""
    return amount.quantize(MONEY_QUANTUM, rounding=ROUND_DOWN)


def percent_of(amount: Decimal, percent: Decimal) -> Decimal:
    """
    Calculate percentage of an amount.

    Formula: amount * percent / 100, rounded down to the money scale.

    Example:
        >>> percent_of(Decimal("1000"), Decimal("10"))
        Decimal('100.00000000')
    """
    return quantize_money(amount * percent / Decimal("100"))


def to_decimal(value: Decimal | int | float | str | None) -> Decimal:
    """Convert a numeric value to Decimal via str (None reads as 0)."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))
