"""Currency helpers."""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
UNIT = Decimal("1")


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert a numeric value to Decimal without binary float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_currency(amount: Decimal) -> Decimal:
    """Round to 2 decimal places, half up."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def round_whole(amount: Decimal) -> Decimal:
    """Round to whole currency units, half up."""
    return amount.quantize(UNIT, rounding=ROUND_HALF_UP)


def percent_of(amount: Decimal, percentage: int | Decimal) -> Decimal:
    """Exact share of amount for a percentage (no rounding)."""
    return amount * to_decimal(percentage) / Decimal("100")
