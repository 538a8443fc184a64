"""Half-up rounding helpers for money and whole-number nutrients."""

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal

_CENT = Decimal("0.01")
_ONE = Decimal("1")


def to_decimal(value: float | int | Decimal) -> Decimal:
    """Convert a number to Decimal through its shortest string form."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value: float | int | Decimal) -> float:
    """Round a currency amount half-up to cents."""
    return float(to_decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP))


def truncate_money(value: float | int | Decimal) -> float:
    """Drop fractions of a cent, as typed cost inputs do."""
    return float(to_decimal(value).quantize(_CENT, rounding=ROUND_DOWN))


def round_whole(value: float | int | Decimal) -> int:
    """Round half-up to the nearest integer."""
    return int(to_decimal(value).quantize(_ONE, rounding=ROUND_HALF_UP))
