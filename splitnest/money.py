"""Exact-cent money arithmetic shared by the split, payment and netting code."""

import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

MINOR_UNITS = 100
CENT = Decimal("0.01")

# Added to the scaled value before half-up rounding so 1.005 rounds to 1.01.
ROUNDING_EPSILON = 1e-7


def _decimal_to_minor_units(value: Decimal | str) -> int:
    try:
        amount = Decimal(value)
        if not amount.is_finite():
            raise ValueError("Amount must be finite")
        return int(amount.quantize(CENT, rounding=ROUND_HALF_UP) * MINOR_UNITS)
    except InvalidOperation:
        raise ValueError("Amount must be a number") from None


def to_minor_units(value: int | float | Decimal | str) -> int:
    """Convert a decimal currency amount to an integer count of cents.

    Rounds half away from zero. Decimal and string input is converted
    exactly; floats go through the epsilon path. Raises ValueError for
    non-numeric or non-finite input.
    """
    if isinstance(value, bool):
        raise ValueError("Amount must be a number")
    if isinstance(value, (Decimal, str)):
        return _decimal_to_minor_units(value)
    amount = float(value)
    if math.isnan(amount) or math.isinf(amount):
        raise ValueError("Amount must be finite")

    cents = int(abs(amount) * MINOR_UNITS + 0.5 + ROUNDING_EPSILON)
    return -cents if amount < 0 else cents


def from_minor_units(cents: int) -> float:
    return cents / MINOR_UNITS


def round2(value: int | float | Decimal | str) -> float:
    """Round to the nearest cent (half up)."""
    return from_minor_units(to_minor_units(value))


def coerce_minor_units(value) -> int:
    """Like to_minor_units for values already stored in cents, but never raises.

    Missing or unparseable values count as 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    try:
        return int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return 0


def sum_minor_units(items: list[dict], key: str = "amount") -> int:
    return sum(coerce_minor_units(item.get(key)) for item in items)
