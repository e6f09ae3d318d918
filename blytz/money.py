"""Currency helpers.

Prices travel as JSON numbers in major units. Everything the client adds up
goes through ``Decimal`` so totals never pick up binary float error, and the
payment endpoints receive integer minor units.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[Decimal, float, int, str]

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value: Number | None) -> Decimal:
    """Convert a JSON number to ``Decimal`` through its string form."""

    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError("Boolean is not a monetary amount")
    return Decimal(str(value))


def quantize(amount: Number) -> Decimal:
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def to_minor_units(amount: Number) -> int:
    """149.99 -> 14999"""

    return int((to_decimal(amount) * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def from_minor_units(cents: int) -> Decimal:
    return quantize(Decimal(int(cents)) / 100)
