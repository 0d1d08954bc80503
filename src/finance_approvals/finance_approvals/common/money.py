"""Decimal money helpers.

All amounts in the engine are ``Decimal`` values with two places; floats are
converted through ``str`` so binary residue never leaks into a schedule.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union

Number = Union[Decimal, int, float, str]

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(amount: Number) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))


def round_money(amount: Number, *, rounding: str = ROUND_HALF_UP) -> Decimal:
    """Round to two decimal places (HALF_UP by default)."""
    return to_decimal(amount).quantize(TWO_PLACES, rounding=rounding)


def is_whole_cents(amount: Number) -> bool:
    value = to_decimal(amount)
    return value == value.quantize(TWO_PLACES)


def sum_amounts(amounts: Iterable[Number]) -> Decimal:
    total = ZERO
    for amount in amounts:
        total += to_decimal(amount)
    return total
