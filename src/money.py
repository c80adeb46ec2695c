"""Cent arithmetic shared by the discount and shipping rules."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Union

Number = Union[int, float, Decimal]

# Floor for the working precision; it widens with the operands.
_MIN_PRECISION = 28


def to_decimal(value: Number) -> Decimal:
    # str() keeps 1.1 as 1.1 instead of its binary expansion.
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def _digits(value: Decimal) -> int:
    return max(len(value.as_tuple().digits), value.adjusted() + 1)


def round_cents(value: Number) -> int:
    """Round to a whole number of cents, halves away from zero."""
    value = to_decimal(value)
    with localcontext() as ctx:
        ctx.prec = max(_MIN_PRECISION, _digits(value) + 2)
        return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def scaled_cents(value: Number, factor: Number) -> int:
    """Round ``value * factor`` to cents, multiplying without precision loss."""
    value, factor = to_decimal(value), to_decimal(factor)
    with localcontext() as ctx:
        ctx.prec = max(_MIN_PRECISION, _digits(value) + _digits(factor) + 2)
        return round_cents(value * factor)


def percent_of(amount: int, rate: Decimal) -> int:
    return scaled_cents(amount, rate)
