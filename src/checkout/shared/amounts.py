"""Helpers for monetary amounts.

Aggregates persist money as floats; discount math runs on ``Decimal`` so that
recorded amounts compare exactly.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    # str() first so that floats keep their printed value (20.1 -> "20.1")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Not an amount: {value!r}") from None


def quantize(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_float(value) -> float:
    return float(quantize(value))
