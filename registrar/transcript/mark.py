"""Mark arithmetic shared by every level of the calculation."""

from __future__ import annotations

import decimal
import typing as t

PRECISION: t.Final[decimal.Decimal] = decimal.Decimal("0.01")


def round_mark(value: float | int | decimal.Decimal) -> float:
    """
    Round half away from zero to two decimal places. Values go through their
    shortest repr first, so 2.675 rounds to 2.68 rather than to the 2.67 its
    binary approximation would give.
    """
    d = value if isinstance(value, decimal.Decimal) else decimal.Decimal(repr(float(value)))
    return float(d.quantize(PRECISION, rounding=decimal.ROUND_HALF_UP))


def mean(values: t.Sequence[float]) -> float | None:
    if not values:
        return None
    return sum(values) / len(values)
