"""
Rounding helpers applied at the output boundary.

Internal accumulation always uses full float precision; these helpers
are only called when a figure is placed into a result record.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP
import math

_CENTS = Decimal("0.01")


def _quantize(value: float, rounding: str) -> float:
    if not math.isfinite(value):
        return value
    # str() gives the shortest repr, so 2.675 rounds as written rather than
    # as its binary approximation.
    result = float(Decimal(str(value)).quantize(_CENTS, rounding=rounding))
    return result + 0.0  # normalise -0.0


def round_half_away(value: float) -> float:
    """Round to 2 decimals, halves away from zero (2.675 -> 2.68, -2.675 -> -2.68)."""
    return _quantize(value, ROUND_HALF_UP)


def floor_cents(value: float) -> float:
    """Truncate towards negative infinity at 2 decimals."""
    return _quantize(value, ROUND_FLOOR)
