"""
Parse-or-zero helpers for numeric inputs.

The rules engine never raises on bad numbers. Every numeric boundary
goes through one of these helpers instead:

    parse_decimal("37")         -> Decimal("37")
    parse_decimal(float("nan")) -> Decimal("0")
    parse_decimal(None)         -> Decimal("0")
    non_negative_int(-3.7)      -> 0
    non_negative_int(7.9)       -> 7

Results are Decimals; fractional awards (0.2) add up exactly.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, Overflow, ROUND_FLOOR, localcontext
from fractions import Fraction
from typing import Any

ZERO = Decimal(0)

# Largest accepted power of ten; bigger magnitudes parse as zero
MAX_EXPONENT = 100


def parse_decimal(value: Any) -> Decimal:
    """
    Convert a value to a finite Decimal, defaulting to zero.

    Accepts ints, floats, Decimals, Fractions and numeric strings.
    Booleans, None, non-numeric strings, NaN, infinities and values
    of 1e101 or more in magnitude all become zero.
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        # repr keeps the shortest round-tripping form (0.2 -> "0.2")
        result = Decimal(repr(value))
    elif isinstance(value, Fraction):
        with localcontext() as ctx:
            ctx.traps[Overflow] = False
            result = Decimal(value.numerator) / Decimal(value.denominator)
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            return ZERO
    else:
        return ZERO

    if not result.is_finite() or result.adjusted() > MAX_EXPONENT:
        return ZERO
    return result


def non_negative_decimal(value: Any) -> Decimal:
    """Parse a value and clamp negatives to zero."""
    return max(ZERO, parse_decimal(value))


def floor_int(value: Any) -> int:
    """Floor a value to an int (never rounds)."""
    return int(parse_decimal(value).to_integral_value(rounding=ROUND_FLOOR))


def non_negative_int(value: Any) -> int:
    """Parse, clamp to zero and floor."""
    return floor_int(non_negative_decimal(value))


__all__ = [
    "ZERO",
    "MAX_EXPONENT",
    "parse_decimal",
    "non_negative_decimal",
    "floor_int",
    "non_negative_int",
]
