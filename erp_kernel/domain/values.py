"""
Values -- Decimal helpers shared by every engine.

Responsibility:
    Conversion into Decimal, rounding to the currency minor unit, and
    division-guarded ratio helpers.  All monetary arithmetic in the engine
    goes through Decimal; floats are rejected at the boundary.

Invariants enforced:
    - Decimal-only: ``to_decimal`` refuses float so binary rounding error
      can never enter a tax or variance computation.
    - Division guard: ``safe_ratio`` and ``percentage`` return zero for a
      zero denominator instead of raising, since report contexts must
      always render a number.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Currency minor unit (paise / cents)
MONEY_PLACES = Decimal("0.01")
PERCENT_PLACES = Decimal("0.01")


def to_decimal(value: Decimal | int | str) -> Decimal:
    """
    Convert a value to Decimal.

    Raises:
        TypeError: If ``value`` is a float.
        ValueError: If ``value`` is not a valid number.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        raise TypeError(f"float is not allowed for monetary values: {value!r}")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid decimal value: {value!r}") from e


def quantize_money(value: Decimal) -> Decimal:
    """Round to the currency minor unit (ROUND_HALF_UP)."""
    return value.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def round_percent(value: Decimal) -> Decimal:
    """Round a percentage to two places (ROUND_HALF_UP)."""
    return value.quantize(PERCENT_PLACES, rounding=ROUND_HALF_UP)


def safe_ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    """numerator / denominator, or zero when the denominator is zero."""
    if denominator == ZERO:
        return ZERO
    return numerator / denominator


def percentage(numerator: Decimal, denominator: Decimal) -> Decimal:
    """numerator / denominator * 100, or zero when the denominator is zero."""
    return safe_ratio(numerator, denominator) * HUNDRED


def of_percent(base: Decimal, rate_percent: Decimal) -> Decimal:
    """Apply a percentage rate (e.g. 15 for 15%) to ``base``."""
    return base * rate_percent / HUNDRED


def clamp(value: Decimal, lower: Decimal, upper: Decimal) -> Decimal:
    return max(lower, min(upper, value))


def sum_amounts(amounts: Iterable[Decimal]) -> Decimal:
    """Sum Decimals, starting from an exact zero."""
    total = ZERO
    for amount in amounts:
        total += amount
    return total
