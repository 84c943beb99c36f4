"""Shared numeric helpers for the calculation core."""

from __future__ import annotations

import math
from datetime import date

from .exceptions import ValidationError


def round_unit(value: float) -> int:
    """Round to the nearest currency unit, halves rounding up (-2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def require_non_negative(field: str, value: float) -> float:
    """Return value as float, raising ValidationError if negative or not finite."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(field, value, "must be a number") from None
    if not math.isfinite(number):
        raise ValidationError(field, value, "must be finite")
    if number < 0:
        raise ValidationError(field, value, "must be >= 0")
    return number


def total_months(start: date, end: date) -> int:
    """Number of calendar months from start to end, both months included."""
    return (end.year - start.year) * 12 + (end.month - start.month) + 1


def active_months_in_year(start: date, end: date, year: int) -> tuple[int, int]:
    """First and last active month (1-12) of a loan within a calendar year.

    Returns (0, -1) when the loan is not active that year.
    """
    if year < start.year or year > end.year:
        return 0, -1
    first = start.month if year == start.year else 1
    last = end.month if year == end.year else 12
    return first, last
