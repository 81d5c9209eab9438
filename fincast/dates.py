"""
Calendar utilities for FinCast.

Purpose
-------
Pure date arithmetic used by the projector and the reconciliation engine:
leap years, month lengths, day-of-month clamping and the conversion
between calendar dates and 1-based day indices within a year.

Day indices
-----------
Day 1 is January 1st of the year; day ``days_in_year(year)`` is
December 31st. ``date_to_day_index`` and ``day_index_to_date`` are exact
inverses over that range.

Clamping
--------
A monthly rule set for day 31 fires on the last day of shorter months:

>>> clamp_day_of_month(2025, 2, 31)
28
>>> clamp_day_of_month(2024, 2, 31)
29

Short months are clamped, never skipped.

These functions assume validated inputs and raise RangeAssumptionViolation
instead of returning a corrupted value.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterator, Tuple

from .constants import MAX_DAY_OF_MONTH, MAX_YEAR, MIN_DAY_OF_MONTH, MIN_YEAR
from .exceptions import RangeAssumptionViolation

__all__ = [
    "is_leap_year",
    "days_in_year",
    "days_in_month",
    "clamp_day_of_month",
    "day_index_to_date",
    "date_to_day_index",
    "iter_year_dates",
]

_MONTH_LENGTHS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def _check_year(year: int) -> None:
    if not (MIN_YEAR <= year <= MAX_YEAR):
        raise RangeAssumptionViolation(
            f"year must be in {MIN_YEAR}..{MAX_YEAR}, got {year}"
        )


def _check_month(month: int) -> None:
    if not (1 <= month <= 12):
        raise RangeAssumptionViolation(f"month must be in 1..12, got {month}")


def is_leap_year(year: int) -> bool:
    """Gregorian rule: divisible by 4, not by 100 unless also by 400."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_year(year: int) -> int:
    """Length of the projection for *year* (365 or 366)."""
    _check_year(year)
    return 366 if is_leap_year(year) else 365


def days_in_month(year: int, month: int) -> int:
    """Calendar days in *month* (1..12) of *year*."""
    _check_year(year)
    _check_month(month)
    if month == 2 and is_leap_year(year):
        return 29
    return _MONTH_LENGTHS[month - 1]


def clamp_day_of_month(year: int, month: int, requested_day: int) -> int:
    """Cap *requested_day* to the last valid day of the month."""
    if not (MIN_DAY_OF_MONTH <= requested_day <= MAX_DAY_OF_MONTH):
        raise RangeAssumptionViolation(
            f"day of month must be in {MIN_DAY_OF_MONTH}..{MAX_DAY_OF_MONTH}, "
            f"got {requested_day}"
        )
    return min(requested_day, days_in_month(year, month))


def day_index_to_date(year: int, day_index: int) -> date:
    """
    Convert a 1-based day index within *year* to a calendar date.

    Raises
    ------
    RangeAssumptionViolation
        If *day_index* is outside ``1..days_in_year(year)``.

    Examples
    --------
    >>> day_index_to_date(2025, 1)
    datetime.date(2025, 1, 1)
    >>> day_index_to_date(2024, 366)
    datetime.date(2024, 12, 31)
    """
    n_days = days_in_year(year)
    if not (1 <= day_index <= n_days):
        raise RangeAssumptionViolation(
            f"day index {day_index} out of range for {year} (1..{n_days})"
        )
    return date(year, 1, 1) + timedelta(days=day_index - 1)


def date_to_day_index(year: int, d: date) -> int:
    """
    Whole days between January 1st of *year* and *d*, plus one.

    Dates outside *year* give indices outside ``1..days_in_year(year)``
    (zero or negative before, larger after); callers that need a valid
    index check ``d.year == year`` first.
    """
    _check_year(year)
    return (d - date(year, 1, 1)).days + 1


def iter_year_dates(year: int) -> Iterator[Tuple[int, date]]:
    """Yield ``(day_index, date)`` for every day of *year* in order."""
    n_days = days_in_year(year)
    first = date(year, 1, 1)
    for offset in range(n_days):
        yield offset + 1, first + timedelta(days=offset)
