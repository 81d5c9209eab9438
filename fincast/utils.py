"""General utilities for FinCast

Contents
--------
- Entry validation helpers (amounts, days of month, ISO dates, years)
- Presentation helpers (rounded, signed currency strings)
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from .constants import (
    DEFAULT_CURRENCY_SYMBOL,
    MAX_DAY_OF_MONTH,
    MAX_YEAR,
    MIN_DAY_OF_MONTH,
    MIN_YEAR,
    MONEY_QUANTUM,
)
from .exceptions import ValidationError

__all__ = [
    # Validation
    "parse_amount",
    "parse_iso_date",
    "check_day_of_month",
    "check_year",
    # Presentation
    "round_money",
    "format_amount",
]

AmountLike = Union[Decimal, int, float, str]
DateLike = Union[date, str]


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def parse_amount(value: AmountLike, *, name: str = "amount") -> Decimal:
    """Convert a user-entered amount to Decimal.

    Floats go through ``str`` so that 0.1 stays 0.1. Missing, blank,
    boolean and non-finite values raise ValidationError.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{name} is required (got {value!r}).")
    if isinstance(value, Decimal):
        amount = value
    else:
        text = str(value).strip()
        if not text:
            raise ValidationError(f"{name} is required (got an empty value).")
        try:
            amount = Decimal(text)
        except InvalidOperation:
            raise ValidationError(f"{name} must be a number, got {value!r}.") from None
    if not amount.is_finite():
        raise ValidationError(f"{name} must be a finite number, got {value!r}.")
    return amount


def parse_iso_date(value: DateLike, *, name: str = "date") -> date:
    """Accept a date or an ISO ``YYYY-MM-DD`` string."""
    if isinstance(value, date):
        return value
    if value is None or not str(value).strip():
        raise ValidationError(f"{name} is required.")
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationError(
            f"{name} must be an ISO date (YYYY-MM-DD), got {value!r}."
        ) from None


def check_day_of_month(value: Union[int, str], *, name: str = "day_of_month") -> int:
    """Raise if *value* is not an integer day in 1..31."""
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{name} is required.")
    try:
        day = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer, got {value!r}.") from None
    if not (MIN_DAY_OF_MONTH <= day <= MAX_DAY_OF_MONTH):
        raise ValidationError(
            f"{name} must be in {MIN_DAY_OF_MONTH}..{MAX_DAY_OF_MONTH}, got {day}."
        )
    return day


def check_year(value: Union[int, str], *, name: str = "year") -> int:
    """Raise if *value* is not a year supported by datetime.date."""
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{name} is required.")
    try:
        year = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer, got {value!r}.") from None
    if not (MIN_YEAR <= year <= MAX_YEAR):
        raise ValidationError(f"{name} must be in {MIN_YEAR}..{MAX_YEAR}, got {year}.")
    return year


# ---------------------------------------------------------------------------
# Presentation helpers
# ---------------------------------------------------------------------------

def round_money(value: Decimal) -> Decimal:
    """Round half-up to cents. Only presentation code calls this."""
    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal, *, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Signed two-decimal amount with currency symbol, e.g. ``+12.50 €``."""
    return f"{round_money(value):+.2f} {symbol}"
