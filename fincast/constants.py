"""
Global constants for FinCast.

Purpose
-------
Centralizes default values and magic numbers used throughout the FinCast
codebase, so that the store, the serializer, the CLI and the chart agree on
the same defaults.

Usage
-----
>>> from fincast.constants import DEFAULT_CHART_STRIDE, EXPORT_FILENAME_TEMPLATE
>>> EXPORT_FILENAME_TEMPLATE.format(year=2025)
'finances-2025.json'

Categories
----------
- Calendar: year bounds, day-of-month bounds
- State: default initial balance
- Serialization: file names, JSON indentation
- Presentation: chart stride, labels, colors, figure sizes
"""

from decimal import Decimal
from typing import Tuple

__all__ = [
    # Calendar
    "MIN_YEAR",
    "MAX_YEAR",
    "MIN_DAY_OF_MONTH",
    "MAX_DAY_OF_MONTH",
    # State
    "DEFAULT_INITIAL_BALANCE",
    # Serialization
    "EXPORT_FILENAME_TEMPLATE",
    "STORE_FILENAME",
    "JSON_INDENT",
    # Presentation
    "DEFAULT_CHART_STRIDE",
    "DATE_LABEL_FORMAT",
    "DEFAULT_CURRENCY_SYMBOL",
    "MONEY_QUANTUM",
    "DEFAULT_FIGSIZE",
    "FORECAST_COLOR",
    "REAL_COLOR",
    "TODAY_COLOR",
    "DEFAULT_LINEWIDTH",
]


# =============================================================================
# Calendar
# =============================================================================

MIN_YEAR: int = 1
"""Smallest year representable by datetime.date."""

MAX_YEAR: int = 9999
"""Largest year representable by datetime.date."""

MIN_DAY_OF_MONTH: int = 1
MAX_DAY_OF_MONTH: int = 31


# =============================================================================
# State Defaults
# =============================================================================

DEFAULT_INITIAL_BALANCE: Decimal = Decimal("0")
"""Balance on January 1st when the store holds none."""


# =============================================================================
# Serialization
# =============================================================================

EXPORT_FILENAME_TEMPLATE: str = "finances-{year}.json"
"""Export file name pattern, formatted with the state's year."""

STORE_FILENAME: str = "financial_data.json"
"""File name of the persisted store inside the data directory."""

JSON_INDENT: int = 2


# =============================================================================
# Presentation
# =============================================================================

DEFAULT_CHART_STRIDE: int = 2
"""Keep every other day in the chart feed (the final day is always kept)."""

DATE_LABEL_FORMAT: str = "%d/%m"
"""Day/month label used on the chart x-axis and in the feed."""

DEFAULT_CURRENCY_SYMBOL: str = "€"

MONEY_QUANTUM: Decimal = Decimal("0.01")
"""Rounding step applied at presentation time only."""

DEFAULT_FIGSIZE: Tuple[int, int] = (12, 5)

FORECAST_COLOR: str = "#7C3AED"
REAL_COLOR: str = "#A78BFA"
TODAY_COLOR: str = "#8B5CF6"

DEFAULT_LINEWIDTH: float = 1.5
