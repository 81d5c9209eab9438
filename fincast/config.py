"""
Configuration management module for FinCast.

Purpose
-------
Pydantic models for the persisted snapshot document and the application
settings:

- Document schema (MonthlyRuleConfig, PlannedEventConfig,
  RealMovementConfig, SnapshotConfig) validates imported JSON before any of
  it reaches the in-memory state. Field aliases follow the camelCase keys
  of the document (``dayOfMonth``, ``activeFrom``, ``initialBalance``...).
- AppSettings reads environment variables (``FINCAST_*``) and ``.env``
  files for the store location, defaults and presentation options.

Design Principles
-----------------
- Type-safe: Pydantic enforces types and validates ranges
- Immutable: Frozen models prevent accidental mutation
- Partial documents: every top-level snapshot field is optional, so an
  import only overrides what it carries

Example
-------
>>> from fincast.config import SnapshotConfig, AppSettings
>>> doc = SnapshotConfig.model_validate({"year": 2025, "initialBalance": 1000})
>>> doc.monthly_rules is None
True
>>> settings = AppSettings()
>>> settings.chart_stride
2
"""

from __future__ import annotations
from typing import Optional, Literal, List
import datetime
from decimal import Decimal
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_CHART_STRIDE,
    DEFAULT_CURRENCY_SYMBOL,
    DEFAULT_INITIAL_BALANCE,
    MAX_DAY_OF_MONTH,
    MAX_YEAR,
    MIN_DAY_OF_MONTH,
    MIN_YEAR,
    STORE_FILENAME,
)

__all__ = [
    "MonthlyRuleConfig",
    "PlannedEventConfig",
    "RealMovementConfig",
    "SnapshotConfig",
    "AppSettings",
]


_DOCUMENT_CONFIG = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


def _blank_if_none(v):
    return "" if v is None else v


# ---------------------------------------------------------------------------
# Entity Configuration
# ---------------------------------------------------------------------------

class MonthlyRuleConfig(BaseModel):
    """
    Document entry for a monthly rule.

    Attributes
    ----------
    title : str
        Optional label (missing or null becomes "").
    amount : Decimal
        Signed amount added each time the rule fires.
    day_of_month : int
        Day in 1..31 (document key ``dayOfMonth``).
    active_from : datetime.date
        First date on which the rule may fire (document key ``activeFrom``).

    Examples
    --------
    >>> MonthlyRuleConfig.model_validate(
    ...     {"title": "Rent", "amount": -750, "dayOfMonth": 1,
    ...      "activeFrom": "2025-01-01"}
    ... )
    """

    model_config = _DOCUMENT_CONFIG

    title: str = Field(default="", description="Optional label")
    amount: Decimal = Field(description="Signed amount")
    day_of_month: int = Field(
        alias="dayOfMonth",
        ge=MIN_DAY_OF_MONTH,
        le=MAX_DAY_OF_MONTH,
        description="Day of month the rule fires on (clamped in short months)"
    )
    active_from: datetime.date = Field(
        alias="activeFrom",
        description="First date on which the rule may fire"
    )

    @field_validator("title", mode="before")
    @classmethod
    def blank_if_none(cls, v):
        """Treat a null title as an empty string."""
        return _blank_if_none(v)


class PlannedEventConfig(BaseModel):
    """Document entry for a planned event."""

    model_config = _DOCUMENT_CONFIG

    title: str = Field(default="", description="Optional label")
    amount: Decimal = Field(description="Signed amount")
    date: datetime.date = Field(description="Day the event lands on")
    description: str = Field(default="", description="Optional free text")

    @field_validator("title", "description", mode="before")
    @classmethod
    def blank_if_none(cls, v):
        """Treat null text fields as empty strings."""
        return _blank_if_none(v)


class RealMovementConfig(BaseModel):
    """Document entry for a recorded real movement."""

    model_config = _DOCUMENT_CONFIG

    title: str = Field(default="", description="Optional label")
    amount: Decimal = Field(description="Signed amount")
    date: datetime.date = Field(description="Day the movement happened")
    note: str = Field(default="", description="Optional free text")

    @field_validator("title", "note", mode="before")
    @classmethod
    def blank_if_none(cls, v):
        """Treat null text fields as empty strings."""
        return _blank_if_none(v)


# ---------------------------------------------------------------------------
# Snapshot Configuration
# ---------------------------------------------------------------------------

class SnapshotConfig(BaseModel):
    """
    Full (or partial) persisted state document.

    Every top-level field is optional. A field that is absent (or null)
    leaves the corresponding in-memory value unchanged on import.

    Attributes
    ----------
    year : int, optional
        Projected year (1..9999).
    initial_balance : Decimal, optional
        Balance on January 1st (document key ``initialBalance``).
    monthly_rules : list of MonthlyRuleConfig, optional
    planned_events : list of PlannedEventConfig, optional
    real_movements : list of RealMovementConfig, optional

    Examples
    --------
    >>> SnapshotConfig.model_validate({"plannedEvents": []}).planned_events
    []
    """

    model_config = _DOCUMENT_CONFIG

    year: Optional[int] = Field(
        default=None,
        ge=MIN_YEAR,
        le=MAX_YEAR,
        description="Projected calendar year"
    )
    initial_balance: Optional[Decimal] = Field(
        default=None,
        alias="initialBalance",
        description="Balance on January 1st"
    )
    monthly_rules: Optional[List[MonthlyRuleConfig]] = Field(
        default=None,
        alias="monthlyRules",
        description="Recurring monthly rules"
    )
    planned_events: Optional[List[PlannedEventConfig]] = Field(
        default=None,
        alias="plannedEvents",
        description="One-off planned events"
    )
    real_movements: Optional[List[RealMovementConfig]] = Field(
        default=None,
        alias="realMovements",
        description="Recorded real movements"
    )


# ---------------------------------------------------------------------------
# Application Settings (Environment Variables)
# ---------------------------------------------------------------------------

class AppSettings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    Supports .env files for local development. Environment variables
    are prefixed with FINCAST_ (e.g., FINCAST_DEFAULT_YEAR=2026).

    Attributes
    ----------
    store_path : Path
        JSON file holding the persisted state.
    default_year : int, optional
        Year used when the store holds none. None means the current year.
    default_initial_balance : Decimal
        Initial balance used when the store holds none.
    chart_stride : int
        Keep one point every ``chart_stride`` days in the chart feed.
    currency_symbol : str
        Symbol appended to formatted amounts.
    log_level : str
        Logging level: "DEBUG", "INFO", "WARNING", "ERROR".

    Examples
    --------
    >>> settings = AppSettings()
    >>> settings.log_level
    'WARNING'

    # With .env file:
    # FINCAST_STORE_PATH=/tmp/fincast.json
    >>> settings = AppSettings(_env_file=".env")
    """

    model_config = SettingsConfigDict(
        env_prefix="FINCAST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    store_path: Path = Field(
        default=Path.home() / ".local" / "share" / "fincast" / STORE_FILENAME,
        description="Persisted state file"
    )
    default_year: Optional[int] = Field(
        default=None,
        ge=MIN_YEAR,
        le=MAX_YEAR,
        description="Year used when the store holds none (None: current year)"
    )
    default_initial_balance: Decimal = Field(
        default=DEFAULT_INITIAL_BALANCE,
        description="Initial balance used when the store holds none"
    )
    chart_stride: int = Field(
        default=DEFAULT_CHART_STRIDE,
        ge=1,
        le=31,
        description="Sampling stride of the chart feed (days)"
    )
    currency_symbol: str = Field(
        default=DEFAULT_CURRENCY_SYMBOL,
        max_length=5,
        description="Currency symbol for formatted amounts"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level"
    )
