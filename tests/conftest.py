"""
Pytest configuration and fixtures for FinCast test suite.

This module provides reusable fixtures for testing all FinCast components.
Fixtures follow the principle of "arrange-act-assert" with clear separation.
"""

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from fincast.entities import ForecastState, MonthlyRule, PlannedEvent, RealMovement
from fincast.store import EntityStore


# ---------------------------------------------------------------------------
# Calendar Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def year() -> int:
    """Standard (non-leap) projection year for tests."""
    return 2025


@pytest.fixture
def leap_year() -> int:
    """Leap projection year for tests."""
    return 2024


@pytest.fixture
def initial_balance() -> Decimal:
    """Balance on January 1st."""
    return Decimal("1000")


# ---------------------------------------------------------------------------
# Entity Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def rule_day_31() -> MonthlyRule:
    """
    Expense on day 31 of every month, active all year.

    Fires on the last day of 30-day months and of February.
    """
    return MonthlyRule(
        amount=Decimal("-50"),
        day_of_month=31,
        active_from=date(2025, 1, 1),
        title="Gym",
    )


@pytest.fixture
def salary_rule() -> MonthlyRule:
    """Income on the 1st, active from June 2025."""
    return MonthlyRule(
        amount=Decimal("2100.50"),
        day_of_month=1,
        active_from=date(2025, 6, 1),
        title="Salary",
    )


@pytest.fixture
def insurance_event() -> PlannedEvent:
    """Planned expense on March 1st 2025 (day 60)."""
    return PlannedEvent(
        amount=Decimal("-200"),
        date=date(2025, 3, 1),
        title="Insurance",
        description="Yearly car insurance",
    )


@pytest.fixture
def bonus_movement() -> RealMovement:
    """Real income on January 10th 2025 (day 10)."""
    return RealMovement(
        amount=Decimal("200"),
        date=date(2025, 1, 10),
        title="Bonus",
        note="Unexpected",
    )


@pytest.fixture
def state(
    year, initial_balance, rule_day_31, salary_rule, insurance_event, bonus_movement
) -> ForecastState:
    """State with one item of every kind plus a second rule."""
    return ForecastState(
        year=year,
        initial_balance=initial_balance,
        rules=(rule_day_31, salary_rule),
        events=(insurance_event,),
        movements=(bonus_movement,),
    )


# ---------------------------------------------------------------------------
# Store Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def store_path(tmp_path) -> Path:
    """Path of a not-yet-existing store file."""
    return tmp_path / "data" / "financial_data.json"


@pytest.fixture
def store(store_path) -> EntityStore:
    """Empty store pinned to 2025."""
    return EntityStore(store_path, default_year=2025)
