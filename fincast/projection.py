"""
Forecast projection for FinCast.

Purpose
-------
Walks every day of the target year, applies monthly rules and planned
events in date order and records the cumulative forecast balance of each
day.

Algorithm
---------
    balance_0 = initial_balance
    balance_d = balance_{d-1} + Σ rules firing on d + Σ events dated d

A rule fires on day d when ``rule.active_from <= date(d)`` and the rule's
day of month, clamped to the length of d's month, equals d's day of month.
So a rule on day 31 fires on Feb 28 (29 in leap years), Apr 30, etc.

Rules and events firing on the same day are added in insertion order.
Amounts are Decimal and are never rounded here; rounding is a presentation
concern.

Example
-------
>>> from datetime import date
>>> from decimal import Decimal
>>> from fincast.entities import MonthlyRule
>>> rule = MonthlyRule(Decimal("-50"), 31, date(2025, 1, 1))
>>> points = project(2025, Decimal("1000"), [rule], [])
>>> points[58].forecast_balance   # Feb 28, day 59
Decimal('900')
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Tuple

from .dates import clamp_day_of_month, iter_year_dates
from .entities import ForecastState, MonthlyRule, PlannedEvent

__all__ = [
    "DayPoint",
    "project",
    "project_state",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayPoint:
    """Forecast balance at the end of day ``day`` (1-based)."""
    day: int
    forecast_balance: Decimal


def project(
    year: int,
    initial_balance: Decimal,
    rules: Iterable[MonthlyRule],
    events: Iterable[PlannedEvent],
) -> Tuple[DayPoint, ...]:
    """
    Project the forecast balance for every day of *year*.

    Parameters
    ----------
    year : int
        Calendar year to project.
    initial_balance : Decimal
        Balance before day 1.
    rules : iterable of MonthlyRule
        Recurring monthly adjustments, in insertion order.
    events : iterable of PlannedEvent
        One-off adjustments, in insertion order. Events dated in other
        years never match a day and contribute nothing.

    Returns
    -------
    tuple of DayPoint
        ``days_in_year(year)`` points ordered by day.

    Raises
    ------
    RangeAssumptionViolation
        If *year* or a rule's day of month is outside its valid range.
    """
    # One snapshot for the whole pass
    rules = tuple(rules)
    events = tuple(events)

    events_by_date = {}
    for event in events:
        events_by_date.setdefault(event.date, []).append(event.amount)

    balance = initial_balance
    points = []
    for day, current in iter_year_dates(year):
        for rule in rules:
            if rule.active_from > current:
                continue
            fire_day = clamp_day_of_month(year, current.month, rule.day_of_month)
            if fire_day == current.day:
                balance += rule.amount

        for amount in events_by_date.get(current, ()):
            balance += amount

        points.append(DayPoint(day=day, forecast_balance=balance))

    logger.debug(
        "Projected %d days for %d (%d rules, %d events): %s -> %s",
        len(points), year, len(rules), len(events), initial_balance, balance,
    )
    return tuple(points)


def project_state(state: ForecastState) -> Tuple[DayPoint, ...]:
    """Project the forecast line of a state snapshot."""
    return project(state.year, state.initial_balance, state.rules, state.events)
