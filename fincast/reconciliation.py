"""
Forecast / real reconciliation for FinCast.

Purpose
-------
Overlays recorded real movements on the forecast line to produce a
parallel "real" line, and reports how far reality has drifted from the
forecast on the current day.

Algorithm
---------
For each forecast point at day d (date D):

    adjustment_d = Σ movement.amount   for movements with
                                       movement.date <= D and
                                       movement.date.year == year
    real_d       = forecast_d + adjustment_d

A movement dated on day 50 shifts every reconciled point from day 50
onwards and none before. Movements dated in other years are excluded
entirely. The forecast values are passed through untouched.

Key components
--------------
- ReconciledPoint: one day of both lines.
- reconcile(): pure overlay function.
- current_difference(): ``real - forecast`` on today's day index.
- ReconciliationResult: both lines for a year, with a pandas view.

Example
-------
>>> result = reconcile_state(state)
>>> result.final_real - result.final_forecast
Decimal('200')
>>> result.to_frame().tail(1)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .dates import date_to_day_index, days_in_year
from .entities import ForecastState, RealMovement
from .exceptions import RangeAssumptionViolation
from .projection import DayPoint, project_state

__all__ = [
    "ReconciledPoint",
    "ReconciliationResult",
    "reconcile",
    "current_difference",
    "reconcile_state",
]


@dataclass(frozen=True)
class ReconciledPoint:
    """Forecast and real balance of one day."""
    day: int
    forecast: Decimal
    real: Decimal

    @property
    def difference(self) -> Decimal:
        """``real - forecast`` on this day."""
        return self.real - self.forecast


def reconcile(
    day_points: Sequence[DayPoint],
    real_movements: Iterable[RealMovement],
    year: int,
) -> Tuple[ReconciledPoint, ...]:
    """
    Build the real line on top of a forecast line.

    Parameters
    ----------
    day_points : sequence of DayPoint
        Output of ``project`` for *year*.
    real_movements : iterable of RealMovement
        Recorded movements; those outside *year* are ignored.
    year : int
        Year the forecast line belongs to.

    Returns
    -------
    tuple of ReconciledPoint
        Same length and day order as *day_points*.
    """
    n_days = days_in_year(year)

    # adjustment[d] covers every movement dated on or before day d
    adjustment = [Decimal(0)] * (n_days + 1)
    for movement in tuple(real_movements):
        if movement.date.year == year:
            adjustment[date_to_day_index(year, movement.date)] += movement.amount
    for d in range(1, n_days + 1):
        adjustment[d] += adjustment[d - 1]

    points = []
    for point in day_points:
        if not (1 <= point.day <= n_days):
            raise RangeAssumptionViolation(
                f"day {point.day} out of range for {year} (1..{n_days})"
            )
        points.append(
            ReconciledPoint(
                day=point.day,
                forecast=point.forecast_balance,
                real=point.forecast_balance + adjustment[point.day],
            )
        )
    return tuple(points)


def current_difference(
    points: Sequence[ReconciledPoint],
    year: int,
    today: Optional[date] = None,
) -> Optional[Decimal]:
    """
    ``real - forecast`` on today's day, or None when today is not in *year*.

    Parameters
    ----------
    points : sequence of ReconciledPoint
        Full reconciled line for *year* (index ``i`` holds day ``i + 1``).
    year : int
        Projected year.
    today : datetime.date, optional
        Reference day. Defaults to ``date.today()``.
    """
    today = date.today() if today is None else today
    if today.year != year:
        return None
    point = points[date_to_day_index(year, today) - 1]
    return point.real - point.forecast


# ---------------------------------------------------------------------------
# Result container
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ReconciliationResult:
    """
    Forecast and real lines of one year.

    Attributes
    ----------
    year : int
    points : tuple of ReconciledPoint
        One point per calendar day, ordered by day.
    """
    year: int
    points: Tuple[ReconciledPoint, ...]

    def __len__(self) -> int:
        return len(self.points)

    @property
    def final_forecast(self) -> Decimal:
        """Forecast balance on December 31st."""
        return self.points[-1].forecast

    @property
    def final_real(self) -> Decimal:
        """Real balance on December 31st."""
        return self.points[-1].real

    def difference_at(self, day: int) -> Decimal:
        """``real - forecast`` on 1-based *day*."""
        if not (1 <= day <= len(self.points)):
            raise RangeAssumptionViolation(
                f"day {day} out of range for {self.year} (1..{len(self.points)})"
            )
        return self.points[day - 1].difference

    def current_difference(self, today: Optional[date] = None) -> Optional[Decimal]:
        """See :func:`current_difference`."""
        return current_difference(self.points, self.year, today)

    def to_frame(self) -> pd.DataFrame:
        """
        Float view for plotting and reporting.

        Returns
        -------
        pd.DataFrame
            Indexed by a daily DatetimeIndex over the year, with columns
            ``day``, ``forecast``, ``real`` and ``difference``.
        """
        idx = pd.date_range(start=pd.Timestamp(self.year, 1, 1), periods=len(self.points), freq="D")
        forecast = np.array([float(p.forecast) for p in self.points], dtype=float)
        real = np.array([float(p.real) for p in self.points], dtype=float)
        return pd.DataFrame(
            {
                "day": np.array([p.day for p in self.points], dtype=int),
                "forecast": forecast,
                "real": real,
                "difference": real - forecast,
            },
            index=idx,
        )


def reconcile_state(state: ForecastState) -> ReconciliationResult:
    """Project and reconcile a state snapshot in one go."""
    points = reconcile(project_state(state), state.movements, state.year)
    return ReconciliationResult(year=state.year, points=points)
