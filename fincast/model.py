"""
ForecastModel: one-stop facade over a ForecastState.

Purpose
-------
Binds a state snapshot to the projector, the reconciliation engine and the
presentation layer, so callers (CLI, notebooks) need a single object:

>>> from fincast import EntityStore, ForecastModel
>>> model = ForecastModel(EntityStore(path).state)
>>> model.reconcile().final_real
>>> model.current_difference()
>>> model.feed()[-1].label
'31/12'
>>> model.plot("lines", save_path="forecast.png")

The state is immutable; every call re-derives its result from it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from .constants import DEFAULT_CHART_STRIDE
from .entities import ForecastState
from .plotting import FeedPoint, ForecastPlottingMixin, chart_feed
from .projection import DayPoint, project_state
from .reconciliation import ReconciliationResult, reconcile_state

__all__ = ["ForecastModel", "ForecastSummary"]


@dataclass(frozen=True)
class ForecastSummary:
    """Headline numbers of a reconciled year."""
    year: int
    initial_balance: Decimal
    final_forecast: Decimal
    final_real: Decimal
    min_forecast: Decimal
    min_forecast_day: int
    current_difference: Optional[Decimal]


class ForecastModel(ForecastPlottingMixin):
    """
    Projection, reconciliation and presentation of one state snapshot.

    Parameters
    ----------
    state : ForecastState
        Explicit context object with year, initial balance and the three
        input collections.
    """

    def __init__(self, state: ForecastState) -> None:
        self.state = state

    def __repr__(self) -> str:
        s = self.state
        return (
            f"ForecastModel(year={s.year}, rules={len(s.rules)}, "
            f"events={len(s.events)}, movements={len(s.movements)})"
        )

    def project(self) -> Tuple[DayPoint, ...]:
        """Forecast line (see fincast.projection.project)."""
        return project_state(self.state)

    def reconcile(self) -> ReconciliationResult:
        """Forecast and real lines (see fincast.reconciliation.reconcile)."""
        return reconcile_state(self.state)

    def current_difference(self, today: Optional[date] = None) -> Optional[Decimal]:
        """``real - forecast`` today, or None when today is outside the year."""
        return self.reconcile().current_difference(today)

    def feed(self, stride: int = DEFAULT_CHART_STRIDE) -> List[FeedPoint]:
        """Sampled presentation feed (see fincast.plotting.chart_feed)."""
        return chart_feed(self.reconcile().points, self.state.year, stride=stride)

    def summary(self, today: Optional[date] = None) -> ForecastSummary:
        """Headline numbers for reports."""
        result = self.reconcile()
        lowest = min(result.points, key=lambda p: p.forecast)
        return ForecastSummary(
            year=self.state.year,
            initial_balance=self.state.initial_balance,
            final_forecast=result.final_forecast,
            final_real=result.final_real,
            min_forecast=lowest.forecast,
            min_forecast_day=lowest.day,
            current_difference=result.current_difference(today),
        )
