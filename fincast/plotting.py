"""
Presentation feed and plotting for FinCast.

Purpose
-------
Turns a reconciled year into what a chart needs:

- chart_feed(): a read-only, sampled sequence of ``{day, label, forecast,
  real}`` points. One point every ``stride`` days plus the final day, so the
  rendering cost is bounded while the year-end balance stays exact.
- plot_forecast(): matplotlib chart with the forecast and real lines and a
  marker on today's day.
- ForecastPlottingMixin: adds ``plot()`` to ForecastModel.

Amounts are rounded to cents here and nowhere earlier.

Design Pattern: Mixin
--------------------
ForecastPlottingMixin is inherited by ForecastModel and expects:
- self.state: ForecastState
- self.reconcile(): ReconciliationResult
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, List, Optional, Sequence

import numpy as np

from .constants import (
    DATE_LABEL_FORMAT,
    DEFAULT_CHART_STRIDE,
    DEFAULT_FIGSIZE,
    DEFAULT_LINEWIDTH,
    FORECAST_COLOR,
    REAL_COLOR,
    TODAY_COLOR,
)
from .dates import date_to_day_index, day_index_to_date
from .exceptions import ValidationError
from .types import FeedPointDict
from .utils import round_money

if TYPE_CHECKING:
    from .reconciliation import ReconciledPoint, ReconciliationResult

__all__ = [
    "FeedPoint",
    "chart_feed",
    "plot_forecast",
    "ForecastPlottingMixin",
]


# ---------------------------------------------------------------------------
# Presentation feed
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FeedPoint:
    """One sampled chart point. Amounts rounded to cents."""
    day: int
    label: str
    forecast: float
    real: float

    def to_dict(self) -> FeedPointDict:
        return {
            "day": self.day,
            "label": self.label,
            "forecast": self.forecast,
            "real": self.real,
        }


def chart_feed(
    points: Sequence[ReconciledPoint],
    year: int,
    stride: int = DEFAULT_CHART_STRIDE,
) -> List[FeedPoint]:
    """
    Sample a reconciled line for rendering.

    Parameters
    ----------
    points : sequence of ReconciledPoint
        Full reconciled line for *year*.
    year : int
        Year of the line (used for the ``dd/mm`` labels).
    stride : int, default 2
        Keep position ``i`` when ``i % stride == 0``. The last point is
        always kept.

    Returns
    -------
    list of FeedPoint

    Raises
    ------
    ValidationError
        If *stride* is smaller than 1.

    Examples
    --------
    >>> feed = chart_feed(result.points, 2025)
    >>> len(feed)       # days 1, 3, ..., 365
    183
    >>> feed[-1].label
    '31/12'
    """
    if stride < 1:
        raise ValidationError(f"stride must be >= 1, got {stride}")

    last = len(points) - 1
    feed = []
    for i, point in enumerate(points):
        if i % stride != 0 and i != last:
            continue
        feed.append(
            FeedPoint(
                day=point.day,
                label=day_index_to_date(year, point.day).strftime(DATE_LABEL_FORMAT),
                forecast=float(round_money(point.forecast)),
                real=float(round_money(point.real)),
            )
        )
    return feed


# ---------------------------------------------------------------------------
# Chart
# ---------------------------------------------------------------------------

def plot_forecast(
    result: ReconciliationResult,
    *,
    today: Optional[date] = None,
    stride: int = DEFAULT_CHART_STRIDE,
    figsize: Optional[tuple] = None,
    title: Optional[str] = None,
    currency_symbol: str = "",
    save_path: Optional[str] = None,
    return_fig_ax: bool = False,
):
    """
    Draw the forecast and real lines of a year.

    Parameters
    ----------
    result : ReconciliationResult
        Reconciled year to draw.
    today : date, optional
        Day to mark with a vertical line. Defaults to ``date.today()``;
        nothing is marked when it falls outside the year.
    stride : int, default 2
        Sampling stride passed to chart_feed.
    figsize : tuple, optional
        Matplotlib figure size. Defaults to DEFAULT_FIGSIZE.
    title : str, optional
        Figure title. Defaults to ``"Financial forecast <year>"``.
    currency_symbol : str
        Appended to the y-axis label when given.
    save_path : str, optional
        Save the figure there (PNG, 150 dpi) when given.
    return_fig_ax : bool, default False
        Return ``(fig, ax)`` instead of None.
    """
    import matplotlib.pyplot as plt

    feed = chart_feed(result.points, result.year, stride=stride)
    days = np.array([p.day for p in feed], dtype=int)
    forecast = np.array([p.forecast for p in feed], dtype=float)
    real = np.array([p.real for p in feed], dtype=float)

    fig, ax = plt.subplots(figsize=figsize or DEFAULT_FIGSIZE)
    ax.plot(days, forecast, color=FORECAST_COLOR, linewidth=DEFAULT_LINEWIDTH, label="Forecast")
    ax.plot(days, real, color=REAL_COLOR, linewidth=DEFAULT_LINEWIDTH, label="Real")

    today = date.today() if today is None else today
    if today.year == result.year:
        ax.axvline(
            date_to_day_index(result.year, today),
            color=TODAY_COLOR,
            linewidth=2,
            label="Today",
        )

    # Month starts as x ticks, labelled dd/mm like the feed
    month_starts = [date_to_day_index(result.year, date(result.year, m, 1)) for m in range(1, 13)]
    ax.set_xticks(month_starts)
    ax.set_xticklabels(
        [day_index_to_date(result.year, d).strftime(DATE_LABEL_FORMAT) for d in month_starts],
        rotation=45,
    )
    ax.set_xlim(1, len(result.points))

    ylabel = f"Balance ({currency_symbol})" if currency_symbol else "Balance"
    ax.set_ylabel(ylabel)
    ax.grid(True, linestyle="--", alpha=0.3)
    ax.legend(loc="best")
    ax.set_title(title or f"Financial forecast {result.year}", fontsize=14, fontweight="bold")
    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, bbox_inches="tight", dpi=150)

    if return_fig_ax:
        return fig, ax
    return None


class ForecastPlottingMixin:
    """
    Mixin providing the plotting interface of ForecastModel.

        model.plot("lines", today=date(2025, 6, 1), save_path="chart.png")

    Available Modes
    ---------------
    - "lines": forecast and real balance lines with a today marker
    - "difference": real minus forecast over the year

    Note
    ----
    This class should only be used as a mixin with ForecastModel.
    """

    def plot(
        self,
        mode: str = "lines",
        *,
        today: Optional[date] = None,
        stride: int = DEFAULT_CHART_STRIDE,
        figsize: Optional[tuple] = None,
        title: Optional[str] = None,
        save_path: Optional[str] = None,
        return_fig_ax: bool = False,
    ):
        """
        Unified plotting interface.

        Parameters
        ----------
        mode : {"lines", "difference"}
            Visualization type.
        today, stride, figsize, title, save_path, return_fig_ax
            See plot_forecast.

        Raises
        ------
        ValueError
            If *mode* is not one of the available modes.
        """
        result = self.reconcile()
        if mode == "lines":
            return plot_forecast(
                result,
                today=today,
                stride=stride,
                figsize=figsize,
                title=title,
                save_path=save_path,
                return_fig_ax=return_fig_ax,
            )
        if mode == "difference":
            return self._plot_difference(
                result,
                figsize=figsize,
                title=title,
                save_path=save_path,
                return_fig_ax=return_fig_ax,
            )
        raise ValueError(f"Unknown plot mode {mode!r}. Use 'lines' or 'difference'.")

    def _plot_difference(
        self,
        result: ReconciliationResult,
        *,
        figsize: Optional[tuple] = None,
        title: Optional[str] = None,
        save_path: Optional[str] = None,
        return_fig_ax: bool = False,
    ):
        import matplotlib.pyplot as plt

        frame = result.to_frame()
        diff = frame["difference"].to_numpy()
        days = frame["day"].to_numpy()

        fig, ax = plt.subplots(figsize=figsize or DEFAULT_FIGSIZE)
        ax.fill_between(days, diff, 0, where=diff >= 0, color=FORECAST_COLOR, alpha=0.4)
        ax.fill_between(days, diff, 0, where=diff < 0, color=REAL_COLOR, alpha=0.4)
        ax.plot(days, diff, color=FORECAST_COLOR, linewidth=DEFAULT_LINEWIDTH)
        ax.axhline(0, color="gray", linewidth=0.8)
        ax.set_xlim(1, len(result.points))
        ax.set_xlabel("Day of year")
        ax.set_ylabel("Real - forecast")
        ax.grid(True, linestyle="--", alpha=0.3)
        ax.set_title(title or f"Forecast deviation {result.year}", fontsize=14, fontweight="bold")
        fig.tight_layout()

        if save_path:
            fig.savefig(save_path, bbox_inches="tight", dpi=150)

        if return_fig_ax:
            return fig, ax
        return None
