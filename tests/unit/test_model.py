"""
Unit tests for model.py module.

Tests the ForecastModel facade and ForecastSummary.
"""

import pytest
from datetime import date
from decimal import Decimal

from fincast.entities import ForecastState
from fincast.model import ForecastModel, ForecastSummary
from fincast.projection import project_state
from fincast.reconciliation import reconcile_state


@pytest.fixture
def model(state):
    return ForecastModel(state)


class TestForecastModel:
    """Test delegation to projection, reconciliation and feed."""

    def test_repr(self, model):
        assert repr(model) == "ForecastModel(year=2025, rules=2, events=1, movements=1)"

    def test_project(self, model, state):
        """Same line as project_state."""
        assert model.project() == project_state(state)

    def test_reconcile(self, model, state):
        """Same result as reconcile_state."""
        assert model.reconcile() == reconcile_state(state)

    def test_current_difference(self, model):
        """200 after the bonus, None outside the year."""
        assert model.current_difference(date(2025, 1, 10)) == Decimal("200")
        assert model.current_difference(date(2025, 1, 9)) == Decimal("0")
        assert model.current_difference(date(2024, 12, 31)) is None

    def test_feed(self, model):
        """Sampled feed with the requested stride."""
        assert len(model.feed()) == 183
        assert len(model.feed(stride=1)) == 365


class TestForecastSummary:
    """Test summary()."""

    def test_summary_values(self, model):
        """Headline numbers of the shared state."""
        summary = model.summary(today=date(2025, 12, 31))

        # -50 x 12, -200 insurance, +2100.50 x 7 (June..December)
        expected_final = Decimal("1000") - 600 - 200 + 7 * Decimal("2100.50")

        assert isinstance(summary, ForecastSummary)
        assert summary.year == 2025
        assert summary.initial_balance == Decimal("1000")
        assert summary.final_forecast == expected_final
        assert summary.final_real == expected_final + 200
        assert summary.current_difference == Decimal("200")

    def test_summary_minimum(self, model):
        """Lowest forecast point is May 31st, before the first salary."""
        summary = model.summary(today=date(2030, 1, 1))

        # Jan 31, Feb 28, Mar 1 (insurance), Mar 31, Apr 30, May 31
        assert summary.min_forecast == Decimal("550")
        assert summary.min_forecast_day == 151
        assert summary.current_difference is None

    def test_summary_flat_line(self):
        """Ties resolve to the first day."""
        summary = ForecastModel(ForecastState(year=2025)).summary(today=date(2025, 1, 1))
        assert summary.min_forecast == Decimal("0")
        assert summary.min_forecast_day == 1
