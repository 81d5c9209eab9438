"""
Integration tests for the complete FinCast workflow.

Tests the end-to-end path: editing a store, projecting and reconciling the
year, exporting a snapshot and restoring it elsewhere.
"""

import pytest
from datetime import date
from decimal import Decimal

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from fincast import EntityStore, ForecastModel
from fincast.exceptions import ParseError
from fincast.serialization import read_import, write_export


@pytest.fixture
def filled_store(store):
    """
    Household budget for 2025.

    - Rent -750 on the 1st
    - Salary +2100 on the 31st (clamped in short months)
    - Car insurance -480 on September 15th
    - Groceries overspend -120 on March 5th, refund +35.50 on March 20th
    """
    store.set_initial_balance("1000")
    store.add_rule(amount="-750", day_of_month=1, active_from="2025-01-01", title="Rent")
    store.add_rule(amount="2100", day_of_month=31, active_from="2025-01-01", title="Salary")
    store.add_event(amount="-480", date="2025-09-15", title="Car insurance")
    store.add_movement(amount="-120", date="2025-03-05", title="Groceries")
    store.add_movement(amount="35.50", date="2025-03-20", title="Refund")
    return store


class TestEndToEnd:
    """Store -> model -> snapshot -> store."""

    def test_year_lines(self, filled_store):
        """Forecast and real lines over the whole year."""
        model = ForecastModel(filled_store.state)
        result = model.reconcile()

        # 12 x (-750 + 2100) - 480
        assert result.final_forecast == Decimal("1000") + 12 * Decimal("1350") - 480
        assert result.final_real == result.final_forecast - Decimal("84.50")

        # Feb 28: two rents, salary on Jan 31 and (clamped) Feb 28
        assert result.points[58].forecast == Decimal("1000") + 2 * Decimal("1350")

    def test_current_difference_over_time(self, filled_store):
        """Difference grows as movements are recorded."""
        model = ForecastModel(filled_store.state)

        assert model.current_difference(date(2025, 3, 4)) == Decimal("0")
        assert model.current_difference(date(2025, 3, 5)) == Decimal("-120")
        assert model.current_difference(date(2025, 3, 20)) == Decimal("-84.50")
        assert model.current_difference(date(2026, 3, 20)) is None

    def test_lowest_point(self, filled_store):
        """Lowest forecast is Jan 1st, right after the first rent."""
        summary = ForecastModel(filled_store.state).summary(today=date(2025, 1, 1))
        assert summary.min_forecast == Decimal("250")
        assert summary.min_forecast_day == 1

    def test_export_restore(self, filled_store, tmp_path):
        """An export restores an identical state into a fresh store."""
        path = write_export(filled_store.state, tmp_path / "exports")
        assert path.name == "finances-2025.json"

        fresh = EntityStore(tmp_path / "other.json", default_year=2030)
        fresh.save(read_import(path, fresh.state))

        assert fresh.state == filled_store.state
        assert EntityStore(tmp_path / "other.json").load() == filled_store.state
        assert (
            ForecastModel(fresh.state).reconcile()
            == ForecastModel(filled_store.state).reconcile()
        )

    def test_failed_import_keeps_state(self, filled_store, store_path, tmp_path):
        """A malformed snapshot leaves the store as it was."""
        before = store_path.read_text(encoding="utf-8")
        bad = tmp_path / "bad.json"
        bad.write_text('{"year": 2025, "plannedEvents": "soon"}', encoding="utf-8")

        with pytest.raises(ParseError):
            filled_store.import_snapshot(bad.read_text(encoding="utf-8"))

        assert store_path.read_text(encoding="utf-8") == before
        assert len(filled_store.state.events) == 1

    def test_year_change_reprojects(self, filled_store):
        """Switching year keeps entries; rules still fire, dated items drop out."""
        filled_store.set_year(2026)
        result = ForecastModel(filled_store.state).reconcile()

        assert result.final_forecast == Decimal("1000") + 12 * Decimal("1350")
        assert result.final_real == result.final_forecast

    def test_chart(self, filled_store, tmp_path):
        """Chart and feed agree on the year end."""
        model = ForecastModel(filled_store.state)
        feed = model.feed()
        assert feed[-1].label == "31/12"
        assert feed[-1].real == float(model.reconcile().final_real)

        out = tmp_path / "forecast.png"
        model.plot("lines", today=date(2025, 6, 1), save_path=str(out))
        plt.close("all")
        assert out.exists()
