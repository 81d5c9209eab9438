"""
Unit tests for dates.py module.

Tests leap years, month lengths, clamping and day-index conversion.
"""

from datetime import date

import pytest

from fincast.dates import (
    clamp_day_of_month,
    date_to_day_index,
    day_index_to_date,
    days_in_month,
    days_in_year,
    is_leap_year,
    iter_year_dates,
)
from fincast.exceptions import RangeAssumptionViolation


# ============================================================================
# LEAP YEARS
# ============================================================================

class TestLeapYears:
    """Test Gregorian leap-year rule."""

    @pytest.mark.parametrize(
        "y, leap",
        [(2000, True), (1900, False), (2024, True), (2025, False), (2100, False)],
    )
    def test_is_leap_year(self, y, leap):
        """Divisible by 4, not by 100 unless by 400."""
        assert is_leap_year(y) is leap

    @pytest.mark.parametrize("y", [2000, 1900, 2024, 2025, 2100])
    def test_days_in_year_matches_leap(self, y):
        """days_in_year is 366 exactly for leap years."""
        assert (days_in_year(y) == 366) == is_leap_year(y)
        assert days_in_year(y) in (365, 366)

    def test_days_in_year_invalid(self):
        """Years without a valid day count fail fast."""
        with pytest.raises(RangeAssumptionViolation, match="year"):
            days_in_year(0)
        with pytest.raises(RangeAssumptionViolation, match="year"):
            days_in_year(10_000)


# ============================================================================
# MONTH LENGTHS AND CLAMPING
# ============================================================================

class TestMonths:
    """Test days_in_month and clamp_day_of_month."""

    def test_days_in_month(self):
        """Month lengths, including leap February."""
        assert days_in_month(2025, 1) == 31
        assert days_in_month(2025, 2) == 28
        assert days_in_month(2024, 2) == 29
        assert days_in_month(2025, 4) == 30
        assert days_in_month(2025, 12) == 31
        assert sum(days_in_month(2025, m) for m in range(1, 13)) == 365
        assert sum(days_in_month(2024, m) for m in range(1, 13)) == 366

    def test_days_in_month_invalid_month(self):
        """Month outside 1..12 raises."""
        with pytest.raises(RangeAssumptionViolation, match="month"):
            days_in_month(2025, 13)

    def test_clamp_examples(self):
        """Day 31 collapses to the last day of short months."""
        assert clamp_day_of_month(2025, 2, 31) == 28
        assert clamp_day_of_month(2024, 2, 31) == 29
        assert clamp_day_of_month(2025, 1, 15) == 15
        assert clamp_day_of_month(2025, 4, 31) == 30
        assert clamp_day_of_month(2025, 2, 29) == 28

    @pytest.mark.parametrize("day", [0, 32, -1])
    def test_clamp_rejects_out_of_range_day(self, day):
        """Requested day outside 1..31 is an invariant violation."""
        with pytest.raises(RangeAssumptionViolation, match="day of month"):
            clamp_day_of_month(2025, 1, day)


# ============================================================================
# DAY INDICES
# ============================================================================

class TestDayIndex:
    """Test day index <-> date conversion."""

    def test_day_index_to_date_bounds(self):
        """Day 1 is Jan 1st, the last day is Dec 31st."""
        assert day_index_to_date(2025, 1) == date(2025, 1, 1)
        assert day_index_to_date(2025, 365) == date(2025, 12, 31)
        assert day_index_to_date(2024, 366) == date(2024, 12, 31)
        assert day_index_to_date(2024, 60) == date(2024, 2, 29)

    def test_date_to_day_index(self):
        """1-based ordinal within the year."""
        assert date_to_day_index(2025, date(2025, 1, 1)) == 1
        assert date_to_day_index(2025, date(2025, 3, 1)) == 60
        assert date_to_day_index(2024, date(2024, 3, 1)) == 61
        assert date_to_day_index(2025, date(2025, 12, 31)) == 365

    def test_date_to_day_index_outside_year(self):
        """Dates outside the year fall outside 1..N."""
        assert date_to_day_index(2025, date(2024, 12, 31)) == 0
        assert date_to_day_index(2025, date(2026, 1, 1)) == 366

    @pytest.mark.parametrize("y", [2024, 2025, 2000, 1900])
    def test_mutual_inverse(self, y):
        """dateToDayIndex(dayIndexToDate(d)) == d for every day of the year."""
        for d in range(1, days_in_year(y) + 1):
            assert date_to_day_index(y, day_index_to_date(y, d)) == d

    @pytest.mark.parametrize("d", [0, 366, -5])
    def test_day_index_out_of_range(self, d):
        """Indices outside 1..days_in_year raise."""
        with pytest.raises(RangeAssumptionViolation, match="out of range"):
            day_index_to_date(2025, d)

    def test_iter_year_dates(self):
        """Yields every day once, in order."""
        days = list(iter_year_dates(2024))
        assert len(days) == 366
        assert days[0] == (1, date(2024, 1, 1))
        assert days[-1] == (366, date(2024, 12, 31))
        assert all(idx == date_to_day_index(2024, d) for idx, d in days)

    def test_iter_last_supported_year(self):
        """The final year does not overflow past Dec 31st."""
        days = list(iter_year_dates(9999))
        assert days[-1] == (365, date(9999, 12, 31))
