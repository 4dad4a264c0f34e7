"""Tests for UK working days and the early-pay rule."""

import pytest
from datetime import date

from lifetracker.dates.working_days import (
    InvalidDateRangeError,
    clamped_date,
    closest_working_day,
    early_pay_cycle_for_date,
    early_payday_for_month,
    get_bank_holidays,
    is_bank_holiday,
    is_weekend,
    is_working_day,
    month_key,
    next_working_day,
    previous_working_day,
    reset_bank_holidays,
    set_bank_holidays,
    shift_month,
    working_days_between,
)


@pytest.fixture(autouse=True)
def restore_bank_holidays():
    yield
    reset_bank_holidays()


class TestWorkingDays:
    """Tests for weekend and bank holiday detection."""

    def test_weekend(self):
        """Test Saturday and Sunday are weekends."""
        assert is_weekend(date(2025, 9, 20))
        assert is_weekend(date(2025, 9, 21))
        assert not is_weekend(date(2025, 9, 22))

    def test_christmas_is_not_a_working_day(self):
        """Test built-in bank holidays."""
        assert is_bank_holiday(date(2025, 12, 25))
        assert not is_working_day(date(2025, 12, 25))

    def test_substitute_day(self):
        """Test substitute bank holidays are included."""
        # Boxing Day 2026 is a Saturday
        assert is_bank_holiday(date(2026, 12, 28))

    def test_previous_working_day_is_strict(self):
        """Test a working day's previous working day is earlier."""
        assert previous_working_day(date(2025, 9, 24)) == date(2025, 9, 23)

    def test_previous_working_day_skips_easter(self):
        """Test Easter Sunday goes back past Good Friday."""
        assert previous_working_day(date(2025, 4, 20)) == date(2025, 4, 17)

    def test_next_working_day_skips_easter_monday(self):
        """Test Easter Sunday goes forward past Easter Monday."""
        assert next_working_day(date(2025, 4, 20)) == date(2025, 4, 22)

    def test_closest_working_day(self):
        """Test nearest working day either side."""
        assert closest_working_day(date(2025, 9, 22)) == date(2025, 9, 22)
        assert closest_working_day(date(2025, 9, 20)) == date(2025, 9, 19)
        assert closest_working_day(date(2025, 9, 21)) == date(2025, 9, 22)

    def test_closest_working_day_tie_goes_earlier(self):
        """Test a tie resolves to the earlier working day."""
        # Sunday before the May bank holiday: Fri 2nd and Tue 6th are both 2 days away
        assert closest_working_day(date(2025, 5, 4)) == date(2025, 5, 2)

    def test_working_days_between(self):
        """Test Christmas week has three working days."""
        assert working_days_between(date(2025, 12, 22), date(2025, 12, 28)) == 3

    def test_working_days_between_rejects_reversed_range(self):
        """Test a reversed range raises."""
        with pytest.raises(InvalidDateRangeError):
            working_days_between(date(2025, 2, 1), date(2025, 1, 1))


class TestBankHolidayOverride:
    """Tests for replacing the bank holiday set."""

    def test_set_and_reset(self):
        """Test replacement and restoration of the built-in set."""
        set_bank_holidays([date(2025, 2, 20)])
        assert is_bank_holiday(date(2025, 2, 20))
        assert not is_bank_holiday(date(2025, 12, 25))

        reset_bank_holidays()
        assert is_bank_holiday(date(2025, 12, 25))
        assert date(2025, 2, 20) not in get_bank_holidays()


class TestMonthHelpers:
    """Tests for month arithmetic."""

    def test_shift_month_across_years(self):
        """Test moving across year boundaries both ways."""
        assert shift_month(2025, 12, 1) == (2026, 1)
        assert shift_month(2025, 1, -1) == (2024, 12)
        assert shift_month(2025, 3, -14) == (2024, 1)

    def test_clamped_date(self):
        """Test days beyond the month end are clamped."""
        assert clamped_date(2025, 2, 31) == date(2025, 2, 28)
        assert clamped_date(2024, 2, 31) == date(2024, 2, 29)
        assert clamped_date(2025, 4, 15) == date(2025, 4, 15)

    def test_month_key(self):
        """Test YYYY-MM keys."""
        assert month_key(date(2025, 3, 9)) == "2025-03"


class TestEarlyPayday:
    """Tests for the fixed 20th-or-Friday-before rule."""

    def test_weekday_20th_unchanged(self):
        """Test a Thursday 20th is payday."""
        assert early_payday_for_month(2025, 2) == date(2025, 2, 20)

    def test_saturday_goes_to_friday(self):
        """Test a Saturday 20th pays on Friday 19th."""
        assert early_payday_for_month(2025, 9) == date(2025, 9, 19)

    def test_monday_goes_to_friday(self):
        """Test a Monday 20th also pays on the Friday before."""
        assert early_payday_for_month(2025, 1) == date(2025, 1, 17)

    def test_friday_bank_holiday_still_pays_friday(self):
        """Test Easter: Sunday 20th pays on Good Friday itself."""
        assert early_payday_for_month(2025, 4) == date(2025, 4, 18)

    def test_midweek_bank_holiday(self):
        """Test a Tuesday-Friday bank holiday uses the previous working day."""
        set_bank_holidays([date(2025, 2, 20)])
        assert early_payday_for_month(2025, 2) == date(2025, 2, 19)

    def test_early_pay_cycle(self):
        """Test the cycle runs payday to the day before the next payday."""
        cycle = early_pay_cycle_for_date(date(2025, 2, 1))
        assert cycle.start == date(2025, 1, 17)
        assert cycle.end == date(2025, 2, 19)

    def test_early_pay_cycle_on_payday(self):
        """Test payday itself opens a new cycle."""
        cycle = early_pay_cycle_for_date(date(2025, 2, 20))
        assert cycle.start == date(2025, 2, 20)
        assert cycle.end == date(2025, 3, 19)
