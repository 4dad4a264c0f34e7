"""Tests for configurable paydays and pay cycles."""

import pytest
from datetime import date

from lifetracker.dates.payday import (
    PaydayConfigurationError,
    days_until_payday,
    is_payday,
    make_payday_rule,
    next_payday,
    payday_for_month,
    paydays_in_range,
    previous_payday,
)
from lifetracker.dates.pay_cycle import (
    current_pay_cycle,
    format_pay_cycle_label,
    format_pay_cycle_label_short,
    next_pay_cycle,
    pay_cycle_for_date,
    previous_pay_cycle,
)
from lifetracker.dates.working_days import InvalidDateRangeError
from lifetracker.models import AdjustmentRule, PaydayRule


RULE_20TH = PaydayRule(day=20)


class TestPaydayForMonth:
    """Tests for a single month's payday."""

    def test_working_day_unchanged(self):
        """Test a working-day payday is not moved."""
        assert payday_for_month(2025, 1, RULE_20TH) == date(2025, 1, 20)

    def test_weekend_moves_back(self):
        """Test the default rule pays on the previous working day."""
        assert payday_for_month(2025, 9, RULE_20TH) == date(2025, 9, 19)

    def test_easter_moves_back_past_good_friday(self):
        """Test bank holidays are skipped too."""
        assert payday_for_month(2025, 4, RULE_20TH) == date(2025, 4, 17)

    def test_next_working_day_rule(self):
        """Test the next-working-day rule."""
        rule = PaydayRule(day=20, adjustment_rule=AdjustmentRule.NEXT_WORKING_DAY)
        assert payday_for_month(2025, 4, rule) == date(2025, 4, 22)

    def test_closest_working_day_rule(self):
        """Test the closest-working-day rule."""
        rule = PaydayRule(day=20, adjustment_rule=AdjustmentRule.CLOSEST_WORKING_DAY)
        assert payday_for_month(2025, 4, rule) == date(2025, 4, 22)

    def test_no_adjustment_rule(self):
        """Test no adjustment keeps a weekend payday."""
        rule = PaydayRule(day=20, adjustment_rule=AdjustmentRule.NO_ADJUSTMENT)
        assert payday_for_month(2025, 9, rule) == date(2025, 9, 20)

    def test_day_31_clamped_in_february(self):
        """Test clamping before adjusting."""
        rule = PaydayRule(day=31)
        assert payday_for_month(2025, 2, rule) == date(2025, 2, 28)
        # 28 Feb 2026 is a Saturday
        assert payday_for_month(2026, 2, rule) == date(2026, 2, 27)

    def test_is_payday(self):
        """Test is_payday uses the adjusted date."""
        assert is_payday(date(2025, 9, 19), RULE_20TH)
        assert not is_payday(date(2025, 9, 20), RULE_20TH)


class TestPaydayConfiguration:
    """Tests for building rules from raw values."""

    def test_make_payday_rule(self):
        """Test a valid configuration."""
        rule = make_payday_rule(25, "next_working_day")
        assert rule.day == 25
        assert rule.adjustment_rule == AdjustmentRule.NEXT_WORKING_DAY

    @pytest.mark.parametrize("day", [0, 32])
    def test_day_out_of_range(self, day):
        """Test days outside 1..31 raise PaydayConfigurationError."""
        with pytest.raises(PaydayConfigurationError):
            make_payday_rule(day)

    def test_unknown_adjustment_rule(self):
        """Test unknown rules raise PaydayConfigurationError."""
        with pytest.raises(PaydayConfigurationError):
            make_payday_rule(20, "whenever")


class TestPaydaySearch:
    """Tests for finding paydays around a date."""

    def test_paydays_in_range(self):
        """Test inclusive range of adjusted paydays."""
        paydays = paydays_in_range(date(2025, 1, 1), date(2025, 4, 30), RULE_20TH)
        assert paydays == [
            date(2025, 1, 20),
            date(2025, 2, 20),
            date(2025, 3, 20),
            date(2025, 4, 17),
        ]

    def test_paydays_in_range_rejects_reversed_range(self):
        """Test end before start raises."""
        with pytest.raises(InvalidDateRangeError):
            paydays_in_range(date(2025, 4, 1), date(2025, 1, 1), RULE_20TH)

    def test_next_payday_on_payday(self):
        """Test next_payday includes the day itself."""
        assert next_payday(date(2025, 1, 20), RULE_20TH) == date(2025, 1, 20)

    def test_next_payday_after_payday(self):
        """Test the day after payday looks to next month."""
        assert next_payday(date(2025, 1, 21), RULE_20TH) == date(2025, 2, 20)

    def test_previous_payday_is_strict(self):
        """Test previous_payday excludes the day itself."""
        assert previous_payday(date(2025, 1, 20), RULE_20TH) == date(2024, 12, 20)
        assert previous_payday(date(2025, 1, 21), RULE_20TH) == date(2025, 1, 20)

    def test_days_until_payday(self):
        """Test countdown, zero on payday."""
        assert days_until_payday(date(2025, 1, 15), RULE_20TH) == 5
        assert days_until_payday(date(2025, 1, 20), RULE_20TH) == 0


class TestPayCycles:
    """Tests for pay cycle boundaries and navigation."""

    def test_cycle_before_payday(self):
        """Test a date before payday belongs to last month's cycle."""
        cycle = pay_cycle_for_date(date(2026, 3, 1), RULE_20TH)
        assert cycle.start == date(2026, 2, 20)
        assert cycle.end == date(2026, 3, 19)

    def test_cycle_across_year_end(self):
        """Test early January belongs to December's cycle."""
        cycle = pay_cycle_for_date(date(2025, 1, 5), RULE_20TH)
        assert cycle.start == date(2024, 12, 20)
        assert cycle.end == date(2025, 1, 19)

    def test_current_pay_cycle(self):
        """Test current cycle for an explicit today."""
        assert current_pay_cycle(date(2026, 3, 1), RULE_20TH) == pay_cycle_for_date(
            date(2026, 3, 1), RULE_20TH
        )

    def test_next_and_previous(self):
        """Test cycles tile with no gaps."""
        cycle = pay_cycle_for_date(date(2026, 3, 1), RULE_20TH)
        following = next_pay_cycle(cycle, RULE_20TH)
        preceding = previous_pay_cycle(cycle, RULE_20TH)

        assert following.start == date(2026, 3, 20)
        assert following.end == date(2026, 4, 19)
        assert preceding.start == date(2026, 1, 20)
        assert preceding.end == date(2026, 2, 19)

    def test_labels(self):
        """Test long and short labels."""
        cycle = pay_cycle_for_date(date(2026, 3, 1), RULE_20TH)
        assert format_pay_cycle_label(cycle) == "20 Feb → 19 Mar 2026"
        assert format_pay_cycle_label_short(cycle) == "20 Feb – 19 Mar"


class TestPaydaysCrossingMonths:
    """Tests for adjusted paydays that land in a neighbouring month."""

    # 1 Feb 2026 is a Sunday, so February's pay arrives on Fri 30 Jan
    FIRST_OF_MONTH = PaydayRule(day=1)
    # 31 Jan 2026 is a Saturday, so January's pay arrives on Mon 2 Feb
    END_OF_MONTH = PaydayRule(day=31, adjustment_rule=AdjustmentRule.NEXT_WORKING_DAY)

    def test_next_payday_never_before_date(self):
        """Test the payday moved into January is already behind 31 Jan."""
        assert next_payday(date(2026, 1, 31), self.FIRST_OF_MONTH) == date(2026, 2, 27)
        assert days_until_payday(date(2026, 1, 31), self.FIRST_OF_MONTH) == 27

    def test_previous_payday_uses_moved_payday(self):
        """Test February's early payday counts as the previous one."""
        assert previous_payday(date(2026, 1, 31), self.FIRST_OF_MONTH) == date(2026, 1, 30)

    def test_is_payday_in_earlier_month(self):
        """Test the moved payday is recognised in its actual month."""
        assert is_payday(date(2026, 1, 30), self.FIRST_OF_MONTH)
        assert not is_payday(date(2026, 2, 2), self.FIRST_OF_MONTH)

    def test_cycle_starts_on_early_payday(self):
        """Test the cycle for 31 Jan starts on 30 Jan."""
        cycle = pay_cycle_for_date(date(2026, 1, 31), self.FIRST_OF_MONTH)
        assert cycle.start == date(2026, 1, 30)
        assert cycle.end == date(2026, 2, 26)
        assert cycle.contains(date(2026, 1, 31))

    def test_next_payday_moved_into_following_month(self):
        """Test January's payday on 2 Feb is the next one from 1 Feb."""
        assert next_payday(date(2026, 2, 1), self.END_OF_MONTH) == date(2026, 2, 2)
        assert previous_payday(date(2026, 2, 1), self.END_OF_MONTH) == date(2025, 12, 31)

    def test_cycle_before_late_payday(self):
        """Test 1 Feb still belongs to the cycle that began on 31 Dec."""
        cycle = pay_cycle_for_date(date(2026, 2, 1), self.END_OF_MONTH)
        assert cycle.start == date(2025, 12, 31)
        assert cycle.end == date(2026, 2, 1)

    def test_cycles_tile(self):
        """Test next and previous cycles meet with no gap or overlap."""
        cycle = pay_cycle_for_date(date(2026, 2, 1), self.END_OF_MONTH)
        following = next_pay_cycle(cycle, self.END_OF_MONTH)

        # 28 Feb 2026 is a Saturday
        assert following.start == date(2026, 2, 2)
        assert following.end == date(2026, 3, 1)
        assert previous_pay_cycle(following, self.END_OF_MONTH) == cycle
