"""Tests for toiletry forecasts, usage rates and reorder dates."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from lifetracker.models import ShippingProfile, UsageLog
from lifetracker.models.toiletry import (
    ReadingType,
    ReorderStatus,
    StockLevel,
    ToiletryCategory,
    ToiletryItem,
    ToiletryStatus,
    UsageConfidence,
)
from lifetracker.toiletries import (
    InvalidPackSizeError,
    calculate_aggregate_stats,
    calculate_forecast,
    calculate_order_by_date,
    calculate_purchase,
    daily_usage_from_logs,
    reorder_status,
    validate_weight_log,
    weight_based_usage,
)
from lifetracker.toiletries.forecast import FINISHED_ITEM_ERROR, usage_rate_between


TODAY = date(2025, 3, 1)


def make_item(**overrides) -> ToiletryItem:
    values = dict(
        id="shampoo",
        name="Shampoo",
        category=ToiletryCategory.HAIR,
        total_size=400,
        cost_per_item=Decimal("4.00"),
        usage_rate_per_day=10,
        current_remaining=200,
    )
    values.update(overrides)
    return ToiletryItem(**values)


class TestForecast:
    """Tests for a single item's forecast."""

    def test_healthy_item(self):
        """Test days left, costs and percentage."""
        forecast = calculate_forecast(make_item(), TODAY, low_stock_threshold_days=14)

        assert forecast.days_remaining == 20
        assert forecast.run_out_date == date(2025, 3, 21)
        assert forecast.monthly_usage == 300
        assert forecast.monthly_cost == Decimal("3.00")
        assert forecast.yearly_cost == Decimal("36.00")
        assert forecast.status_level == StockLevel.HEALTHY
        assert forecast.percent_remaining == 50

    def test_low_stock(self):
        """Test days at or under the threshold are low."""
        forecast = calculate_forecast(make_item(current_remaining=140), TODAY, 14)
        assert forecast.status_level == StockLevel.LOW

    def test_empty(self):
        """Test nothing left runs out today."""
        forecast = calculate_forecast(make_item(current_remaining=0), TODAY, 14)
        assert forecast.status_level == StockLevel.EMPTY
        assert forecast.days_remaining == 0
        assert forecast.run_out_date == TODAY

    def test_part_days(self):
        """Test days are rounded but the run-out date uses whole days."""
        forecast = calculate_forecast(make_item(current_remaining=27), TODAY, 14)
        assert forecast.days_remaining == 3
        assert forecast.run_out_date == date(2025, 3, 3)

    def test_unused_item_never_runs_out(self):
        """Test a zero usage rate."""
        forecast = calculate_forecast(make_item(usage_rate_per_day=0), TODAY, 14)
        assert forecast.days_remaining is None
        assert forecast.run_out_date is None
        assert forecast.monthly_cost == Decimal("0.00")
        assert forecast.status_level == StockLevel.HEALTHY

    def test_tiny_usage_rate(self):
        """Test a run-out date past the calendar's end is left empty."""
        item = make_item(total_size=500, usage_rate_per_day=0.0001, current_remaining=500)
        forecast = calculate_forecast(item, TODAY, 14)

        assert forecast.days_remaining == 5_000_000
        assert forecast.run_out_date is None
        assert forecast.status_level == StockLevel.HEALTHY


class TestPurchase:
    """Tests for whole-pack purchases."""

    def test_rounds_up_to_packs(self):
        """Test never buying less than required."""
        purchase = calculate_purchase(1000, 400, Decimal("4.00"))
        assert purchase.packs_needed == 3
        assert purchase.actual_purchase_quantity == 1200
        assert purchase.total_cost == Decimal("12.00")

    def test_zero_pack_size(self):
        """Test an empty pack size raises."""
        with pytest.raises(InvalidPackSizeError):
            calculate_purchase(100, 0, Decimal("1"))


class TestAggregateStats:
    """Tests for totals across items."""

    def test_active_items_only(self):
        """Test totals, counts and the category split."""
        items = [
            make_item(),
            make_item(
                id="toothpaste", name="Toothpaste", category=ToiletryCategory.ORAL,
                total_size=100, cost_per_item=Decimal("2.00"),
                usage_rate_per_day=2, current_remaining=10,
            ),
            make_item(id="old", name="Old", status=ToiletryStatus.DISCONTINUED),
        ]
        stats = calculate_aggregate_stats(items, TODAY)

        assert stats.total_monthly_cost == Decimal("4.20")
        assert stats.total_yearly_cost == Decimal("50.40")
        assert stats.low_stock_count == 1
        assert stats.empty_count == 0
        assert stats.active_item_count == 2
        assert stats.total_item_count == 3
        assert stats.cost_by_category["hair"].monthly == Decimal("3.00")
        assert stats.cost_by_category["oral"].yearly == Decimal("14.40")


class TestUsageRates:
    """Tests for usage from logs and scale readings."""

    def test_logs_over_span(self):
        """Test total used divided by the days the logs span."""
        logs = [
            UsageLog(logged_date=date(2025, 2, 1), amount_used=50),
            UsageLog(logged_date=date(2025, 3, 1), amount_used=5),
            UsageLog(logged_date=date(2025, 3, 11), amount_used=5),
            UsageLog(logged_date=date(2025, 3, 21), amount_used=10),
        ]
        result = daily_usage_from_logs(logs, today=date(2025, 3, 31), lookback_days=30)
        assert result.daily_usage == 1.0
        assert result.data_points == 3
        assert result.confidence == UsageConfidence.MODERATE

    def test_single_log(self):
        """Test one log counts as one day."""
        result = daily_usage_from_logs(
            [UsageLog(logged_date=TODAY, amount_used=4)], today=TODAY, lookback_days=30
        )
        assert result.daily_usage == 4
        assert result.confidence == UsageConfidence.LOW

    def test_good_confidence(self):
        """Test seven logs give good confidence."""
        logs = [UsageLog(logged_date=date(2025, 3, day), amount_used=1) for day in range(1, 8)]
        result = daily_usage_from_logs(logs, today=date(2025, 3, 10), lookback_days=30)
        assert result.confidence == UsageConfidence.GOOD

    def test_no_logs(self):
        """Test no data means no rate."""
        result = daily_usage_from_logs([], today=TODAY, lookback_days=30)
        assert result.daily_usage is None
        assert result.confidence == UsageConfidence.NONE

    def test_usage_between_readings(self):
        """Test weight lost per day, or None."""
        assert usage_rate_between(500, 450, 10) == 5.0
        assert usage_rate_between(500, 450, 0) is None
        assert usage_rate_between(450, 500, 10) is None

    def test_weight_based_rate(self):
        """Test usage since opening from full and current weights."""
        result = weight_based_usage(
            full_weight_grams=550,
            current_weight_grams=300,
            empty_weight_grams=50,
            opened_on=date(2025, 3, 1),
            last_weighed_on=date(2025, 3, 21),
            manual_usage_rate=1.0,
        )
        assert result.source == "weight_based"
        assert result.remaining_grams == 250
        assert result.usage_rate_per_day == 12.5
        assert result.days_remaining == 20

    def test_manual_fallbacks(self):
        """Test the manual rate without readings or a full weight."""
        no_reading = weight_based_usage(None, None, 50, None, None, 3.0)
        assert no_reading.source == "manual"
        assert no_reading.usage_rate_per_day == 3.0

        no_full = weight_based_usage(None, 300, 50, None, None, 5.0, today=TODAY)
        assert no_full.source == "manual"
        assert no_full.days_remaining == 50

    def test_weight_log_rules(self):
        """Test finished items and a second full weight are rejected."""
        assert validate_weight_log(ReadingType.REGULAR, 550, None) == (True, None)
        assert validate_weight_log(ReadingType.FULL, 550, None)[0] is False
        assert validate_weight_log(
            ReadingType.REGULAR, None, datetime(2025, 3, 1, 9, 0)
        ) == (False, FINISHED_ITEM_ERROR)


class TestReordering:
    """Tests for order-by dates and reorder status."""

    def test_weekdays_only_retailer(self):
        """Test weekends are skipped when the retailer is weekdays only."""
        # Friday 21 March 2025; lead time 1 + 3 + 2 working days
        result = calculate_order_by_date(
            date(2025, 3, 21), ShippingProfile(), safety_buffer_days=2,
            now=datetime(2025, 3, 1, 9, 0),
        )
        assert result.max_lead_time_days == 6
        assert result.order_by_date == date(2025, 3, 13)

    def test_weekend_delivery_counts_every_day(self):
        """Test calendar days when the retailer delivers at weekends."""
        result = calculate_order_by_date(
            date(2025, 3, 21), ShippingProfile(delivers_weekends=True), safety_buffer_days=2,
            now=datetime(2025, 3, 1, 9, 0),
        )
        assert result.order_by_date == date(2025, 3, 15)

    def test_missed_cutoff(self):
        """Test missing today's cutoff moves the order-by date back."""
        profile = ShippingProfile(cutoff_time="14:00")
        before = calculate_order_by_date(
            date(2025, 3, 21), profile, 2, now=datetime(2025, 3, 13, 13, 59)
        )
        after = calculate_order_by_date(
            date(2025, 3, 21), profile, 2, now=datetime(2025, 3, 13, 14, 0)
        )
        assert before.order_by_date == date(2025, 3, 13)
        assert after.order_by_date == date(2025, 3, 12)

    @pytest.mark.parametrize("order_by, expected", [
        (None, ReorderStatus.NO_DATA),
        (date(2025, 2, 28), ReorderStatus.OVERDUE),
        (date(2025, 3, 1), ReorderStatus.ORDER_NOW),
        (date(2025, 3, 8), ReorderStatus.REORDER_SOON),
        (date(2025, 3, 9), ReorderStatus.PLENTY),
    ])
    def test_reorder_status(self, order_by, expected):
        """Test the status bands."""
        assert reorder_status(order_by, TODAY) == expected
