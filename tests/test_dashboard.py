"""Tests for pay-cycle dashboard metrics and alerts."""

import pytest
from datetime import date
from decimal import Decimal

from lifetracker.dashboard import (
    build_daily_spending,
    build_pay_cycle_metrics,
    calculate_net_position,
    calculate_projected_end_balance,
    calculate_safe_to_spend,
    check_runway_risk,
    format_currency,
    generate_alerts,
)
from lifetracker.models import AlertType, CycleTransaction, PayCycle, UpcomingBill


CYCLE = PayCycle(start=date(2025, 1, 20), end=date(2025, 1, 29))
TODAY = date(2025, 1, 24)


def expense(day, amount):
    return CycleTransaction(transaction_date=date(2025, 1, day), amount=Decimal(amount), type="expense")


def income(day, amount):
    return CycleTransaction(transaction_date=date(2025, 1, day), amount=Decimal(amount), type="income")


@pytest.fixture
def bills():
    return [
        UpcomingBill(name="Rent", amount=Decimal("400"), due_date=date(2025, 1, 25)),
        UpcomingBill(name="Phone", amount=Decimal("50"), due_date=date(2025, 1, 22)),
        UpcomingBill(name="Insurance", amount=Decimal("100"), due_date=date(2025, 2, 1)),
    ]


@pytest.fixture
def metrics(bills):
    transactions = [
        income(20, "1000"),
        expense(21, "100"),
        expense(23, "200"),
        CycleTransaction(transaction_date=date(2025, 1, 30), amount=Decimal("500"), type="expense"),
    ]
    return build_pay_cycle_metrics(CYCLE, Decimal("700"), transactions, bills, today=TODAY)


class TestSafeToSpend:
    """Tests for the daily allowance."""

    def test_splits_discretionary_money(self):
        """Test balance after bills divided by days left."""
        assert calculate_safe_to_spend(Decimal("1000"), Decimal("400"), 10) == Decimal("60")

    def test_never_negative(self):
        """Test committed money above the balance gives zero."""
        assert calculate_safe_to_spend(Decimal("300"), Decimal("400"), 10) == Decimal("0")

    def test_no_days_left(self):
        """Test zero days gives zero."""
        assert calculate_safe_to_spend(Decimal("1000"), Decimal("0"), 0) == Decimal("0")


class TestProjection:
    """Tests for the end-of-cycle projection and runway."""

    def test_three_scenarios(self):
        """Test best, expected and worst end balances."""
        projection = calculate_projected_end_balance(
            Decimal("1000"), Decimal("200"), 5, 10, Decimal("100")
        )
        assert projection.best == Decimal("900")
        assert projection.expected == Decimal("500")
        assert projection.worst == Decimal("300")

    def test_no_days_passed(self):
        """Test no pace before the cycle has started."""
        projection = calculate_projected_end_balance(
            Decimal("1000"), Decimal("0"), 0, 10, Decimal("100")
        )
        assert projection.expected == Decimal("900")

    def test_runway_risk(self):
        """Test strictly below the threshold per day."""
        assert check_runway_risk(Decimal("50"), 10, Decimal("10")) is True
        assert check_runway_risk(Decimal("100"), 10, Decimal("10")) is False
        assert check_runway_risk(Decimal("50"), 0, Decimal("10")) is False

    def test_net_position(self):
        """Test income minus expenses."""
        assert calculate_net_position(Decimal("1000"), Decimal("400")) == Decimal("600")


class TestDailySpending:
    """Tests for the spending chart series."""

    def test_series(self):
        """Test even daily budget and cumulative actuals up to today."""
        transactions = [expense(21, "100"), expense(23, "200"), income(22, "50"), expense(27, "80")]
        series = build_daily_spending(CYCLE, transactions, Decimal("1000"), today=TODAY)

        assert len(series) == 10
        assert all(day.expected == Decimal("100") for day in series)
        assert series[1].actual == Decimal("100")
        assert series[4].cumulative == Decimal("300")
        assert series[7].actual == Decimal("0")
        assert series[-1].cumulative == Decimal("300")
        assert series[-1].expected_cumulative == Decimal("1000")


class TestPayCycleMetrics:
    """Tests for the full metrics build."""

    def test_day_counts(self, metrics):
        """Test today counts as passed and as remaining."""
        assert metrics.days_total == 10
        assert metrics.days_passed == 5
        assert metrics.days_remaining == 6

    def test_cycle_totals(self, metrics):
        """Test only in-cycle transactions count."""
        assert metrics.total_spent == Decimal("300")
        assert metrics.total_income == Decimal("1000")
        assert metrics.start_balance == Decimal("0")
        assert metrics.expected_spent_by_now == Decimal("500.00")
        assert metrics.is_over_pace is False

    def test_committed_bills(self, metrics):
        """Test only bills due from today to cycle end are committed."""
        assert metrics.committed_remaining == Decimal("400")
        assert metrics.discretionary_remaining == Decimal("300")
        assert metrics.safe_to_spend_per_day == Decimal("50.00")
        assert metrics.runway_risk is False

    def test_projection(self, metrics):
        """Test the projection and buffer."""
        assert metrics.projected_end_balance.best == Decimal("300")
        assert metrics.projected_end_balance.expected == Decimal("-60.00")
        assert metrics.projected_end_balance.worst == Decimal("-240.00")
        assert metrics.buffer_amount == Decimal("300")


class TestAlerts:
    """Tests for dashboard alerts."""

    def test_under_budget_deficit_and_bill(self, metrics, bills):
        """Test alert order and wording."""
        alerts = generate_alerts(metrics, bills, today=TODAY)

        assert [a.id for a in alerts] == ["under-budget", "negative-projection", "bill-Rent"]
        assert alerts[0].type == AlertType.SUCCESS
        assert alerts[0].message == "You're £200 below expected spend."
        assert alerts[1].message == "At current pace, you'll end the cycle £60 short."
        assert alerts[2].title == "Rent due tomorrow"
        assert alerts[2].message == "£400.00 payment coming up."

    def test_over_pace_and_runway(self):
        """Test overspending and a thin runway."""
        transactions = [income(20, "1000"), expense(21, "950")]
        metrics = build_pay_cycle_metrics(CYCLE, Decimal("50"), transactions, today=TODAY)
        alerts = generate_alerts(metrics, today=TODAY)

        assert [a.id for a in alerts] == ["over-pace", "runway-risk", "negative-projection"]
        assert alerts[0].title == "£450 over pace"
        assert alerts[0].action.description == "Cut £75/day for remaining 6 days"
        assert alerts[1].type == AlertType.DANGER

    def test_no_data(self, metrics):
        """Test only the connect prompt without account data."""
        no_data = metrics.model_copy(update={"has_data": False})
        alerts = generate_alerts(no_data, today=TODAY)
        assert [a.id for a in alerts] == ["no-data"]

    def test_large_bill_window(self, metrics):
        """Test today, two days out, and outside the window."""
        bills = [
            UpcomingBill(name="Council Tax", amount=Decimal("150"), due_date=TODAY),
            UpcomingBill(name="Energy", amount=Decimal("120"), due_date=date(2025, 1, 26)),
            UpcomingBill(name="Car", amount=Decimal("300"), due_date=date(2025, 1, 27)),
        ]
        titles = [a.title for a in generate_alerts(metrics, bills, today=TODAY) if a.id.startswith("bill-")]
        assert titles == ["Council Tax due today", "Energy due in 2 days"]


class TestFormatCurrency:
    """Tests for GBP formatting."""

    def test_thousands_separator(self):
        assert format_currency(Decimal("1234.56")) == "£1,234.56"

    def test_negative(self):
        assert format_currency(Decimal("-500")) == "-£500.00"

    def test_sign(self):
        assert format_currency(Decimal("100"), show_sign=True) == "+£100.00"
        assert format_currency(Decimal("0"), show_sign=True) == "£0.00"
