"""
Pay-Cycle Dashboard Metrics

Where the household stands part-way through a pay cycle: how much is
safe to spend each day, where the balance is heading, and which
alerts to raise.

Day counts here include today, so on the last day of a cycle there
is still one day to spend.
"""

import math
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

import structlog

from lifetracker.config import get_settings
from lifetracker.models.dashboard import (
    Alert,
    AlertAction,
    AlertType,
    BalanceProjection,
    CycleTransaction,
    DailySpending,
    PayCycleMetrics,
    UpcomingBill,
)
from lifetracker.models.pay_cycle import PayCycle


logger = structlog.get_logger(__name__)

PENNY = Decimal("0.01")
WORST_CASE_PACE = Decimal("1.5")

# Under-budget praise needs a few days of data first
UNDER_BUDGET_MARGIN = Decimal("30")
UNDER_BUDGET_MIN_DAYS = 5


def _pence(amount: Decimal) -> Decimal:
    return amount.quantize(PENNY, rounding=ROUND_HALF_UP)


def _whole(amount: Decimal) -> Decimal:
    return amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def format_currency(amount: Decimal, show_sign: bool = False) -> str:
    """
    GBP with thousands separators: "£1,234.56", "-£500.00".

    With show_sign, positive amounts get a "+"; zero never has a sign.
    """
    symbol = get_settings().app.currency_symbol
    formatted = f"{symbol}{abs(_pence(Decimal(amount))):,.2f}"
    if amount < 0:
        return f"-{formatted}"
    if show_sign and amount > 0:
        return f"+{formatted}"
    return formatted


def calculate_safe_to_spend(
    current_balance: Decimal,
    committed_remaining: Decimal,
    days_remaining: int,
) -> Decimal:
    """What can go on discretionary spending per day without touching bill money."""
    if days_remaining <= 0:
        return Decimal("0")
    discretionary = current_balance - committed_remaining
    return max(Decimal("0"), discretionary / days_remaining)


def calculate_projected_end_balance(
    current_balance: Decimal,
    spent_so_far: Decimal,
    days_passed: int,
    days_remaining: int,
    committed_remaining: Decimal,
) -> BalanceProjection:
    """
    End-of-cycle balance three ways.

    best: only committed bills go out from here.
    expected: spending continues at the pace so far.
    worst: spending runs at one and a half times that pace.
    """
    after_bills = current_balance - committed_remaining
    daily_pace = spent_so_far / days_passed if days_passed > 0 else Decimal("0")
    further_spend = daily_pace * days_remaining

    return BalanceProjection(
        best=max(Decimal("0"), after_bills),
        expected=_pence(after_bills - further_spend),
        worst=_pence(after_bills - further_spend * WORST_CASE_PACE),
    )


def calculate_net_position(income: Decimal, expenses: Decimal) -> Decimal:
    return income - expenses


def check_runway_risk(
    discretionary_remaining: Decimal,
    days_remaining: int,
    threshold: Optional[Decimal] = None,
) -> bool:
    """True when discretionary money per remaining day is under the threshold."""
    if days_remaining <= 0:
        return False
    if threshold is None:
        threshold = get_settings().dashboard.runway_threshold_per_day
    return discretionary_remaining / days_remaining < threshold


def build_daily_spending(
    cycle: PayCycle,
    transactions: Iterable[CycleTransaction],
    total_budget: Decimal,
    today: Optional[date] = None,
) -> list[DailySpending]:
    """
    One entry per cycle day: actual spend against an even daily budget.

    Days after today carry the cumulative actual forward with no spend.
    """
    today = today or date.today()
    daily_budget = total_budget / cycle.days_total

    spend_by_date: dict[date, Decimal] = {}
    for txn in transactions:
        if txn.type == "expense":
            spend_by_date[txn.transaction_date] = (
                spend_by_date.get(txn.transaction_date, Decimal("0")) + txn.amount
            )

    series = []
    cumulative = Decimal("0")
    for day_number, day in enumerate(cycle.days(), start=1):
        actual = spend_by_date.get(day, Decimal("0")) if day <= today else Decimal("0")
        cumulative += actual
        series.append(DailySpending(
            spend_date=day,
            actual=actual,
            expected=daily_budget,
            cumulative=cumulative,
            expected_cumulative=daily_budget * day_number,
        ))
    return series


def _days_left_including_today(cycle: PayCycle, today: date) -> int:
    if today > cycle.end:
        return 0
    return min(cycle.days_total, (cycle.end - today).days + 1)


def build_pay_cycle_metrics(
    cycle: PayCycle,
    current_balance: Decimal,
    transactions: list[CycleTransaction],
    upcoming_bills: Iterable[UpcomingBill] = (),
    today: Optional[date] = None,
    has_data: bool = True,
) -> PayCycleMetrics:
    """
    Everything the dashboard shows for one cycle.

    Pace is measured against the cycle's income, or against the opening
    balance when no income has landed yet. Bills still due between
    today and the end of the cycle are committed money.
    """
    today = today or date.today()
    settings = get_settings().dashboard

    days_total = cycle.days_total
    days_passed = cycle.days_passed(today)
    days_remaining = _days_left_including_today(cycle, today)

    in_cycle = [t for t in transactions if cycle.contains(t.transaction_date)]
    total_spent = sum((t.amount for t in in_cycle if t.type == "expense"), Decimal("0"))
    total_income = sum((t.amount for t in in_cycle if t.type == "income"), Decimal("0"))
    start_balance = current_balance + total_spent - total_income

    committed = sum(
        (b.amount for b in upcoming_bills if today <= b.due_date <= cycle.end),
        Decimal("0"),
    )
    discretionary = current_balance - committed

    budget = total_income if total_income > 0 else start_balance
    expected_spent = budget / days_total * days_passed

    projection = calculate_projected_end_balance(
        current_balance, total_spent, days_passed, days_remaining, committed
    )

    metrics = PayCycleMetrics(
        cycle_start=cycle.start,
        cycle_end=cycle.end,
        days_total=days_total,
        days_remaining=days_remaining,
        days_passed=days_passed,
        start_balance=start_balance,
        current_balance=current_balance,
        projected_end_balance=projection,
        total_spent=total_spent,
        total_income=total_income,
        expected_spent_by_now=_pence(expected_spent),
        safe_to_spend_per_day=_pence(
            calculate_safe_to_spend(current_balance, committed, days_remaining)
        ),
        committed_remaining=committed,
        discretionary_remaining=discretionary,
        buffer_amount=projection.best,
        is_over_pace=total_spent > expected_spent + settings.over_pace_alert_amount,
        runway_risk=check_runway_risk(
            discretionary, days_remaining, settings.runway_threshold_per_day
        ),
        has_data=has_data,
        daily_spending=build_daily_spending(cycle, in_cycle, budget, today),
    )

    logger.debug(
        "pay_cycle_metrics_built",
        cycle_start=cycle.start.isoformat(),
        days_remaining=days_remaining,
        over_pace=metrics.is_over_pace,
        runway_risk=metrics.runway_risk,
    )
    return metrics


def _due_phrase(days_until: int) -> str:
    if days_until == 0:
        return "today"
    if days_until == 1:
        return "tomorrow"
    return f"in {days_until} days"


def generate_alerts(
    metrics: PayCycleMetrics,
    upcoming_bills: Iterable[UpcomingBill] = (),
    today: Optional[date] = None,
) -> list[Alert]:
    """Alerts in display order; with no account data only the prompt to connect one."""
    today = today or date.today()
    settings = get_settings().dashboard

    if not metrics.has_data:
        return [Alert(
            id="no-data",
            type=AlertType.INFO,
            title="Connect an account",
            message="Link a bank account to see your spending insights.",
            action=AlertAction(label="Add Account", description="Go to Accounts page to connect"),
        )]

    alerts = []
    safe_daily = _whole(metrics.safe_to_spend_per_day)
    pace_variance = metrics.total_spent - metrics.expected_spent_by_now

    if pace_variance > settings.over_pace_alert_amount:
        if metrics.days_remaining > 0:
            daily_cut = math.ceil(pace_variance / metrics.days_remaining)
        else:
            daily_cut = pace_variance
        alerts.append(Alert(
            id="over-pace",
            type=AlertType.WARNING,
            title=f"£{_whole(pace_variance)} over pace",
            message=f"Reduce daily spend to £{safe_daily}/day to finish on target.",
            action=AlertAction(
                label="Review spending",
                description=f"Cut £{daily_cut}/day for remaining {metrics.days_remaining} days",
            ),
        ))

    if pace_variance < -UNDER_BUDGET_MARGIN and metrics.days_passed >= UNDER_BUDGET_MIN_DAYS:
        alerts.append(Alert(
            id="under-budget",
            type=AlertType.SUCCESS,
            title="On track!",
            message=f"You're £{_whole(abs(pace_variance))} below expected spend.",
        ))

    if metrics.runway_risk and metrics.days_remaining > 0:
        alerts.append(Alert(
            id="runway-risk",
            type=AlertType.DANGER,
            title="Low runway",
            message=(
                f"After bills, you'll have £{_whole(metrics.discretionary_remaining)} "
                f"for {metrics.days_remaining} days (£{safe_daily}/day)."
            ),
            action=AlertAction(
                label="Reduce spending",
                description="Delay non-essential purchases until next payday",
            ),
        ))

    if metrics.projected_end_balance.expected < 0:
        alerts.append(Alert(
            id="negative-projection",
            type=AlertType.DANGER,
            title="Projected deficit",
            message=(
                "At current pace, you'll end the cycle "
                f"£{_whole(abs(metrics.projected_end_balance.expected))} short."
            ),
            action=AlertAction(
                label="Reduce spending",
                description=f"Target £{safe_daily}/day maximum",
            ),
        ))

    window_end = today + timedelta(days=settings.large_bill_window_days)
    for bill in upcoming_bills:
        if bill.amount < settings.large_bill_amount:
            continue
        if not today <= bill.due_date < window_end:
            continue
        alerts.append(Alert(
            id=f"bill-{bill.name}",
            type=AlertType.INFO,
            title=f"{bill.name} due {_due_phrase((bill.due_date - today).days)}",
            message=f"£{_pence(bill.amount)} payment coming up.",
        ))

    return alerts
