"""
Debt Calculations

Summary statistics, balance history and the month-by-month payoff
simulation behind the avalanche/snowball planner.

ASSUMPTIONS:
- Interest accrues monthly at APR / 12 on the opening balance of the month
- Minimum payments are made before any extra payment
- All budget left after minimums goes to ONE target debt per month
- Estimates in the summary ignore interest (rough guide only)
"""

import math
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

import structlog

from lifetracker.config import get_settings
from lifetracker.dates.working_days import clamped_date, month_key, shift_month
from lifetracker.models.debt import (
    BalancePoint,
    BalanceSnapshot,
    Debt,
    DebtAllocation,
    DebtPayment,
    DebtSummary,
    DebtType,
    MonthlyAllocation,
    MonthlyBreakdown,
    PaymentCategory,
    PayoffPlan,
    PayoffScheduleItem,
    PayoffStrategy,
    StrategyComparison,
)


logger = structlog.get_logger(__name__)

PENNY = Decimal("0.01")
AVERAGE_PAYMENT_WINDOW_DAYS = 90

DEBT_TYPE_LABELS = {
    DebtType.CREDIT_CARD: "Credit Card",
    DebtType.LOAN: "Loan",
    DebtType.OVERDRAFT: "Overdraft",
    DebtType.BNPL: "Buy Now Pay Later",
    DebtType.OTHER: "Other",
}


class PayoffSimulationError(ValueError):
    """Raised when a payoff simulation is asked to run on impossible input."""
    pass


def _pence(amount: Decimal) -> Decimal:
    return amount.quantize(PENNY, rounding=ROUND_HALF_UP)


def _add_months(d: date, months: int) -> date:
    year, month = shift_month(d.year, d.month, months)
    return clamped_date(year, month, d.day)


def _total_paid(payments: Iterable[DebtPayment]) -> Decimal:
    """Money actually paid: fees/adjustments excluded, refunds subtracted."""
    return sum(
        (p.signed_paid for p in payments if p.counts_as_paid),
        Decimal("0"),
    )


# =============================================================================
# PAYOFF SIMULATION
# =============================================================================

class _SimulatedDebt:
    """Mutable working copy of a Debt for the simulation loop."""

    def __init__(self, debt: Debt):
        self.debt = debt
        self.balance = debt.current_balance
        self.apr = debt.effective_apr
        self.min_payment = debt.min_payment
        self.paid_off = False
        self.payoff_month: Optional[date] = None
        self.total_interest = Decimal("0")
        self.allocations: dict[str, Decimal] = {}

    def pay(self, amount: Decimal, month: str) -> None:
        self.balance -= amount
        self.allocations[month] = self.allocations.get(month, Decimal("0")) + amount


def _strategy_order(simulated: list[_SimulatedDebt], strategy: PayoffStrategy) -> list[_SimulatedDebt]:
    if strategy == PayoffStrategy.AVALANCHE:
        return sorted(simulated, key=lambda d: d.apr, reverse=True)
    return sorted(simulated, key=lambda d: d.balance)


def generate_payoff_plan(
    debts: Iterable[Debt],
    monthly_budget: Decimal,
    strategy: Optional[PayoffStrategy] = None,
    start_month: Optional[date] = None,
) -> PayoffPlan:
    """
    Simulate paying off all open debts with a fixed monthly budget.

    Each month:
    1. Interest is added to every unpaid debt
    2. Each debt gets min(minimum payment, balance, budget left), in strategy order
    3. Whatever is left goes to the first unpaid debt in strategy order

    A debt at or below the paid-off threshold is cleared that month.
    The debt-free date is None if the horizon ends with debts remaining.

    Raises:
        PayoffSimulationError: negative budget
    """
    settings = get_settings().debt
    strategy = strategy or PayoffStrategy(settings.default_strategy)
    monthly_budget = Decimal(str(monthly_budget))

    if monthly_budget < 0:
        raise PayoffSimulationError(f"Monthly budget cannot be negative: {monthly_budget}")

    open_debts = [d for d in debts if d.is_open]
    if not open_debts or monthly_budget == 0:
        return PayoffPlan(strategy=strategy, monthly_budget=monthly_budget)

    simulated = [_SimulatedDebt(d) for d in open_debts]
    ordered = _strategy_order(simulated, strategy)

    first_month = (start_month or date.today()).replace(day=1)
    threshold = settings.paid_off_threshold
    total_interest = Decimal("0")
    breakdown = []

    # Nothing left to pay counts as cleared in the first month
    for debt in simulated:
        if debt.balance <= threshold:
            debt.balance = Decimal("0")
            debt.paid_off = True
            debt.payoff_month = first_month

    for month_index in range(settings.max_projection_months):
        if all(d.paid_off for d in ordered):
            break

        current_month = _add_months(first_month, month_index)
        label = month_key(current_month)
        remaining = monthly_budget
        paid_this_month: dict[str, Decimal] = {}

        def settle(debt: _SimulatedDebt, amount: Decimal) -> None:
            debt.pay(amount, label)
            paid_this_month[debt.debt.id] = paid_this_month.get(debt.debt.id, Decimal("0")) + amount
            if debt.balance <= threshold:
                debt.balance = Decimal("0")
                debt.paid_off = True
                debt.payoff_month = current_month

        for debt in ordered:
            if debt.paid_off:
                continue
            interest = debt.balance * debt.apr / 100 / 12
            debt.balance += interest
            debt.total_interest += interest
            total_interest += interest

        for debt in ordered:
            if debt.paid_off:
                continue
            payment = min(debt.min_payment, debt.balance, remaining)
            if payment > 0:
                remaining -= payment
                settle(debt, payment)

        target = next((d for d in ordered if not d.paid_off), None)
        if target is not None and remaining > 0:
            extra = min(remaining, target.balance)
            if extra > 0:
                remaining -= extra
                settle(target, extra)

        breakdown.append(MonthlyBreakdown(
            month=label,
            allocations=[
                DebtAllocation(debt_id=debt_id, amount=_pence(amount))
                for debt_id, amount in paid_this_month.items()
            ],
        ))

    all_paid = all(d.paid_off for d in simulated)
    debt_free_date = max(d.payoff_month for d in simulated) if all_paid else None
    months_to_debt_free = None
    if debt_free_date is not None:
        months_to_debt_free = (
            (debt_free_date.year - first_month.year) * 12
            + debt_free_date.month - first_month.month + 1
        )

    schedule = [
        PayoffScheduleItem(
            debt_id=d.debt.id,
            creditor_name=d.debt.creditor_name,
            current_balance=d.debt.current_balance,
            apr=d.debt.apr,
            min_payment=d.min_payment,
            payoff_month=d.payoff_month,
            total_interest=_pence(d.total_interest),
            monthly_allocations=[
                MonthlyAllocation(month=month, amount=_pence(amount))
                for month, amount in d.allocations.items()
            ],
        )
        for d in simulated
    ]

    logger.debug(
        "payoff_plan_generated",
        strategy=strategy.value,
        debts=len(simulated),
        months=len(breakdown),
        debt_free=str(debt_free_date) if debt_free_date else None,
    )

    return PayoffPlan(
        strategy=strategy,
        monthly_budget=monthly_budget,
        debt_free_date=debt_free_date,
        total_interest_paid=_pence(total_interest),
        months_to_debt_free=months_to_debt_free,
        schedule=schedule,
        monthly_breakdown=breakdown,
    )


def compare_strategies(
    debts: list[Debt],
    monthly_budget: Decimal,
    start_month: Optional[date] = None,
) -> StrategyComparison:
    """Interest under avalanche vs snowball; `saved` is what avalanche saves."""
    avalanche = generate_payoff_plan(debts, monthly_budget, PayoffStrategy.AVALANCHE, start_month)
    snowball = generate_payoff_plan(debts, monthly_budget, PayoffStrategy.SNOWBALL, start_month)
    return StrategyComparison(
        avalanche_interest=avalanche.total_interest_paid,
        snowball_interest=snowball.total_interest_paid,
        saved=snowball.total_interest_paid - avalanche.total_interest_paid,
    )


# =============================================================================
# SUMMARY AND HISTORY
# =============================================================================

def average_monthly_payment(
    payments: Iterable[DebtPayment],
    today: Optional[date] = None,
) -> Decimal:
    """Money paid over the last 90 days, divided by three."""
    today = today or date.today()
    cutoff = today - timedelta(days=AVERAGE_PAYMENT_WINDOW_DAYS)
    recent = [p for p in payments if p.payment_date >= cutoff]
    return _total_paid(recent) / 3


def calculate_debt_summary(
    debts: Iterable[Debt],
    payments: list[DebtPayment],
    monthly_budget: Optional[Decimal] = None,
    today: Optional[date] = None,
) -> DebtSummary:
    """Headline figures for the debt dashboard (open debts only)."""
    today = today or date.today()
    open_debts = [d for d in debts if d.is_open]

    total_balance = sum((d.current_balance for d in open_debts), Decimal("0"))
    total_starting = sum((d.starting_balance for d in open_debts), Decimal("0"))
    total_min = sum((d.min_payment for d in open_debts), Decimal("0"))

    next_due_date = None
    next_due_debt_id = None
    for debt in open_debts:
        if not debt.due_day:
            continue
        due = clamped_date(today.year, today.month, debt.due_day)
        if due <= today:
            year, month = shift_month(today.year, today.month, 1)
            due = clamped_date(year, month, debt.due_day)
        if next_due_date is None or due < next_due_date:
            next_due_date = due
            next_due_debt_id = debt.id

    monthly_interest = sum((d.monthly_interest for d in open_debts), Decimal("0"))

    progress = 0.0
    if total_starting > 0:
        progress = float((total_starting - total_balance) / total_starting * 100)

    debt_free_date = None
    if total_balance > 0:
        effective_payment = monthly_budget or average_monthly_payment(payments, today)
        if effective_payment > 0:
            months = math.ceil(total_balance / effective_payment)
            debt_free_date = _add_months(today, months)

    return DebtSummary(
        total_balance=total_balance,
        total_min_payments=total_min,
        next_due_date=next_due_date,
        next_due_debt_id=next_due_debt_id,
        estimated_monthly_interest=_pence(monthly_interest),
        estimated_debt_free_date=debt_free_date,
        total_starting_balance=total_starting,
        total_paid=_total_paid(payments),
        overall_progress=progress,
    )


def debt_progress(debt: Debt) -> float:
    """Percent of the starting balance repaid (0-100)."""
    if debt.starting_balance <= 0 or debt.current_balance <= 0:
        return 100.0
    if debt.current_balance >= debt.starting_balance:
        return 0.0
    return float((debt.starting_balance - debt.current_balance) / debt.starting_balance * 100)


def payments_by_month(payments: Iterable[DebtPayment]) -> dict[str, Decimal]:
    """Net payments per 'YYYY-MM'; fees skipped, refunds negative."""
    by_month: dict[str, Decimal] = {}
    for payment in payments:
        if payment.category == PaymentCategory.FEE:
            continue
        key = month_key(payment.payment_date)
        by_month[key] = by_month.get(key, Decimal("0")) + payment.signed_paid
    return by_month


def balance_history(
    debt: Debt,
    payments: Iterable[DebtPayment],
    snapshots: Iterable[BalanceSnapshot],
    today: Optional[date] = None,
    months: int = 12,
) -> list[BalancePoint]:
    """
    Month-end balances from the opening month (or `months` ago) to today.

    A statement snapshot inside a month replaces the arithmetic for it.
    Otherwise fees, adjustments and refunds add to the balance and
    other payments reduce it.
    """
    today = today or date.today()
    debt_snapshots = sorted(
        (s for s in snapshots if s.debt_id == debt.id),
        key=lambda s: s.snapshot_date,
    )
    debt_payments = sorted(
        (p for p in payments if p.debt_id == debt.id),
        key=lambda p: p.payment_date,
    )

    start = debt.opened_date or _add_months(today, -months)
    current = start.replace(day=1)
    balance = debt.starting_balance
    history = []

    while current <= today:
        label = month_key(current)
        snapshot = next(
            (s for s in debt_snapshots if month_key(s.snapshot_date) == label),
            None,
        )

        if snapshot is not None:
            balance = snapshot.balance
        else:
            for payment in debt_payments:
                if month_key(payment.payment_date) != label:
                    continue
                if payment.category in (
                    PaymentCategory.FEE,
                    PaymentCategory.ADJUSTMENT,
                    PaymentCategory.REFUND,
                ):
                    balance += payment.amount
                else:
                    balance -= payment.amount

        history.append(BalancePoint(month=label, balance=max(Decimal("0"), balance)))
        year, month = shift_month(current.year, current.month, 1)
        current = date(year, month, 1)

    return history


def debt_type_label(debt_type: DebtType) -> str:
    return DEBT_TYPE_LABELS.get(debt_type, str(debt_type))


def payment_category_label(category: PaymentCategory) -> str:
    return category.value.capitalize()
