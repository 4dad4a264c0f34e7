"""
Investment Calculations

Daily valuations, contribution totals and future projections for a
single holding. Growth compounds daily for history and monthly for
projections; manual valuations always win over estimates.
"""

from datetime import date, timedelta
from typing import Iterable, Optional

import structlog

from lifetracker.dates.working_days import clamped_date, shift_month
from lifetracker.models.investment import (
    DailyChange,
    DailyValue,
    InvestmentTransaction,
    InvestmentTransactionType,
    InvestmentValuation,
    ProjectionPoint,
    ProjectionScenarios,
    ValuationSource,
)


logger = structlog.get_logger(__name__)

# Annual return (%) per risk appetite
RISK_PRESETS = {
    "conservative": 5.0,
    "medium": 8.0,
    "aggressive": 12.0,
}

# Percentage points either side of the expected return
CONSERVATIVE_OFFSET = -3.0
AGGRESSIVE_OFFSET = 4.0

_INFLOWS = {InvestmentTransactionType.DEPOSIT, InvestmentTransactionType.DIVIDEND}
_OUTFLOWS = {InvestmentTransactionType.WITHDRAWAL, InvestmentTransactionType.FEE}


def daily_rate(annual_return: float) -> float:
    """Daily compounding rate equivalent to an annual percentage return."""
    return (1 + annual_return / 100) ** (1 / 365) - 1


def monthly_rate(annual_return: float) -> float:
    return (1 + annual_return / 100) ** (1 / 12) - 1


def contribution_total(transactions: Iterable[InvestmentTransaction]) -> float:
    """Deposits and dividends in, withdrawals and fees out."""
    total = 0.0
    for txn in transactions:
        amount = abs(txn.amount)
        if txn.type in _INFLOWS:
            total += amount
        elif txn.type in _OUTFLOWS:
            total -= amount
    return total


def net_deposits(transactions: Iterable[InvestmentTransaction]) -> float:
    """Deposits minus withdrawals; fees and dividends are ignored."""
    total = 0.0
    for txn in transactions:
        if txn.type == InvestmentTransactionType.DEPOSIT:
            total += abs(txn.amount)
        elif txn.type == InvestmentTransactionType.WITHDRAWAL:
            total -= abs(txn.amount)
    return total


def daily_values(
    transactions: Iterable[InvestmentTransaction],
    valuations: Iterable[InvestmentValuation],
    start: date,
    end: date,
    expected_annual_return: float,
) -> list[DailyValue]:
    """
    Estimated value for each day from start to end inclusive.

    Each day applies that day's transactions, then a day's growth on a
    positive balance. A manual valuation on a day replaces the estimate
    and becomes the base for later days.

    Contributions count deposits and dividends in and withdrawals out;
    fees reduce value but not contributions, so they show as lost growth.
    """
    rate = daily_rate(expected_annual_return)
    by_date: dict[date, list[InvestmentTransaction]] = {}
    for txn in sorted(transactions, key=lambda t: t.transaction_date):
        by_date.setdefault(txn.transaction_date, []).append(txn)
    manual = {v.valuation_date: v.value for v in valuations}

    values = []
    current = 0.0
    contributions = 0.0
    day = start

    while day <= end:
        for txn in by_date.get(day, []):
            amount = abs(txn.amount)
            if txn.type in _INFLOWS:
                current += amount
                contributions += amount
            elif txn.type in _OUTFLOWS:
                current -= amount
                if txn.type == InvestmentTransactionType.WITHDRAWAL:
                    contributions -= amount

        if current > 0:
            current *= 1 + rate

        if day in manual:
            current = manual[day]
            source = ValuationSource.MANUAL
        else:
            source = ValuationSource.ESTIMATED

        values.append(DailyValue(
            value_date=day,
            value=max(0.0, current),
            source=source,
            contributions=contributions,
            growth=current - contributions,
        ))
        day += timedelta(days=1)

    logger.debug("daily_values_calculated", days=len(values), manual_points=len(manual))
    return values


def project_value(
    current_value: float,
    monthly_contribution: float,
    expected_annual_return: float,
    months: int,
) -> float:
    """Contribution at the start of each month, then a month's growth."""
    rate = monthly_rate(expected_annual_return)
    value = current_value
    for _ in range(months):
        value = (value + monthly_contribution) * (1 + rate)
    return value


def projection_scenarios(
    current_value: float,
    monthly_contribution: float,
    expected_annual_return: float,
    months: int,
) -> ProjectionScenarios:
    return ProjectionScenarios(
        expected=project_value(current_value, monthly_contribution, expected_annual_return, months),
        conservative=project_value(
            current_value, monthly_contribution, expected_annual_return + CONSERVATIVE_OFFSET, months
        ),
        aggressive=project_value(
            current_value, monthly_contribution, expected_annual_return + AGGRESSIVE_OFFSET, months
        ),
    )


def projection_series(
    current_value: float,
    monthly_contribution: float,
    expected_annual_return: float,
    months_ahead: int,
    today: Optional[date] = None,
) -> list[ProjectionPoint]:
    """One point per month from today (month 0) to months_ahead, to the penny."""
    today = today or date.today()
    rate = monthly_rate(expected_annual_return)

    points = []
    value = current_value
    for i in range(months_ahead + 1):
        if i > 0:
            value = (value + monthly_contribution) * (1 + rate)
        year, month = shift_month(today.year, today.month, i)
        points.append(ProjectionPoint(
            point_date=clamped_date(year, month, today.day),
            value=round(value, 2),
        ))
    return points


def return_percentage(current_value: float, total_contributions: float) -> float:
    if total_contributions <= 0:
        return 0.0
    return (current_value - total_contributions) / total_contributions * 100


def daily_change(current_value: float, expected_annual_return: float) -> DailyChange:
    """Yesterday-to-today movement assuming constant daily growth."""
    rate = daily_rate(expected_annual_return)
    previous = current_value / (1 + rate)
    return DailyChange(amount=current_value - previous, percentage=rate * 100)
