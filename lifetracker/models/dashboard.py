"""Pay-cycle dashboard models."""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class AlertType(str, Enum):
    DANGER = "danger"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"


class AlertAction(BaseModel):
    label: str
    description: str


class Alert(BaseModel):
    id: str
    type: AlertType
    title: str
    message: str
    action: Optional[AlertAction] = None


class BalanceProjection(BaseModel):
    best: Decimal
    expected: Decimal
    worst: Decimal


class DailySpending(BaseModel):
    spend_date: date
    actual: Decimal
    expected: Decimal
    cumulative: Decimal
    expected_cumulative: Decimal


class CycleTransaction(BaseModel):
    """The slice of a bank transaction the dashboard needs."""

    transaction_date: date
    amount: Decimal = Field(..., description="Positive magnitude")
    type: str = Field(..., pattern="^(expense|income|transfer)$")


class UpcomingBill(BaseModel):
    name: str
    amount: Decimal
    due_date: date


class PayCycleMetrics(BaseModel):
    cycle_start: date
    cycle_end: date
    days_total: int
    days_remaining: int
    days_passed: int

    start_balance: Decimal
    current_balance: Decimal
    projected_end_balance: BalanceProjection

    total_spent: Decimal
    total_income: Decimal
    expected_spent_by_now: Decimal
    safe_to_spend_per_day: Decimal

    committed_remaining: Decimal
    discretionary_remaining: Decimal
    buffer_amount: Decimal = Decimal("0")

    is_over_pace: bool
    runway_risk: bool
    has_data: bool

    daily_spending: list[DailySpending] = Field(default_factory=list)
