"""
Debt Models for Life Tracker

Debts, the payments made against them, statement snapshots and the
payoff plans we simulate from them.

DESIGN DECISION: A payoff plan is a projection, not a ledger.
It never mutates the Debt records it was built from.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# ENUMS
# =============================================================================

class DebtType(str, Enum):
    CREDIT_CARD = "credit_card"
    LOAN = "loan"
    OVERDRAFT = "overdraft"
    BNPL = "bnpl"
    OTHER = "other"


class DebtStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class InterestType(str, Enum):
    """How (or whether) a debt accrues interest."""
    COMPOUND = "compound"
    SIMPLE = "simple"
    NONE = "none"  # 0% deals, debt management plans


class PaymentCategory(str, Enum):
    """
    What a recorded payment represents.

    FEE and ADJUSTMENT increase the balance; REFUND is money
    coming back and is subtracted from the total paid.
    """
    NORMAL = "normal"
    EXTRA = "extra"
    FEE = "fee"
    REFUND = "refund"
    ADJUSTMENT = "adjustment"


class PayoffStrategy(str, Enum):
    """
    Ordering for extra payments.

    AVALANCHE: highest APR first (least interest overall)
    SNOWBALL: lowest balance first (quickest wins)
    """
    AVALANCHE = "avalanche"
    SNOWBALL = "snowball"


# =============================================================================
# RECORDS
# =============================================================================

class Debt(BaseModel):
    """A single debt account."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    creditor_name: str = Field(..., min_length=1, max_length=200)
    debt_type: DebtType = DebtType.CREDIT_CARD
    status: DebtStatus = DebtStatus.OPEN
    starting_balance: Decimal = Field(..., ge=0)
    current_balance: Decimal = Field(..., ge=0)
    apr: Optional[Decimal] = Field(
        default=None,
        ge=0,
        le=1000,
        description="Annual percentage rate, e.g. 24.9"
    )
    interest_type: InterestType = InterestType.COMPOUND
    min_payment: Decimal = Field(default=Decimal("0"), ge=0)
    due_day: Optional[int] = Field(default=None, ge=1, le=31)
    opened_date: Optional[date] = None

    @property
    def is_open(self) -> bool:
        return self.status == DebtStatus.OPEN

    @property
    def effective_apr(self) -> Decimal:
        """APR used for interest; zero when the debt does not accrue."""
        if self.apr is None or self.interest_type == InterestType.NONE:
            return Decimal("0")
        return self.apr

    @property
    def monthly_interest(self) -> Decimal:
        return self.current_balance * self.effective_apr / Decimal("100") / Decimal("12")


class DebtPayment(BaseModel):
    """A payment (or fee/refund/adjustment) recorded against a debt."""

    id: Optional[str] = None
    debt_id: str
    amount: Decimal = Field(..., ge=0)
    payment_date: date
    category: PaymentCategory = PaymentCategory.NORMAL
    principal_amount: Optional[Decimal] = Field(default=None, ge=0)
    interest_amount: Optional[Decimal] = Field(default=None, ge=0)
    fee_amount: Optional[Decimal] = Field(default=None, ge=0)
    notes: Optional[str] = None

    @property
    def counts_as_paid(self) -> bool:
        """Fees and adjustments are not money the user paid."""
        return self.category not in (PaymentCategory.FEE, PaymentCategory.ADJUSTMENT)

    @property
    def signed_paid(self) -> Decimal:
        """Contribution to 'total paid': refunds count against it."""
        if self.category == PaymentCategory.REFUND:
            return -self.amount
        return self.amount


class DebtTransaction(BaseModel):
    """A statement line imported from a creditor or bank CSV export."""
    model_config = ConfigDict(str_strip_whitespace=True)

    transaction_date: date
    amount: Decimal = Field(..., ge=0, description="Always stored unsigned")
    description: str = Field(..., min_length=1)
    reference: Optional[str] = None
    account_name: Optional[str] = None


class CsvColumnMapping(BaseModel):
    """Which header names hold each field; compared case-insensitively."""

    date_column: str = Field(..., min_length=1)
    amount_column: str = Field(..., min_length=1)
    description_column: str = Field(..., min_length=1)
    reference_column: Optional[str] = None
    account_column: Optional[str] = None


class CsvParseResult(BaseModel):
    """
    Rows that parsed, plus what went wrong.

    Errors stop the whole import; warnings name rows that were skipped.
    """
    success: bool
    transactions: list[DebtTransaction] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class BalanceSnapshot(BaseModel):
    """A statement balance; overrides computed balances for its month."""

    debt_id: str
    snapshot_date: date
    balance: Decimal


# =============================================================================
# PLANNING OUTPUT
# =============================================================================

class MonthlyAllocation(BaseModel):
    month: str = Field(..., pattern=r"^\d{4}-\d{2}$")
    amount: Decimal


class DebtAllocation(BaseModel):
    debt_id: str
    amount: Decimal


class MonthlyBreakdown(BaseModel):
    month: str = Field(..., pattern=r"^\d{4}-\d{2}$")
    allocations: list[DebtAllocation] = Field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum((a.amount for a in self.allocations), Decimal("0"))


class PayoffScheduleItem(BaseModel):
    debt_id: str
    creditor_name: str
    current_balance: Decimal
    apr: Optional[Decimal] = None
    min_payment: Decimal
    payoff_month: Optional[date] = Field(
        default=None,
        description="First day of the month the debt is cleared"
    )
    total_interest: Decimal = Decimal("0")
    monthly_allocations: list[MonthlyAllocation] = Field(default_factory=list)


class PayoffPlan(BaseModel):
    """Result of a month-by-month payoff simulation."""

    strategy: PayoffStrategy
    monthly_budget: Decimal
    debt_free_date: Optional[date] = Field(
        default=None,
        description="Month the last debt clears; None if never within the horizon"
    )
    total_interest_paid: Decimal = Decimal("0")
    months_to_debt_free: Optional[int] = None
    schedule: list[PayoffScheduleItem] = Field(default_factory=list)
    monthly_breakdown: list[MonthlyBreakdown] = Field(default_factory=list)

    @property
    def is_achievable(self) -> bool:
        return self.debt_free_date is not None


class StrategyComparison(BaseModel):
    avalanche_interest: Decimal
    snowball_interest: Decimal
    saved: Decimal = Field(
        ...,
        description="Interest avalanche saves over snowball (may be negative)"
    )


class DebtSummary(BaseModel):
    total_balance: Decimal
    total_min_payments: Decimal
    next_due_date: Optional[date] = None
    next_due_debt_id: Optional[str] = None
    estimated_monthly_interest: Decimal
    estimated_debt_free_date: Optional[date] = None
    total_starting_balance: Decimal
    total_paid: Decimal
    overall_progress: float = Field(..., description="Percent of starting balance repaid")


class BalancePoint(BaseModel):
    month: str = Field(..., pattern=r"^\d{4}-\d{2}$")
    balance: Decimal

    @model_validator(mode='after')
    def validate_non_negative(self) -> 'BalancePoint':
        if self.balance < 0:
            raise ValueError("Historic balance cannot be negative")
        return self


class DebtPlanReport(BaseModel):
    """A payoff plan together with the comparison shown beside it."""

    plan: PayoffPlan
    comparison: StrategyComparison
    warnings: list[str] = Field(default_factory=list)
