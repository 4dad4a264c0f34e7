"""
Bill Models for Life Tracker

These models define the schemas for recurring bills, the calendar
occurrences generated from them and the bank transactions they are
matched against.

DESIGN DECISION: Occurrences are never stored for all future months.
They are computed on the fly from the Bill rule; only user decisions
(paid, skipped, manual links) are persisted, as StoredOccurrence.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


# =============================================================================
# ENUMS
# =============================================================================

class BillFrequency(str, Enum):
    """How often a bill recurs."""
    WEEKLY = "weekly"
    FORTNIGHTLY = "fortnightly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    BIANNUAL = "biannual"
    YEARLY = "yearly"

    @property
    def months_between(self) -> Optional[int]:
        """Month step for calendar-month frequencies, None for week-based ones."""
        return {
            BillFrequency.MONTHLY: 1,
            BillFrequency.QUARTERLY: 3,
            BillFrequency.BIANNUAL: 6,
            BillFrequency.YEARLY: 12,
        }.get(self)

    @property
    def days_between(self) -> Optional[int]:
        """Day step for week-based frequencies, None for month-based ones."""
        return {
            BillFrequency.WEEKLY: 7,
            BillFrequency.FORTNIGHTLY: 14,
        }.get(self)


class OccurrenceStatus(str, Enum):
    """
    Lifecycle of a single bill occurrence.

    DUE is the computed default; OVERDUE is derived from the date;
    PAID and SKIPPED only come from a user action or an auto-match.
    """
    DUE = "due"
    PAID = "paid"
    OVERDUE = "overdue"
    SKIPPED = "skipped"


class MatchConfidence(str, Enum):
    """How sure we are that a transaction paid an occurrence."""
    HIGH = "high"        # Auto-applied
    MEDIUM = "medium"    # Offered for review
    LOW = "low"          # Never surfaced
    MANUAL = "manual"    # Linked by the user


# =============================================================================
# CORE BILL MODEL
# =============================================================================

class Bill(BaseModel):
    """
    A recurring bill rule.

    For month-based frequencies `due_day` is the day of the month
    (clamped to the month length). For week-based frequencies the
    schedule is anchored on `start_date` instead.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Display name, e.g. 'Netflix'"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        decimal_places=2,
        description="Expected amount per occurrence in GBP"
    )
    due_day: int = Field(
        ...,
        ge=1,
        le=31,
        description="Day of month the bill is due"
    )
    frequency: BillFrequency = BillFrequency.MONTHLY
    is_active: bool = True
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    provider: Optional[str] = Field(
        default=None,
        max_length=200,
        description="Company name as it appears on statements"
    )
    account_id: Optional[str] = Field(
        default=None,
        description="Account the bill is normally paid from"
    )
    category_id: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=1000)

    @model_validator(mode='after')
    def validate_dates(self) -> 'Bill':
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("Bill end date cannot be before start date")
        return self


class BillOccurrence(BaseModel):
    """A generated calendar instance of a recurring bill."""

    id: str = Field(
        ...,
        description="'<bill_id>-<YYYY-MM-DD>', stable across recomputation"
    )
    bill_id: str
    bill_name: str
    due_date: date
    expected_amount: Decimal = Field(..., ge=0)
    status: OccurrenceStatus = OccurrenceStatus.DUE
    paid_transaction_id: Optional[str] = None
    paid_at: Optional[datetime] = None
    match_confidence: Optional[MatchConfidence] = None

    @staticmethod
    def make_id(bill_id: str, due_date: date) -> str:
        return f"{bill_id}-{due_date.isoformat()}"

    @property
    def is_settled(self) -> bool:
        return self.status in (OccurrenceStatus.PAID, OccurrenceStatus.SKIPPED)


class StoredOccurrence(BaseModel):
    """A persisted user decision about one occurrence."""

    bill_id: str
    due_date: date
    status: OccurrenceStatus
    paid_transaction_id: Optional[str] = None
    paid_at: Optional[datetime] = None
    match_confidence: Optional[MatchConfidence] = None

    @property
    def occurrence_id(self) -> str:
        return BillOccurrence.make_id(self.bill_id, self.due_date)


# =============================================================================
# TRANSACTIONS AND MATCHING
# =============================================================================

class Transaction(BaseModel):
    """
    A bank transaction as synced from Open Banking.

    Expenses are usually negative; matching compares absolute amounts.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    amount: Decimal
    merchant: Optional[str] = None
    description: str = ""
    transaction_date: date
    account_id: str
    bill_id: Optional[str] = Field(
        default=None,
        description="Set when the transaction is already linked to a bill"
    )
    is_pending: bool = False


class Receipt(BaseModel):
    """An emailed receipt waiting to be linked to a bank transaction."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    merchant_name: Optional[str] = None
    amount: Optional[Decimal] = Field(default=None, ge=0)
    received_at: datetime
    subject: Optional[str] = None
    from_email: Optional[str] = None


class ReceiptMatch(BaseModel):
    receipt_id: str
    transaction_id: str
    score: int = Field(..., ge=0)
    confidence: MatchConfidence
    reasons: list[str] = Field(default_factory=list)


class MatchResult(BaseModel):
    """A scored candidate pairing of occurrence and transaction."""

    occurrence_id: str
    bill_id: str
    transaction_id: str
    confidence: MatchConfidence
    score: int = Field(..., ge=0)
    reasons: list[str] = Field(default_factory=list)


class MatchOutcome(BaseModel):
    """Result of an auto-matching run."""

    auto_apply: list[MatchResult] = Field(default_factory=list)
    for_review: list[MatchResult] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.auto_apply) + len(self.for_review)


class MatchDiagnostic(BaseModel):
    """Why a nearby transaction did or did not match, for debugging."""

    transaction_id: str
    amount_diff: Decimal
    days_diff: int
    provider_match: Optional[str] = None
    account_match: bool = False


# =============================================================================
# SWITCHING MODELS
# =============================================================================

class RiskPreference(str, Enum):
    """Appetite for tariff price changes."""
    STABLE = "stable"
    BALANCED = "balanced"
    LOWEST_COST = "lowest_cost"


class SwitchRecommendation(BaseModel):
    recommend: bool
    reason: str
    net_savings: Decimal


class EnergyReading(BaseModel):
    reading_date: date
    consumption_kwh: float = Field(..., ge=0)


class EnergyProjection(BaseModel):
    monthly_estimate: Decimal
    annual_estimate: Decimal
    average_daily_usage: float
    peak_usage_day: Optional[date] = None


class TrackedService(BaseModel):
    """A contract (energy, broadband, mobile) we look for better deals on."""

    name: str
    monthly_cost: Decimal = Field(..., ge=0)
    estimated_savings_annual: Decimal = Field(default=Decimal("0"))
    last_recommendation: Optional[str] = Field(
        default=None,
        pattern="^(switch|stay)$"
    )


# =============================================================================
# RECONCILIATION
# =============================================================================

class MonthReconciliation(BaseModel):
    """Bills for one month after stored decisions and auto-matching."""

    year: int
    month: int = Field(..., ge=1, le=12)
    occurrences: list[BillOccurrence] = Field(default_factory=list)
    applied: list[MatchResult] = Field(default_factory=list)
    for_review: list[MatchResult] = Field(default_factory=list)
    total_due: Decimal = Decimal("0")
    total_paid: Decimal = Decimal("0")
    total_overdue: Decimal = Decimal("0")
