"""
Investment Models

Values here are projections and estimates, so they are floats;
contributions keep the sign convention of the transaction type,
not of the amount.
"""

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field


class InvestmentTransactionType(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    FEE = "fee"
    DIVIDEND = "dividend"


class ValuationSource(str, Enum):
    MANUAL = "manual"
    ESTIMATED = "estimated"
    LIVE = "live"


class InvestmentTransaction(BaseModel):
    id: str
    transaction_date: date
    type: InvestmentTransactionType
    amount: float


class InvestmentValuation(BaseModel):
    valuation_date: date
    value: float = Field(..., ge=0)
    source: ValuationSource = ValuationSource.MANUAL


class DailyValue(BaseModel):
    value_date: date
    value: float
    source: ValuationSource
    contributions: float
    growth: float


class ProjectionScenarios(BaseModel):
    expected: float
    conservative: float
    aggressive: float


class ProjectionPoint(BaseModel):
    point_date: date
    value: float


class DailyChange(BaseModel):
    amount: float
    percentage: float
