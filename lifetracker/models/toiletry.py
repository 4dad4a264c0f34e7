"""Toiletry inventory models."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ToiletryCategory(str, Enum):
    BODY = "body"
    HAIR = "hair"
    ORAL = "oral"
    HOUSEHOLD = "household"
    CLEANING = "cleaning"
    OTHER = "other"


class SizeUnit(str, Enum):
    ML = "ml"
    G = "g"
    UNITS = "units"


class ToiletryStatus(str, Enum):
    ACTIVE = "active"
    OUT_OF_STOCK = "out_of_stock"
    DISCONTINUED = "discontinued"


class StockLevel(str, Enum):
    HEALTHY = "healthy"
    LOW = "low"
    EMPTY = "empty"


class ReorderStatus(str, Enum):
    PLENTY = "plenty"
    REORDER_SOON = "reorder_soon"
    ORDER_NOW = "order_now"
    OVERDUE = "overdue"
    NO_DATA = "no_data"


class UsageConfidence(str, Enum):
    NONE = "none"
    LOW = "low"
    MODERATE = "moderate"
    GOOD = "good"


class ReadingType(str, Enum):
    FULL = "full"
    REGULAR = "regular"
    EMPTY = "empty"


class ToiletryItem(BaseModel):
    id: str
    name: str = Field(..., min_length=1)
    category: ToiletryCategory = ToiletryCategory.OTHER
    total_size: float = Field(..., ge=0, description="Size of one item in size_unit")
    size_unit: SizeUnit = SizeUnit.ML
    cost_per_item: Decimal = Field(..., ge=0)
    pack_size: int = Field(default=1, ge=1)
    usage_rate_per_day: float = Field(default=0, ge=0)
    current_remaining: float = Field(default=0)
    status: ToiletryStatus = ToiletryStatus.ACTIVE
    last_restocked_at: Optional[datetime] = None


class ToiletryForecast(BaseModel):
    days_remaining: Optional[int] = Field(
        default=None,
        description="None when usage rate is zero (never runs out)"
    )
    run_out_date: Optional[date] = None
    monthly_usage: float
    monthly_cost: Decimal
    yearly_cost: Decimal
    status_level: StockLevel
    percent_remaining: int


class PurchaseCalculation(BaseModel):
    required_amount: float
    actual_purchase_quantity: int
    packs_needed: int
    total_cost: Decimal


class CategoryCost(BaseModel):
    monthly: Decimal = Decimal("0")
    yearly: Decimal = Decimal("0")


class ToiletryAggregateStats(BaseModel):
    total_monthly_cost: Decimal
    total_yearly_cost: Decimal
    low_stock_count: int
    empty_count: int
    cost_by_category: dict[str, CategoryCost] = Field(default_factory=dict)
    active_item_count: int
    total_item_count: int


class UsageLog(BaseModel):
    logged_date: date
    amount_used: float = Field(..., ge=0)


class UsageRateResult(BaseModel):
    daily_usage: Optional[float] = None
    data_points: int = 0
    confidence: UsageConfidence = UsageConfidence.NONE


class WeightUsageResult(BaseModel):
    usage_rate_per_day: Optional[float] = None
    remaining_grams: float = 0
    days_remaining: Optional[float] = None
    source: str = Field(..., pattern="^(weight_based|manual)$")


class ShippingProfile(BaseModel):
    """How quickly a retailer gets an order to the door."""

    dispatch_days_min: int = Field(default=0, ge=0)
    dispatch_days_max: int = Field(default=1, ge=0)
    delivery_days_min: int = Field(default=1, ge=0)
    delivery_days_max: int = Field(default=3, ge=0)
    dispatches_weekends: bool = False
    delivers_weekends: bool = False
    cutoff_time: Optional[str] = Field(
        default=None,
        pattern=r"^\d{1,2}(:\d{2})?$",
        description="Same-day dispatch cutoff, HH:MM"
    )


class OrderByResult(BaseModel):
    order_by_date: date
    max_lead_time_days: int
