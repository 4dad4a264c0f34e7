"""
Toiletry Forecasting and Reordering

How long each item lasts, what it costs per month, and when to order
the next one so it arrives before the current one runs out.
"""

import math
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

import structlog

from lifetracker.config import get_settings
from lifetracker.dates.working_days import is_weekend
from lifetracker.models.toiletry import (
    CategoryCost,
    OrderByResult,
    PurchaseCalculation,
    ReadingType,
    ReorderStatus,
    ShippingProfile,
    StockLevel,
    ToiletryAggregateStats,
    ToiletryForecast,
    ToiletryItem,
    ToiletryStatus,
    UsageConfidence,
    UsageLog,
    UsageRateResult,
    WeightUsageResult,
)


logger = structlog.get_logger(__name__)

PENNY = Decimal("0.01")
DAYS_PER_MONTH = 30
REORDER_SOON_DAYS = 7

FINISHED_ITEM_ERROR = "This item has been marked as finished. Create a new item to track usage."
FULL_WEIGHT_EXISTS_ERROR = "Full weight has already been recorded for this item."


class InvalidPackSizeError(ValueError):
    """Raised when a purchase is computed for a pack holding nothing."""

    def __init__(self, pack_size: float):
        self.pack_size = pack_size
        super().__init__(f"Pack size must be positive, got {pack_size}")


def _pence(amount: Decimal) -> Decimal:
    return amount.quantize(PENNY, rounding=ROUND_HALF_UP)


# =============================================================================
# FORECASTS
# =============================================================================

def _run_out_date(today: date, days_left: float) -> Optional[date]:
    # None once the date would pass the calendar's end
    if not math.isfinite(days_left) or days_left > (date.max - today).days:
        return None
    return today + timedelta(days=int(days_left))


def calculate_forecast(
    item: ToiletryItem,
    today: Optional[date] = None,
    low_stock_threshold_days: Optional[int] = None,
) -> ToiletryForecast:
    """
    Days left, run-out date and running cost for one item.

    An item with no usage rate never runs out (days_remaining None).
    """
    today = today or date.today()
    if low_stock_threshold_days is None:
        low_stock_threshold_days = get_settings().toiletry.low_stock_threshold_days

    rate = item.usage_rate_per_day
    days_left = max(0.0, item.current_remaining / rate) if rate > 0 else math.inf

    monthly_usage = rate * DAYS_PER_MONTH
    monthly_cost = Decimal("0")
    if item.total_size > 0:
        monthly_cost = Decimal(str(monthly_usage / item.total_size)) * item.cost_per_item

    if item.current_remaining <= 0:
        level = StockLevel.EMPTY
    elif days_left <= low_stock_threshold_days:
        level = StockLevel.LOW
    else:
        level = StockLevel.HEALTHY

    percent = round(item.current_remaining / item.total_size * 100) if item.total_size > 0 else 0

    finite = math.isfinite(days_left)
    return ToiletryForecast(
        days_remaining=round(days_left) if finite else None,
        run_out_date=_run_out_date(today, days_left),
        monthly_usage=monthly_usage,
        monthly_cost=_pence(monthly_cost),
        yearly_cost=_pence(monthly_cost * 12),
        status_level=level,
        percent_remaining=percent,
    )


def calculate_purchase(
    required_amount: float,
    pack_size: float,
    cost_per_item: Decimal,
) -> PurchaseCalculation:
    """Whole packs only: never buy less than required."""
    if pack_size <= 0:
        raise InvalidPackSizeError(pack_size)

    packs = math.ceil(required_amount / pack_size)
    return PurchaseCalculation(
        required_amount=required_amount,
        actual_purchase_quantity=int(packs * pack_size),
        packs_needed=packs,
        total_cost=cost_per_item * packs,
    )


def calculate_aggregate_stats(
    items: list[ToiletryItem],
    today: Optional[date] = None,
) -> ToiletryAggregateStats:
    """Cost and stock totals over active items, with a per-category split."""
    active = [i for i in items if i.status == ToiletryStatus.ACTIVE]

    total_monthly = Decimal("0")
    total_yearly = Decimal("0")
    low = 0
    empty = 0
    by_category: dict[str, CategoryCost] = {}

    for item in active:
        forecast = calculate_forecast(item, today)
        total_monthly += forecast.monthly_cost
        total_yearly += forecast.yearly_cost

        if forecast.status_level == StockLevel.LOW:
            low += 1
        elif forecast.status_level == StockLevel.EMPTY:
            empty += 1

        category = by_category.setdefault(item.category.value, CategoryCost())
        category.monthly += forecast.monthly_cost
        category.yearly += forecast.yearly_cost

    return ToiletryAggregateStats(
        total_monthly_cost=total_monthly,
        total_yearly_cost=total_yearly,
        low_stock_count=low,
        empty_count=empty,
        cost_by_category=by_category,
        active_item_count=len(active),
        total_item_count=len(items),
    )


# =============================================================================
# USAGE RATES
# =============================================================================

def daily_usage_from_logs(
    logs: Iterable[UsageLog],
    today: Optional[date] = None,
    lookback_days: Optional[int] = None,
) -> UsageRateResult:
    """
    Average daily usage over recent logs.

    Confidence grows with the number of logs: 1+ low, 3+ moderate, 7+ good.
    """
    today = today or date.today()
    if lookback_days is None:
        lookback_days = get_settings().toiletry.usage_lookback_days

    cutoff = today - timedelta(days=lookback_days)
    recent = [log for log in logs if log.logged_date >= cutoff]
    if not recent:
        return UsageRateResult()

    total_used = sum(log.amount_used for log in recent)
    dates = [log.logged_date for log in recent]
    span_days = max(1, (max(dates) - min(dates)).days)

    if len(recent) >= 7:
        confidence = UsageConfidence.GOOD
    elif len(recent) >= 3:
        confidence = UsageConfidence.MODERATE
    else:
        confidence = UsageConfidence.LOW

    return UsageRateResult(
        daily_usage=round(total_used / span_days, 2),
        data_points=len(recent),
        confidence=confidence,
    )


def usage_rate_between(previous_weight: float, current_weight: float, days_between: int) -> Optional[float]:
    if days_between <= 0:
        return None
    used = previous_weight - current_weight
    if used <= 0:
        return None
    return used / days_between


def remaining_from_weight(current_weight_grams: float, empty_weight_grams: float) -> float:
    return max(0.0, current_weight_grams - empty_weight_grams)


def weight_based_usage(
    full_weight_grams: Optional[float],
    current_weight_grams: Optional[float],
    empty_weight_grams: float,
    opened_on: Optional[date],
    last_weighed_on: Optional[date],
    manual_usage_rate: float,
    today: Optional[date] = None,
) -> WeightUsageResult:
    """
    Usage from kitchen-scale readings, falling back to the manual rate.

    With a full weight and an opening date, the rate is the amount used
    since opening divided by the days since opening.
    """
    if current_weight_grams is None:
        return WeightUsageResult(usage_rate_per_day=manual_usage_rate, source="manual")

    remaining = remaining_from_weight(current_weight_grams, empty_weight_grams)

    rate = None
    if full_weight_grams is not None and opened_on is not None:
        used = (full_weight_grams - empty_weight_grams) - remaining
        end = last_weighed_on or today or date.today()
        days_open = (end - opened_on).days
        if days_open > 0 and used > 0:
            rate = used / days_open

    if rate is None or rate <= 0:
        rate = manual_usage_rate

    return WeightUsageResult(
        usage_rate_per_day=rate,
        remaining_grams=remaining,
        days_remaining=max(0.0, remaining / rate) if rate > 0 else None,
        source="weight_based" if full_weight_grams is not None else "manual",
    )


def validate_weight_log(
    reading_type: ReadingType,
    existing_full_weight: Optional[float],
    finished_at: Optional[datetime],
) -> tuple[bool, Optional[str]]:
    """
    Check a new scale reading is allowed.

    Logging an empty weight finishes the item; nothing may be logged after.
    Full weight can only be recorded once.

    Returns: (is_valid, error_message)
    """
    if finished_at is not None:
        return False, FINISHED_ITEM_ERROR
    if reading_type == ReadingType.FULL and existing_full_weight is not None:
        return False, FULL_WEIGHT_EXISTS_ERROR
    return True, None


# =============================================================================
# REORDERING
# =============================================================================

def _parse_cutoff(cutoff_time: str) -> tuple[int, int]:
    hours, _, minutes = cutoff_time.partition(":")
    return int(hours), int(minutes or 0)


def calculate_order_by_date(
    run_out_date: date,
    profile: ShippingProfile,
    safety_buffer_days: Optional[int] = None,
    now: Optional[datetime] = None,
) -> OrderByResult:
    """
    Latest day to order so delivery lands before the item runs out.

    Walks back from the run-out date by the worst-case dispatch and
    delivery time plus a buffer. Weekends don't count when the retailer
    neither dispatches nor delivers on them. Missing today's dispatch
    cutoff costs another day.
    """
    now = now or datetime.now()
    if safety_buffer_days is None:
        safety_buffer_days = get_settings().toiletry.safety_buffer_days

    lead_time = profile.dispatch_days_max + profile.delivery_days_max + safety_buffer_days
    skip_weekends = not profile.dispatches_weekends and not profile.delivers_weekends

    order_by = run_out_date
    remaining = lead_time
    while remaining > 0:
        order_by -= timedelta(days=1)
        if skip_weekends and is_weekend(order_by):
            continue
        remaining -= 1

    if profile.cutoff_time and order_by == now.date():
        hour, minute = _parse_cutoff(profile.cutoff_time)
        if (now.hour, now.minute) >= (hour, minute):
            order_by -= timedelta(days=1)

    return OrderByResult(order_by_date=order_by, max_lead_time_days=lead_time)


def reorder_status(order_by_date: Optional[date], today: Optional[date] = None) -> ReorderStatus:
    if order_by_date is None:
        return ReorderStatus.NO_DATA

    days = (order_by_date - (today or date.today())).days
    if days < 0:
        return ReorderStatus.OVERDUE
    if days == 0:
        return ReorderStatus.ORDER_NOW
    if days <= REORDER_SOON_DAYS:
        return ReorderStatus.REORDER_SOON
    return ReorderStatus.PLENTY
