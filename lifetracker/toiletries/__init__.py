"""Toiletry forecasting and reordering."""

from lifetracker.toiletries.forecast import (
    InvalidPackSizeError,
    calculate_aggregate_stats,
    calculate_forecast,
    calculate_order_by_date,
    calculate_purchase,
    daily_usage_from_logs,
    reorder_status,
    validate_weight_log,
    weight_based_usage,
)

__all__ = [
    "InvalidPackSizeError",
    "calculate_aggregate_stats",
    "calculate_forecast",
    "calculate_order_by_date",
    "calculate_purchase",
    "daily_usage_from_logs",
    "reorder_status",
    "validate_weight_log",
    "weight_based_usage",
]
