"""Investment valuation and projection."""

from lifetracker.investments.calculations import (
    RISK_PRESETS,
    contribution_total,
    daily_change,
    daily_rate,
    daily_values,
    net_deposits,
    project_value,
    projection_scenarios,
    projection_series,
    return_percentage,
)

__all__ = [
    "RISK_PRESETS",
    "contribution_total",
    "daily_change",
    "daily_rate",
    "daily_values",
    "net_deposits",
    "project_value",
    "projection_scenarios",
    "projection_series",
    "return_percentage",
]
