"""Pay-cycle dashboard metrics and alerts."""

from lifetracker.dashboard.metrics import (
    build_daily_spending,
    build_pay_cycle_metrics,
    calculate_net_position,
    calculate_projected_end_balance,
    calculate_safe_to_spend,
    check_runway_risk,
    format_currency,
    generate_alerts,
)

__all__ = [
    "build_daily_spending",
    "build_pay_cycle_metrics",
    "calculate_net_position",
    "calculate_projected_end_balance",
    "calculate_safe_to_spend",
    "check_runway_risk",
    "format_currency",
    "generate_alerts",
]
