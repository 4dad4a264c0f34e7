"""Debt payoff planning and statement import/export."""

from lifetracker.debts.calculations import (
    PayoffSimulationError,
    average_monthly_payment,
    balance_history,
    calculate_debt_summary,
    compare_strategies,
    debt_progress,
    debt_type_label,
    generate_payoff_plan,
    payment_category_label,
    payments_by_month,
)
from lifetracker.debts.csv_io import (
    detect_column_mappings,
    export_payments_csv,
    export_transactions_csv,
    parse_amount,
    parse_transaction_csv,
)

__all__ = [
    "PayoffSimulationError",
    "average_monthly_payment",
    "balance_history",
    "calculate_debt_summary",
    "compare_strategies",
    "debt_progress",
    "debt_type_label",
    "detect_column_mappings",
    "export_payments_csv",
    "export_transactions_csv",
    "generate_payoff_plan",
    "parse_amount",
    "parse_transaction_csv",
    "payment_category_label",
    "payments_by_month",
]
