"""Recurring bills: occurrences, transaction matching and switching."""

from lifetracker.bills.occurrences import (
    bill_occurrences_for_month,
    bill_occurrences_in_range,
    existing_transaction_links,
    generate_bill_occurrences,
    mark_occurrence_paid,
    merge_occurrence_statuses,
    skip_occurrence,
)
from lifetracker.bills.matcher import (
    auto_match_transactions,
    find_matches_for_occurrence,
    match_provider,
    matching_diagnostics,
)
from lifetracker.bills.receipts import (
    amount_from_text,
    duplicate_candidates,
    match_receipt,
    merchant_from_email,
)
from lifetracker.bills.switching import (
    calculate_bill_health_score,
    calculate_energy_cost,
    comparison_url,
    days_until_contract_end,
    generate_ics_content,
    health_score_label,
    project_annual_cost,
    should_switch,
)

__all__ = [
    "amount_from_text",
    "auto_match_transactions",
    "bill_occurrences_for_month",
    "bill_occurrences_in_range",
    "calculate_bill_health_score",
    "calculate_energy_cost",
    "comparison_url",
    "days_until_contract_end",
    "duplicate_candidates",
    "existing_transaction_links",
    "find_matches_for_occurrence",
    "generate_bill_occurrences",
    "generate_ics_content",
    "health_score_label",
    "mark_occurrence_paid",
    "match_provider",
    "match_receipt",
    "matching_diagnostics",
    "merchant_from_email",
    "merge_occurrence_statuses",
    "project_annual_cost",
    "should_switch",
    "skip_occurrence",
]
