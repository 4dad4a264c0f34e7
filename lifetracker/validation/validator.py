"""
Two-Stage Validation for Planner Inputs

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - SCHEMA VALIDATION:
- Something to plan over (open debts, bills)
- A usable budget
- Inputs the calendar can represent
- This catches empty or malformed requests

STAGE 2 - SEMANTIC VALIDATION:
- Budget against minimum payments
- Debts whose interest outgrows the minimum payment
- Duplicate bill ids
- Transactions that cannot belong to the reconciled month
- This catches requests that run but give misleading answers

Stage 2 only runs when stage 1 has no errors.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them; the calculation modules decide what to do.
"""

from datetime import timedelta
from decimal import Decimal

import structlog

from lifetracker.config import get_settings
from lifetracker.dates.working_days import clamped_date, days_in_month
from lifetracker.models.bill import Bill, Transaction
from lifetracker.models.debt import Debt, InterestType
from lifetracker.models.validation import ValidationIssue, ValidationResult


logger = structlog.get_logger(__name__)


def _is_valid(issues: list[ValidationIssue]) -> bool:
    return not any(issue.severity == "error" for issue in issues)


class PlanValidator:
    """
    Validates inputs to the debt planner and the monthly bill reconciler.

    Stage 1: Schema validation
    Stage 2: Semantic validation (skipped when stage 1 fails)
    """

    def __init__(self):
        self._settings = get_settings()

    # -------------------------------------------------------------------------
    # Debt plans
    # -------------------------------------------------------------------------

    def _validate_debt_schema(
        self,
        debts: list[Debt],
        monthly_budget: Decimal,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 1 for a payoff plan.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        if not any(d.is_open for d in debts):
            issues.append(ValidationIssue(
                field="debts",
                issue_type="missing",
                message="There are no open debts to plan a payoff for",
                severity="error",
                suggested_fix="Add a debt or reopen one that was closed by mistake",
            ))

        if monthly_budget < 0:
            issues.append(ValidationIssue(
                field="monthly_budget",
                issue_type="invalid_value",
                message="Monthly budget cannot be negative",
                severity="error",
                suggested_fix="Enter the amount you can put towards debts each month",
            ))
        elif monthly_budget == 0:
            issues.append(ValidationIssue(
                field="monthly_budget",
                issue_type="invalid_value",
                message="Monthly budget must be greater than zero",
                severity="error",
                suggested_fix="Enter the amount you can put towards debts each month",
            ))

        return _is_valid(issues), issues

    def _validate_debt_semantic(
        self,
        debts: list[Debt],
        monthly_budget: Decimal,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2 for a payoff plan.

        Returns: (is_valid, list_of_issues)
        """
        issues = []
        open_debts = [d for d in debts if d.is_open]
        symbol = self._settings.app.currency_symbol

        total_minimum = sum((d.min_payment for d in open_debts), Decimal("0"))
        if monthly_budget < total_minimum:
            issues.append(ValidationIssue(
                field="monthly_budget",
                issue_type="insufficient",
                message=(
                    f"Budget ({symbol}{monthly_budget:,.2f}) is below the total "
                    f"minimum payments ({symbol}{total_minimum:,.2f})"
                ),
                severity="warning",
                suggested_fix="Some minimum payments will be missed; raise the budget if you can",
            ))

        for debt in open_debts:
            if debt.current_balance <= 0:
                continue
            interest = debt.monthly_interest
            if interest > 0 and interest >= debt.min_payment:
                issues.append(ValidationIssue(
                    field=f"debts[{debt.id}]",
                    issue_type="negative_amortization",
                    message=(
                        f"{debt.creditor_name}: monthly interest "
                        f"({symbol}{interest:,.2f}) is at least the minimum payment "
                        f"({symbol}{debt.min_payment:,.2f})"
                    ),
                    severity="warning",
                    suggested_fix="Paying only the minimum will never clear this debt",
                ))

            if debt.apr is None and debt.interest_type != InterestType.NONE:
                issues.append(ValidationIssue(
                    field=f"debts[{debt.id}]",
                    issue_type="missing",
                    message=f"{debt.creditor_name} has no APR, so no interest is projected",
                    severity="info",
                    suggested_fix="Add the APR from your latest statement",
                ))

        return _is_valid(issues), issues

    def validate_debt_plan(
        self,
        debts: list[Debt],
        monthly_budget: Decimal,
    ) -> ValidationResult:
        """
        Run both stages over a payoff plan request.

        The plan can still be calculated with errors as long as the
        budget is not negative; it will just be empty.
        """
        schema_valid, issues = self._validate_debt_schema(debts, monthly_budget)

        semantic_valid = False
        if schema_valid:
            semantic_valid, semantic_issues = self._validate_debt_semantic(debts, monthly_budget)
            issues.extend(semantic_issues)

        return self._result(
            "debt_plan",
            schema_valid,
            semantic_valid,
            issues,
            can_proceed=monthly_budget >= 0,
        )

    # -------------------------------------------------------------------------
    # Bill months
    # -------------------------------------------------------------------------

    def _validate_bill_schema(
        self,
        bills: list[Bill],
        year: int,
        month: int,
    ) -> tuple[bool, list[ValidationIssue]]:
        issues = []

        if not 1 <= month <= 12:
            issues.append(ValidationIssue(
                field="month",
                issue_type="invalid_value",
                message=f"Month must be between 1 and 12, got {month}",
                severity="error",
            ))
            return False, issues

        month_length = days_in_month(year, month)
        for bill in bills:
            if not bill.is_active or not bill.frequency.months_between:
                continue
            if bill.due_day > month_length:
                issues.append(ValidationIssue(
                    field=f"bills[{bill.id}]",
                    issue_type="clamped",
                    message=(
                        f"{bill.name} is due on day {bill.due_day}; this month it falls "
                        f"on {clamped_date(year, month, bill.due_day):%d %b}"
                    ),
                    severity="info",
                ))

        return _is_valid(issues), issues

    def _validate_bill_semantic(
        self,
        bills: list[Bill],
        transactions: list[Transaction],
        year: int,
        month: int,
    ) -> tuple[bool, list[ValidationIssue]]:
        issues = []

        seen: set[str] = set()
        for bill in bills:
            if bill.id in seen:
                issues.append(ValidationIssue(
                    field=f"bills[{bill.id}]",
                    issue_type="duplicate",
                    message=f"Bill id {bill.id} appears more than once",
                    severity="error",
                    suggested_fix="Remove the duplicate bill before reconciling",
                ))
            seen.add(bill.id)

        window = timedelta(days=self._settings.matching.date_window_days)
        earliest = clamped_date(year, month, 1) - window
        latest = clamped_date(year, month, 31) + window
        outside = [t for t in transactions if not earliest <= t.transaction_date <= latest]
        if outside:
            issues.append(ValidationIssue(
                field="transactions",
                issue_type="out_of_range",
                message=(
                    f"{len(outside)} transaction(s) fall outside {earliest} to {latest} "
                    "and cannot match this month's bills"
                ),
                severity="warning",
                suggested_fix="Pass only the transactions for the month being reconciled",
            ))

        return _is_valid(issues), issues

    def validate_bill_month(
        self,
        bills: list[Bill],
        transactions: list[Transaction],
        year: int,
        month: int,
    ) -> ValidationResult:
        """Run both stages over a month of bills and bank transactions."""
        schema_valid, issues = self._validate_bill_schema(bills, year, month)

        semantic_valid = False
        if schema_valid:
            semantic_valid, semantic_issues = self._validate_bill_semantic(
                bills, transactions, year, month
            )
            issues.extend(semantic_issues)

        return self._result(
            "bill_month",
            schema_valid,
            semantic_valid,
            issues,
            can_proceed=schema_valid and semantic_valid,
        )

    # -------------------------------------------------------------------------

    def _result(
        self,
        subject: str,
        schema_valid: bool,
        semantic_valid: bool,
        issues: list[ValidationIssue],
        can_proceed: bool,
    ) -> ValidationResult:
        result = ValidationResult(
            subject=subject,
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=schema_valid and semantic_valid,
            can_proceed=can_proceed,
            issues=issues,
            warnings=[i.message for i in issues if i.severity == "warning"],
        )
        logger.debug(
            "validation_completed",
            subject=subject,
            is_valid=result.is_valid,
            errors=result.error_count,
            warnings=len(result.warnings),
        )
        return result

    def user_friendly_summary(self, result: ValidationResult) -> str:
        """Render a validation result for someone who isn't a developer."""
        if result.is_valid and not result.warnings:
            return "✅ All checks passed!"

        lines = []
        errors = [i for i in result.issues if i.severity == "error"]
        if errors:
            lines.append("❌ Some inputs need fixing:")
            for issue in errors:
                lines.append(f"   • {issue.message}")
                if issue.suggested_fix:
                    lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please check the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        lines.append("")
        if result.can_proceed:
            lines.append("You can still continue, but the results may be misleading.")
        else:
            lines.append("Please fix the issues above before continuing.")

        return "\n".join(lines)
