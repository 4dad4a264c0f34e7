"""Tests for two-stage validation of planner inputs."""

import pytest
from datetime import date
from decimal import Decimal

from lifetracker.models import Bill, BillFrequency, Debt, DebtStatus, Transaction
from lifetracker.validation import PlanValidator


@pytest.fixture
def validator():
    return PlanValidator()


def make_debt(id="d1", balance="1000", apr="0", min_payment="25", **overrides):
    values = dict(
        id=id,
        creditor_name=f"Card {id}",
        starting_balance=Decimal(balance),
        current_balance=Decimal(balance),
        apr=Decimal(apr) if apr is not None else None,
        min_payment=Decimal(min_payment),
    )
    values.update(overrides)
    return Debt(**values)


def make_bill(id="rent", due_day=1, **overrides):
    values = dict(id=id, name=id.title(), amount=Decimal("800"), due_day=due_day)
    values.update(overrides)
    return Bill(**values)


class TestDebtSchemaValidation:
    """Tests for stage 1 of debt plan validation."""

    def test_valid_request(self, validator):
        """Test a clean request."""
        result = validator.validate_debt_plan([make_debt()], Decimal("100"))
        assert result.is_valid
        assert result.can_proceed
        assert result.issues == []

    def test_no_open_debts(self, validator):
        """Test closed debts don't count."""
        result = validator.validate_debt_plan(
            [make_debt(status=DebtStatus.CLOSED)], Decimal("100")
        )
        assert not result.schema_valid
        assert not result.semantic_valid
        assert result.issues[0].issue_type == "missing"
        assert result.can_proceed

    def test_negative_budget_blocks(self, validator):
        """Test a negative budget cannot proceed."""
        result = validator.validate_debt_plan([make_debt()], Decimal("-5"))
        assert not result.is_valid
        assert not result.can_proceed
        assert result.issues[0].message == "Monthly budget cannot be negative"

    def test_zero_budget_is_an_error_but_proceeds(self, validator):
        """Test a zero budget gives an empty plan rather than stopping."""
        result = validator.validate_debt_plan([make_debt()], Decimal("0"))
        assert result.has_errors
        assert result.can_proceed
        assert result.issues[0].message == "Monthly budget must be greater than zero"


class TestDebtSemanticValidation:
    """Tests for stage 2 of debt plan validation."""

    def test_budget_below_minimums(self, validator):
        """Test a warning when minimums can't all be paid."""
        debts = [make_debt("a", min_payment="25"), make_debt("b", min_payment="10")]
        result = validator.validate_debt_plan(debts, Decimal("20"))

        assert result.is_valid
        assert result.warnings == [
            "Budget (£20.00) is below the total minimum payments (£35.00)"
        ]

    def test_negative_amortization(self, validator):
        """Test interest at or above the minimum payment."""
        debt = make_debt(balance="1200", apr="24", min_payment="20")
        result = validator.validate_debt_plan([debt], Decimal("500"))

        assert [i.issue_type for i in result.issues] == ["negative_amortization"]
        assert result.issues[0].field == "debts[d1]"
        assert result.issues[0].severity == "warning"

    def test_missing_apr_is_info(self, validator):
        """Test a missing APR is reported without a warning."""
        result = validator.validate_debt_plan([make_debt(apr=None)], Decimal("100"))
        assert result.is_valid
        assert result.warnings == []
        assert [i.severity for i in result.issues] == ["info"]

    def test_semantic_skipped_after_schema_error(self, validator):
        """Test stage 2 doesn't run when stage 1 fails."""
        result = validator.validate_debt_plan([make_debt(apr=None)], Decimal("0"))
        assert [i.issue_type for i in result.issues] == ["invalid_value"]


class TestBillMonthValidation:
    """Tests for bill month validation."""

    def test_valid_month(self, validator):
        """Test bills and in-window transactions."""
        transactions = [Transaction(
            id="t1", amount=Decimal("-800"), transaction_date=date(2025, 2, 27), account_id="a"
        )]
        result = validator.validate_bill_month([make_bill()], transactions, 2025, 3)
        assert result.is_valid
        assert result.can_proceed

    def test_invalid_month(self, validator):
        """Test month 13 stops reconciliation."""
        result = validator.validate_bill_month([make_bill()], [], 2025, 13)
        assert not result.can_proceed
        assert result.issues[0].field == "month"

    def test_clamped_due_day(self, validator):
        """Test month-based bills past the month end are noted."""
        bills = [
            make_bill(due_day=31),
            make_bill("cleaner", due_day=31, frequency=BillFrequency.WEEKLY,
                      start_date=date(2025, 1, 3)),
        ]
        result = validator.validate_bill_month(bills, [], 2025, 2)

        assert result.is_valid
        assert len(result.issues) == 1
        assert result.issues[0].message == "Rent is due on day 31; this month it falls on 28 Feb"

    def test_duplicate_bill_ids(self, validator):
        """Test duplicate ids block reconciliation."""
        result = validator.validate_bill_month([make_bill(), make_bill()], [], 2025, 3)
        assert not result.can_proceed
        assert result.issues[0].issue_type == "duplicate"

    def test_transactions_out_of_range(self, validator):
        """Test transactions far from the month are a warning."""
        transactions = [Transaction(
            id="t1", amount=Decimal("-800"), transaction_date=date(2025, 2, 20), account_id="a"
        )]
        result = validator.validate_bill_month([make_bill()], transactions, 2025, 3)

        assert result.is_valid
        assert result.can_proceed
        assert result.issues[0].issue_type == "out_of_range"
        assert len(result.warnings) == 1


class TestUserFriendlySummary:
    """Tests for summaries shown to the user."""

    def test_all_passed(self, validator):
        """Test the happy path."""
        result = validator.validate_debt_plan([make_debt()], Decimal("100"))
        assert validator.user_friendly_summary(result) == "✅ All checks passed!"

    def test_blocking_errors(self, validator):
        """Test errors with fixes and the stop message."""
        result = validator.validate_debt_plan([make_debt()], Decimal("-5"))
        summary = validator.user_friendly_summary(result)

        assert summary.startswith("❌ Some inputs need fixing:")
        assert "• Monthly budget cannot be negative" in summary
        assert "💡" in summary
        assert summary.endswith("Please fix the issues above before continuing.")

    def test_warnings_only(self, validator):
        """Test warnings allow continuing."""
        debts = [make_debt("a", min_payment="25"), make_debt("b", min_payment="10")]
        result = validator.validate_debt_plan(debts, Decimal("20"))
        summary = validator.user_friendly_summary(result)

        assert summary.startswith("⚠️ Please check the following:")
        assert summary.endswith("You can still continue, but the results may be misleading.")
