"""Tests for importing and exporting debt statement CSVs."""

from datetime import date
from decimal import Decimal

import pytest

from lifetracker.debts.csv_io import (
    detect_column_mappings,
    export_payments_csv,
    export_transactions_csv,
    parse_amount,
    parse_date,
    parse_transaction_csv,
)
from lifetracker.models import CsvColumnMapping, DebtPayment, DebtTransaction, PaymentCategory


MAPPING = CsvColumnMapping(
    date_column="date",
    amount_column="Amount",
    description_column="Description",
    reference_column="Reference",
)

STATEMENT = """Date,Description,Amount,Reference
15/03/2025,"Payment, thank you",(120.00),REF1
2025-03-20,Interest,"1,234.56",
bad,Thing,10,
16/03/2025,,5.00,

17/03/2025,Fee,abc,
"""


class TestParseTransactions:
    """Tests for reading a statement export."""

    def test_rows_parsed_and_skipped(self):
        """Test good rows import and bad rows are reported by row number."""
        result = parse_transaction_csv(STATEMENT, MAPPING)

        assert result.success
        assert result.transactions == [
            DebtTransaction(
                transaction_date=date(2025, 3, 15),
                amount=Decimal("120.00"),
                description="Payment, thank you",
                reference="REF1",
            ),
            DebtTransaction(
                transaction_date=date(2025, 3, 20),
                amount=Decimal("1234.56"),
                description="Interest",
            ),
        ]
        assert result.warnings == [
            'Row 4: Invalid date "bad", skipping',
            "Row 5: Empty description, skipping",
            'Row 7: Invalid amount "abc", skipping',
        ]

    def test_missing_column(self):
        """Test an unknown mapped column fails the import."""
        mapping = MAPPING.model_copy(update={"amount_column": "Value"})
        result = parse_transaction_csv(STATEMENT, mapping)

        assert not result.success
        assert result.errors == ['Amount column "Value" not found in CSV']
        assert result.transactions == []

    def test_header_only(self):
        """Test a file with no data rows fails."""
        result = parse_transaction_csv("Date,Description,Amount\n", MAPPING)
        assert not result.success
        assert len(result.errors) == 1


class TestCellParsing:
    """Tests for reading amounts and dates from cells."""

    @pytest.mark.parametrize("value, expected", [
        ("£1,234.56", Decimal("1234.56")),
        ("(45.00)", Decimal("-45.00")),
        ("12,50", Decimal("12.50")),
        ("1,234", Decimal("1234")),
        ("€ 9.99", Decimal("9.99")),
        ("", None),
        ("abc", None),
        ("NaN", None),
    ])
    def test_amounts(self, value, expected):
        """Test symbols, brackets and comma handling."""
        assert parse_amount(value) == expected

    @pytest.mark.parametrize("value, expected", [
        ("2025-03-15T10:00:00", date(2025, 3, 15)),
        ("15-03-2025", date(2025, 3, 15)),
        ("03/25/2025", date(2025, 3, 25)),
        ("2025/03/15", date(2025, 3, 15)),
        ("5 Mar 2025", date(2025, 3, 5)),
        ("5 March 2025", date(2025, 3, 5)),
        ("31/02/2025", None),
        ("", None),
    ])
    def test_dates(self, value, expected):
        """Test ISO first, then day-first, US and written formats."""
        assert parse_date(value) == expected

    def test_day_first_wins(self):
        """Test an ambiguous date is read the UK way."""
        assert parse_date("04/03/2025") == date(2025, 3, 4)


class TestColumnDetection:
    """Tests for guessing the mapping from headers."""

    def test_detects_common_headers(self):
        """Test typical bank export headers."""
        mapping = detect_column_mappings(["Transaction Date", "Details", "Amount", "Ref"])

        assert mapping.date_column == "Transaction Date"
        assert mapping.description_column == "Details"
        assert mapping.amount_column == "Amount"
        assert mapping.reference_column == "Ref"
        assert mapping.account_column is None

    def test_missing_required_header(self):
        """Test None without a date, amount and description."""
        assert detect_column_mappings(["Date", "Amount"]) is None


class TestExport:
    """Tests for writing report CSVs."""

    def test_transactions(self):
        """Test two-decimal amounts and quoted commas."""
        content = export_transactions_csv([
            DebtTransaction(
                transaction_date=date(2025, 3, 15),
                amount=Decimal("120"),
                description="Payment, thank you",
                reference="REF1",
            ),
        ])
        assert content == (
            "Date,Amount,Description,Reference,Account\n"
            '2025-03-15,120.00,"Payment, thank you",REF1,\n'
        )

    def test_payments(self):
        """Test creditor names, split amounts and the matched flag."""
        payments = [
            DebtPayment(
                id="p1", debt_id="d1", amount=Decimal("100"), payment_date=date(2025, 3, 1),
                principal_amount=Decimal("80"), interest_amount=Decimal("20"), notes="March",
            ),
            DebtPayment(
                id="p2", debt_id="d2", amount=Decimal("15"), payment_date=date(2025, 3, 5),
                category=PaymentCategory.FEE, fee_amount=Decimal("15"),
            ),
        ]
        content = export_payments_csv(payments, {"d1": "Barclaycard"}, {"p1"})

        assert content.splitlines() == [
            "Date,Creditor,Amount,Category,Principal,Interest,Fees,Notes,Matched",
            "2025-03-01,Barclaycard,100.00,normal,80.00,20.00,,March,Yes",
            "2025-03-05,,15.00,fee,,,15.00,,No",
        ]
