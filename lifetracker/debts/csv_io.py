"""
Debt CSV Import and Export

Reads statement exports from banks and creditors into DebtTransaction
records, and writes transactions and payments back out for reports.

Amounts are stored unsigned: whether a line was a payment or a charge
is decided later when it is matched to a debt.
"""

import csv
import io
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Collection, Iterable, Mapping, Optional, Sequence

import structlog

from lifetracker.models.debt import (
    CsvColumnMapping,
    CsvParseResult,
    DebtPayment,
    DebtTransaction,
)


logger = structlog.get_logger(__name__)

# UK day-first formats are tried before the US one
DATE_FORMATS = [
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%m/%d/%Y",
    "%Y/%m/%d",
    "%d %b %Y",
    "%d %B %Y",
]

CURRENCY_SYMBOLS = "£$€¥"

DATE_HEADERS = ["date", "transaction date", "trans date", "posted"]
AMOUNT_HEADERS = ["amount", "value", "debit", "credit", "sum"]
DESCRIPTION_HEADERS = ["description", "desc", "details", "narrative", "memo", "reference"]
REFERENCE_HEADERS = ["reference", "ref", "transaction id", "id"]
ACCOUNT_HEADERS = ["account", "account name", "source"]

TRANSACTION_EXPORT_HEADERS = ["Date", "Amount", "Description", "Reference", "Account"]
PAYMENT_EXPORT_HEADERS = [
    "Date", "Creditor", "Amount", "Category", "Principal", "Interest", "Fees", "Notes", "Matched",
]


def parse_date(value: str) -> Optional[date]:
    """ISO dates (with or without a time) first, then the common statement formats."""
    value = value.strip()
    if not value:
        return None

    try:
        return date.fromisoformat(value.split("T")[0])
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def parse_amount(value: str) -> Optional[Decimal]:
    """
    Signed amount from a statement cell.

    Currency symbols and spaces are dropped and "(12.50)" is negative.
    With both separators present the comma groups thousands; a lone
    comma followed by exactly two digits is a decimal comma.
    """
    cleaned = "".join(ch for ch in value if ch not in CURRENCY_SYMBOLS and not ch.isspace())
    if not cleaned:
        return None

    if cleaned.startswith("(") and cleaned.endswith(")"):
        cleaned = "-" + cleaned[1:-1]

    if "," in cleaned and "." in cleaned:
        cleaned = cleaned.replace(",", "")
    elif "," in cleaned:
        last_comma = cleaned.rindex(",")
        if len(cleaned) - last_comma == 3:
            cleaned = cleaned[:last_comma] + "." + cleaned[last_comma + 1:]
        else:
            cleaned = cleaned.replace(",", "")

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


def _column_index(header: Sequence[str], name: Optional[str]) -> int:
    if not name:
        return -1
    wanted = name.strip().lower()
    for index, column in enumerate(header):
        if column.strip().lower() == wanted:
            return index
    return -1


def _cell(row: Sequence[str], index: int) -> str:
    if 0 <= index < len(row):
        return row[index].strip()
    return ""


def parse_transaction_csv(content: str, mapping: CsvColumnMapping) -> CsvParseResult:
    """
    Parse a statement export using the given column mapping.

    A missing mapped column fails the whole file. Rows with a bad date,
    a bad amount or no description are skipped with a warning naming
    the row (the header is row 1).
    """
    rows = list(csv.reader(io.StringIO(content.strip())))
    if len(rows) < 2:
        return CsvParseResult(
            success=False,
            errors=["CSV must have at least a header row and one data row"],
        )

    header = rows[0]
    date_index = _column_index(header, mapping.date_column)
    amount_index = _column_index(header, mapping.amount_column)
    description_index = _column_index(header, mapping.description_column)
    reference_index = _column_index(header, mapping.reference_column)
    account_index = _column_index(header, mapping.account_column)

    errors = []
    if date_index < 0:
        errors.append(f'Date column "{mapping.date_column}" not found in CSV')
    if amount_index < 0:
        errors.append(f'Amount column "{mapping.amount_column}" not found in CSV')
    if description_index < 0:
        errors.append(f'Description column "{mapping.description_column}" not found in CSV')
    if errors:
        return CsvParseResult(success=False, errors=errors)

    transactions = []
    warnings = []
    for row_number, row in enumerate(rows[1:], start=2):
        if not any(cell.strip() for cell in row):
            continue

        raw_date = _cell(row, date_index)
        parsed_date = parse_date(raw_date)
        if parsed_date is None:
            warnings.append(f'Row {row_number}: Invalid date "{raw_date}", skipping')
            continue

        raw_amount = _cell(row, amount_index)
        amount = parse_amount(raw_amount)
        if amount is None:
            warnings.append(f'Row {row_number}: Invalid amount "{raw_amount}", skipping')
            continue

        description = _cell(row, description_index)
        if not description:
            warnings.append(f"Row {row_number}: Empty description, skipping")
            continue

        transactions.append(DebtTransaction(
            transaction_date=parsed_date,
            amount=abs(amount),
            description=description,
            reference=_cell(row, reference_index) or None,
            account_name=_cell(row, account_index) or None,
        ))

    logger.debug(
        "debt_csv_parsed",
        imported=len(transactions),
        skipped=len(warnings),
    )
    return CsvParseResult(success=True, transactions=transactions, warnings=warnings)


def detect_column_mappings(headers: Sequence[str]) -> Optional[CsvColumnMapping]:
    """
    Guess the mapping from header names.

    Each field takes the first header containing one of its patterns,
    patterns tried in order. None unless date, amount and description
    are all found.
    """
    lowered = [header.strip().lower() for header in headers]

    def find(patterns: list[str]) -> Optional[str]:
        for pattern in patterns:
            for index, header in enumerate(lowered):
                if pattern in header:
                    return headers[index]
        return None

    date_column = find(DATE_HEADERS)
    amount_column = find(AMOUNT_HEADERS)
    description_column = find(DESCRIPTION_HEADERS)
    if not (date_column and amount_column and description_column):
        return None

    return CsvColumnMapping(
        date_column=date_column,
        amount_column=amount_column,
        description_column=description_column,
        reference_column=find(REFERENCE_HEADERS),
        account_column=find(ACCOUNT_HEADERS),
    )


def _money(value: Optional[Decimal]) -> str:
    return f"{value:.2f}" if value else ""


def _write(header: list[str], rows: Iterable[list[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


def export_transactions_csv(transactions: Iterable[DebtTransaction]) -> str:
    return _write(TRANSACTION_EXPORT_HEADERS, (
        [
            t.transaction_date.isoformat(),
            f"{t.amount:.2f}",
            t.description,
            t.reference or "",
            t.account_name or "",
        ]
        for t in transactions
    ))


def export_payments_csv(
    payments: Iterable[DebtPayment],
    creditor_names: Mapping[str, str],
    matched_payment_ids: Collection[str] = (),
) -> str:
    """
    Payments report, one row per payment.

    `creditor_names` maps debt ids to creditors. A payment is "Matched"
    when its id is linked to a bank transaction.
    """
    return _write(PAYMENT_EXPORT_HEADERS, (
        [
            p.payment_date.isoformat(),
            creditor_names.get(p.debt_id, ""),
            f"{p.amount:.2f}",
            p.category.value,
            _money(p.principal_amount),
            _money(p.interest_amount),
            _money(p.fee_amount),
            p.notes or "",
            "Yes" if p.id is not None and p.id in matched_payment_ids else "No",
        ]
        for p in payments
    ))
