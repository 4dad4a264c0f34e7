"""
Bill Occurrence Engine

Expands recurring Bill rules into dated BillOccurrences.

ASSUMPTIONS:
- Occurrences are computed on the fly, never pre-stored for future months
- Due dates stay on the exact date (no shifting for weekends/holidays)
- Month-based schedules count months from the bill's start month
"""

from datetime import date, datetime, timedelta
from typing import Iterable, Optional

import structlog

from lifetracker.dates.working_days import (
    InvalidDateRangeError,
    clamped_date,
    days_in_month,
)
from lifetracker.models.bill import (
    Bill,
    BillOccurrence,
    MatchConfidence,
    OccurrenceStatus,
    StoredOccurrence,
)


logger = structlog.get_logger(__name__)

# Schedules without a start date are anchored here
DEFAULT_BILL_START = date(2020, 1, 1)


def _make_occurrence(bill: Bill, due_date: date) -> BillOccurrence:
    return BillOccurrence(
        id=BillOccurrence.make_id(bill.id, due_date),
        bill_id=bill.id,
        bill_name=bill.name,
        due_date=due_date,
        expected_amount=bill.amount,
    )


def _week_based_dates(anchor: date, step_days: int, start: date, end: date) -> list[date]:
    if anchor >= start:
        current = anchor
    else:
        steps = -(-(start - anchor).days // step_days)
        current = anchor + timedelta(days=steps * step_days)

    dates = []
    while current <= end:
        dates.append(current)
        current += timedelta(days=step_days)
    return dates


def _month_based_dates(
    anchor: date,
    step_months: int,
    due_day: int,
    start: date,
    end: date,
) -> list[date]:
    anchor_index = anchor.year * 12 + anchor.month - 1
    index = start.year * 12 + start.month - 1
    last_index = end.year * 12 + end.month - 1

    dates = []
    while index <= last_index:
        offset = index - anchor_index
        if offset >= 0 and offset % step_months == 0:
            due = clamped_date(index // 12, index % 12 + 1, due_day)
            if start <= due <= end:
                dates.append(due)
        index += 1
    return dates


def generate_bill_occurrences(bill: Bill, start: date, end: date) -> list[BillOccurrence]:
    """
    All occurrences of a bill in [start, end].

    Inactive bills have none. Occurrences before the bill's start date
    or after its end date are dropped.
    """
    if end < start:
        raise InvalidDateRangeError(start, end)
    if not bill.is_active:
        return []

    anchor = bill.start_date or DEFAULT_BILL_START

    if bill.frequency.days_between is not None:
        due_dates = _week_based_dates(anchor, bill.frequency.days_between, start, end)
    else:
        due_dates = _month_based_dates(
            anchor, bill.frequency.months_between, bill.due_day, start, end
        )

    occurrences = [
        _make_occurrence(bill, d)
        for d in due_dates
        if d >= anchor and (bill.end_date is None or d <= bill.end_date)
    ]

    logger.debug(
        "bill_occurrences_generated",
        bill_id=bill.id,
        frequency=bill.frequency.value,
        count=len(occurrences),
    )
    return occurrences


def bill_occurrences_in_range(
    bills: Iterable[Bill],
    start: date,
    end: date,
) -> list[BillOccurrence]:
    return [
        occurrence
        for bill in bills
        for occurrence in generate_bill_occurrences(bill, start, end)
    ]


def bill_occurrences_for_month(
    bills: Iterable[Bill],
    year: int,
    month: int,
) -> list[BillOccurrence]:
    start = date(year, month, 1)
    end = date(year, month, days_in_month(year, month))
    return bill_occurrences_in_range(bills, start, end)


# =============================================================================
# STATUSES
# =============================================================================

def merge_occurrence_statuses(
    occurrences: list[BillOccurrence],
    stored: Iterable[StoredOccurrence],
    today: Optional[date] = None,
) -> list[BillOccurrence]:
    """
    Overlay stored user decisions on computed occurrences.

    An occurrence nobody has paid or skipped becomes OVERDUE once its
    due date is behind `today`.
    """
    today = today or date.today()
    stored_by_id = {s.occurrence_id: s for s in stored}

    merged = []
    for occurrence in occurrences:
        saved = stored_by_id.get(occurrence.id)
        if saved is not None:
            occurrence = occurrence.model_copy(update={
                "status": saved.status,
                "paid_transaction_id": saved.paid_transaction_id,
                "paid_at": saved.paid_at,
                "match_confidence": saved.match_confidence,
            })

        if occurrence.status == OccurrenceStatus.DUE and occurrence.due_date < today:
            occurrence = occurrence.model_copy(update={"status": OccurrenceStatus.OVERDUE})

        merged.append(occurrence)

    return merged


def existing_transaction_links(stored: Iterable[StoredOccurrence]) -> dict[str, str]:
    """Map of transaction id -> occurrence id for already-linked payments."""
    return {
        s.paid_transaction_id: s.occurrence_id
        for s in stored
        if s.paid_transaction_id
    }


def mark_occurrence_paid(
    occurrence: BillOccurrence,
    transaction_id: Optional[str] = None,
    confidence: MatchConfidence = MatchConfidence.MANUAL,
    paid_at: Optional[datetime] = None,
) -> BillOccurrence:
    return occurrence.model_copy(update={
        "status": OccurrenceStatus.PAID,
        "paid_transaction_id": transaction_id,
        "paid_at": paid_at or datetime.utcnow(),
        "match_confidence": confidence,
    })


def skip_occurrence(occurrence: BillOccurrence) -> BillOccurrence:
    return occurrence.model_copy(update={
        "status": OccurrenceStatus.SKIPPED,
        "paid_transaction_id": None,
        "paid_at": None,
        "match_confidence": None,
    })


def to_stored_occurrence(occurrence: BillOccurrence) -> StoredOccurrence:
    """The part of an occurrence worth persisting."""
    return StoredOccurrence(
        bill_id=occurrence.bill_id,
        due_date=occurrence.due_date,
        status=occurrence.status,
        paid_transaction_id=occurrence.paid_transaction_id,
        paid_at=occurrence.paid_at,
        match_confidence=occurrence.match_confidence,
    )
