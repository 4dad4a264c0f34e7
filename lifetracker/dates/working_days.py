"""
UK Working Days

Working days for England & Wales: Monday to Friday, excluding bank
holidays. The built-in holiday list covers 2024-2030; callers with a
fresher source (e.g. a table synced from GOV.UK) can replace it with
set_bank_holidays().

Also home to the "early payday" rule used by banks that release salary
ahead of the contractual 20th.
"""

import calendar
from datetime import date, timedelta
from typing import Iterable

import structlog

from lifetracker.models.pay_cycle import PayCycle


logger = structlog.get_logger(__name__)


class InvalidDateRangeError(ValueError):
    """Raised when a date range ends before it starts."""

    def __init__(self, start: date, end: date):
        self.start = start
        self.end = end
        super().__init__(f"Date range ends ({end}) before it starts ({start})")


# England & Wales bank holidays, including substitute days
UK_BANK_HOLIDAYS: frozenset[date] = frozenset(
    date.fromisoformat(d) for d in (
        # 2024
        "2024-01-01", "2024-03-29", "2024-04-01", "2024-05-06",
        "2024-05-27", "2024-08-26", "2024-12-25", "2024-12-26",
        # 2025
        "2025-01-01", "2025-04-18", "2025-04-21", "2025-05-05",
        "2025-05-26", "2025-08-25", "2025-12-25", "2025-12-26",
        # 2026
        "2026-01-01", "2026-04-03", "2026-04-06", "2026-05-04",
        "2026-05-25", "2026-08-31", "2026-12-25", "2026-12-28",
        # 2027
        "2027-01-01", "2027-03-26", "2027-03-29", "2027-05-03",
        "2027-05-31", "2027-08-30", "2027-12-27", "2027-12-28",
        # 2028
        "2028-01-03", "2028-04-14", "2028-04-17", "2028-05-01",
        "2028-05-29", "2028-08-28", "2028-12-25", "2028-12-26",
        # 2029
        "2029-01-01", "2029-03-30", "2029-04-02", "2029-05-07",
        "2029-05-28", "2029-08-27", "2029-12-25", "2029-12-26",
        # 2030
        "2030-01-01", "2030-04-19", "2030-04-22", "2030-05-06",
        "2030-05-27", "2030-08-26", "2030-12-25", "2030-12-26",
    )
)

_bank_holidays: frozenset[date] = UK_BANK_HOLIDAYS

EARLY_PAYDAY_DAY = 20


def set_bank_holidays(holidays: Iterable[date]) -> None:
    """Replace the bank holiday set used by every working-day function."""
    global _bank_holidays
    _bank_holidays = frozenset(holidays)
    logger.debug("bank_holidays_replaced", count=len(_bank_holidays))


def reset_bank_holidays() -> None:
    """Restore the built-in 2024-2030 list."""
    global _bank_holidays
    _bank_holidays = UK_BANK_HOLIDAYS


def get_bank_holidays() -> frozenset[date]:
    return _bank_holidays


# =============================================================================
# CALENDAR HELPERS
# =============================================================================

def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def shift_month(year: int, month: int, months: int) -> tuple[int, int]:
    """(year, month) moved by a number of months, either direction."""
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def clamped_date(year: int, month: int, day: int) -> date:
    """The given day of the month, or the month's last day if it is shorter."""
    return date(year, month, min(day, days_in_month(year, month)))


def month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


# =============================================================================
# WORKING DAYS
# =============================================================================

def is_bank_holiday(d: date) -> bool:
    return d in _bank_holidays


def is_weekend(d: date) -> bool:
    return d.weekday() >= 5


def is_working_day(d: date) -> bool:
    return not is_weekend(d) and not is_bank_holiday(d)


def previous_working_day(d: date) -> date:
    """Latest working day strictly before `d`."""
    candidate = d - timedelta(days=1)
    while not is_working_day(candidate):
        candidate -= timedelta(days=1)
    return candidate


def next_working_day(d: date) -> date:
    """Earliest working day strictly after `d`."""
    candidate = d + timedelta(days=1)
    while not is_working_day(candidate):
        candidate += timedelta(days=1)
    return candidate


def closest_working_day(d: date) -> date:
    """`d` if it is a working day, else the nearer neighbour (earlier on a tie)."""
    if is_working_day(d):
        return d
    before = previous_working_day(d)
    after = next_working_day(d)
    if (d - before) <= (after - d):
        return before
    return after


def working_days_between(start: date, end: date) -> int:
    """Working days in [start, end]."""
    if end < start:
        raise InvalidDateRangeError(start, end)
    count = 0
    current = start
    while current <= end:
        if is_working_day(current):
            count += 1
        current += timedelta(days=1)
    return count


# =============================================================================
# EARLY PAYDAY RULE
# =============================================================================

def early_payday_for_month(year: int, month: int) -> date:
    """
    Payday under the fixed early-pay rule.

    Salary due on the 20th. If the 20th is a Saturday, Sunday or Monday
    it arrives on the preceding Friday; if it is a Tuesday-Friday bank
    holiday it arrives on the previous working day.
    """
    nominal = date(year, month, EARLY_PAYDAY_DAY)
    weekday = nominal.weekday()

    if weekday in (calendar.SATURDAY, calendar.SUNDAY, calendar.MONDAY):
        # Monday=0 needs 3 days back, Saturday=5 one, Sunday=6 two.
        # The Friday stands even when it is itself a bank holiday.
        back = 3 if weekday == calendar.MONDAY else weekday - calendar.FRIDAY
        return nominal - timedelta(days=back)

    if is_bank_holiday(nominal):
        return previous_working_day(nominal)

    return nominal


def early_pay_cycle_for_date(d: date) -> PayCycle:
    """The early-pay cycle containing `d`."""
    this_payday = early_payday_for_month(d.year, d.month)

    if d >= this_payday:
        next_year, next_month = shift_month(d.year, d.month, 1)
        start = this_payday
        end = early_payday_for_month(next_year, next_month) - timedelta(days=1)
    else:
        prev_year, prev_month = shift_month(d.year, d.month, -1)
        start = early_payday_for_month(prev_year, prev_month)
        end = this_payday - timedelta(days=1)

    return PayCycle(start=start, end=end)
