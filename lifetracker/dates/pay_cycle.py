"""
Pay Cycles

A pay cycle runs from a payday up to the day before the next payday.
"""

from datetime import date, timedelta
from typing import Optional

from lifetracker.dates.payday import next_payday, previous_payday
from lifetracker.models.pay_cycle import PayCycle, PaydayRule


def pay_cycle_for_date(d: date, rule: Optional[PaydayRule] = None) -> PayCycle:
    """
    The pay cycle containing `d`.

    The cycle starts on the last payday on or before `d`, which may
    belong to a neighbouring calendar month once adjusted, and ends the
    day before the payday that follows it.
    """
    start = previous_payday(d + timedelta(days=1), rule)
    end = next_payday(start + timedelta(days=1), rule) - timedelta(days=1)
    return PayCycle(start=start, end=end)


def current_pay_cycle(
    today: Optional[date] = None,
    rule: Optional[PaydayRule] = None,
) -> PayCycle:
    return pay_cycle_for_date(today or date.today(), rule)


def next_pay_cycle(cycle: PayCycle, rule: Optional[PaydayRule] = None) -> PayCycle:
    return pay_cycle_for_date(cycle.end + timedelta(days=1), rule)


def previous_pay_cycle(cycle: PayCycle, rule: Optional[PaydayRule] = None) -> PayCycle:
    return pay_cycle_for_date(cycle.start - timedelta(days=1), rule)


def format_pay_cycle_label(cycle: PayCycle) -> str:
    """e.g. '17 Feb → 16 Mar 2026'"""
    return (
        f"{cycle.start.day} {cycle.start:%b} → "
        f"{cycle.end.day} {cycle.end:%b} {cycle.end.year}"
    )


def format_pay_cycle_label_short(cycle: PayCycle) -> str:
    """e.g. '17 Feb – 16 Mar'"""
    return f"{cycle.start.day} {cycle.start:%b} – {cycle.end.day} {cycle.end:%b}"
