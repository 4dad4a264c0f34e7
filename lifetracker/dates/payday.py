"""
Configurable Payday

Turns a household's PaydayRule (contractual day + adjustment rule)
into concrete payday dates.
"""

from datetime import date
from typing import Optional

import structlog
from pydantic import ValidationError

from lifetracker.config import get_settings
from lifetracker.dates.working_days import (
    InvalidDateRangeError,
    clamped_date,
    closest_working_day,
    is_working_day,
    next_working_day,
    previous_working_day,
    shift_month,
)
from lifetracker.models.pay_cycle import AdjustmentRule, PaydayRule


logger = structlog.get_logger(__name__)


class PaydayConfigurationError(ValueError):
    """Raised when a payday configuration cannot describe a real payday."""
    pass


def make_payday_rule(day: int, adjustment_rule: str = "previous_working_day") -> PaydayRule:
    """
    Build a PaydayRule from raw user/config values.

    Raises:
        PaydayConfigurationError: day outside 1..31 or unknown rule
    """
    try:
        return PaydayRule(day=day, adjustment_rule=adjustment_rule)
    except ValidationError as e:
        raise PaydayConfigurationError(
            f"Invalid payday configuration (day={day}, rule={adjustment_rule}): "
            f"{e.errors()[0]['msg']}"
        ) from e


def default_payday_rule() -> PaydayRule:
    """The PaydayRule described by PAYDAY_* settings."""
    config = get_settings().payday
    return make_payday_rule(config.day, config.adjustment_rule)


def _resolve(rule: Optional[PaydayRule]) -> PaydayRule:
    return rule if rule is not None else default_payday_rule()


def adjust_to_working_day(d: date, adjustment_rule: AdjustmentRule) -> date:
    if is_working_day(d) or adjustment_rule == AdjustmentRule.NO_ADJUSTMENT:
        return d
    if adjustment_rule == AdjustmentRule.PREVIOUS_WORKING_DAY:
        return previous_working_day(d)
    if adjustment_rule == AdjustmentRule.NEXT_WORKING_DAY:
        return next_working_day(d)
    return closest_working_day(d)


def payday_for_month(year: int, month: int, rule: Optional[PaydayRule] = None) -> date:
    """
    Actual payday in a month.

    The contractual day is clamped to the month length (31 -> 28 Feb),
    then moved off weekends and bank holidays per the adjustment rule.
    """
    rule = _resolve(rule)
    nominal = clamped_date(year, month, rule.day)
    return adjust_to_working_day(nominal, rule.adjustment_rule)


def paydays_in_range(
    start: date,
    end: date,
    rule: Optional[PaydayRule] = None,
) -> list[date]:
    """All paydays in [start, end], in order."""
    if end < start:
        raise InvalidDateRangeError(start, end)
    rule = _resolve(rule)

    found = set()
    # An adjusted payday can cross into a neighbouring calendar month
    year, month = shift_month(start.year, start.month, -1)
    last = shift_month(end.year, end.month, 1)
    while (year, month) <= last:
        payday = payday_for_month(year, month, rule)
        if start <= payday <= end:
            found.add(payday)
        year, month = shift_month(year, month, 1)
    paydays = sorted(found)

    logger.debug("paydays_in_range", start=str(start), end=str(end), count=len(paydays))
    return paydays


def _nearby_paydays(d: date, rule: PaydayRule) -> list[date]:
    """Adjusted paydays for the months around `d`, in order."""
    # An adjusted payday can cross into a neighbouring calendar month
    return sorted(
        payday_for_month(*shift_month(d.year, d.month, offset), rule)
        for offset in range(-2, 3)
    )


def next_payday(from_date: date, rule: Optional[PaydayRule] = None) -> date:
    """First payday on or after `from_date`."""
    rule = _resolve(rule)
    return next(p for p in _nearby_paydays(from_date, rule) if p >= from_date)


def previous_payday(from_date: date, rule: Optional[PaydayRule] = None) -> date:
    """Last payday strictly before `from_date`."""
    rule = _resolve(rule)
    return [p for p in _nearby_paydays(from_date, rule) if p < from_date][-1]


def days_until_payday(from_date: date, rule: Optional[PaydayRule] = None) -> int:
    """Days to the next payday; 0 on payday itself."""
    return (next_payday(from_date, rule) - from_date).days


def is_payday(d: date, rule: Optional[PaydayRule] = None) -> bool:
    return next_payday(d, rule) == d
