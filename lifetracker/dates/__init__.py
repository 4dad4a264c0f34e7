"""UK working days, paydays and pay cycles."""

from lifetracker.dates.working_days import (
    InvalidDateRangeError,
    closest_working_day,
    early_pay_cycle_for_date,
    early_payday_for_month,
    is_bank_holiday,
    is_weekend,
    is_working_day,
    next_working_day,
    previous_working_day,
    reset_bank_holidays,
    set_bank_holidays,
)
from lifetracker.dates.payday import (
    PaydayConfigurationError,
    days_until_payday,
    make_payday_rule,
    next_payday,
    payday_for_month,
    paydays_in_range,
    previous_payday,
)
from lifetracker.dates.pay_cycle import (
    current_pay_cycle,
    format_pay_cycle_label,
    format_pay_cycle_label_short,
    next_pay_cycle,
    pay_cycle_for_date,
    previous_pay_cycle,
)

__all__ = [
    "InvalidDateRangeError",
    "PaydayConfigurationError",
    "closest_working_day",
    "current_pay_cycle",
    "days_until_payday",
    "early_pay_cycle_for_date",
    "early_payday_for_month",
    "format_pay_cycle_label",
    "format_pay_cycle_label_short",
    "is_bank_holiday",
    "is_weekend",
    "is_working_day",
    "make_payday_rule",
    "next_pay_cycle",
    "next_payday",
    "next_working_day",
    "pay_cycle_for_date",
    "payday_for_month",
    "paydays_in_range",
    "previous_pay_cycle",
    "previous_payday",
    "previous_working_day",
    "reset_bank_holidays",
    "set_bank_holidays",
]
