"""
Payday and Pay Cycle Models

A pay cycle runs from one payday to the day before the next.
Most of the dashboard (safe-to-spend, upcoming bills, pace charts)
is scoped to the current pay cycle rather than to calendar months.
"""

from datetime import date, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AdjustmentRule(str, Enum):
    """
    How a payday that lands on a non-working day is moved.

    UK employers almost always pay on the previous working day,
    which is the default.
    """
    PREVIOUS_WORKING_DAY = "previous_working_day"
    NEXT_WORKING_DAY = "next_working_day"
    CLOSEST_WORKING_DAY = "closest_working_day"
    NO_ADJUSTMENT = "no_adjustment"


class PaydayRule(BaseModel):
    """
    A household's payday configuration.

    `day` may be 29-31; months that are too short use their last day.
    """
    model_config = ConfigDict(frozen=True)

    day: int = Field(
        default=20,
        ge=1,
        le=31,
        description="Contractual day of month for salary"
    )
    adjustment_rule: AdjustmentRule = Field(
        default=AdjustmentRule.PREVIOUS_WORKING_DAY,
        description="Adjustment when the day is a weekend or bank holiday"
    )


class PayCycle(BaseModel):
    """A payday-to-payday window, both ends inclusive."""
    model_config = ConfigDict(frozen=True)

    start: date = Field(..., description="Payday that opens the cycle")
    end: date = Field(..., description="Day before the next payday")

    @model_validator(mode='after')
    def validate_order(self) -> 'PayCycle':
        if self.end < self.start:
            raise ValueError("Pay cycle end cannot be before start")
        return self

    @property
    def days_total(self) -> int:
        return (self.end - self.start).days + 1

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def days_passed(self, today: date) -> int:
        """Days elapsed in the cycle, counting today."""
        if today < self.start:
            return 0
        if today > self.end:
            return self.days_total
        return (today - self.start).days + 1

    def days_remaining(self, today: date) -> int:
        """Days left after today."""
        return self.days_total - self.days_passed(today)

    def days(self) -> list[date]:
        return [self.start + timedelta(days=i) for i in range(self.days_total)]
