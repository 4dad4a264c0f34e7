"""
Weekly Calorie Targets

Meal plan weeks run Monday to Sunday. The household weighs in on a
Sunday and sets the targets for the week that starts the next day.

A week's calories can be flat (the same every day) or zigzag: the
weekly total stays the same but individual days go up and down.

ASSUMPTIONS:
- A deficit of ~500 kcal/day loses ~0.5kg a week
- kcal values are rounded half up to whole numbers
"""

import math
from datetime import date, timedelta

import structlog

from lifetracker.models.nutrition import (
    PlanMode,
    PlanModeConfig,
    ScheduleDay,
    WeeklyCalorieSchedule,
    ZigzagSchedule,
)


logger = structlog.get_logger(__name__)

PLAN_MODES: dict[PlanMode, PlanModeConfig] = {
    PlanMode.MAINTAIN: PlanModeConfig(
        label="Maintain",
        weekly_deficit_kg=0,
        daily_calorie_adjustment=0,
    ),
    PlanMode.MILD_LOSS: PlanModeConfig(
        label="Mild Weight Loss",
        weekly_deficit_kg=0.25,
        daily_calorie_adjustment=-250,
    ),
    PlanMode.LOSS: PlanModeConfig(
        label="Weight Loss",
        weekly_deficit_kg=0.5,
        daily_calorie_adjustment=-500,
    ),
    PlanMode.EXTREME_LOSS: PlanModeConfig(
        label="Extreme Weight Loss",
        weekly_deficit_kg=1.0,
        daily_calorie_adjustment=-1000,
    ),
}

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

LOW_DAY_FACTOR = 0.85
HIGH_DAY_FACTOR = 1.15


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def week_start_monday(d: date) -> date:
    """The Monday of the meal plan week containing `d`."""
    return d - timedelta(days=d.weekday())


def next_week_start(today: date) -> date:
    """
    Monday the next targets apply from after a weigh-in.

    Tomorrow when today is Sunday; a full week ahead when today is Monday.
    """
    return today + timedelta(days=7 - today.weekday())


def target_calories_for_plan(tdee: float, plan_mode: PlanMode) -> int:
    return round_half_up(tdee + PLAN_MODES[plan_mode].daily_calorie_adjustment)


def build_flat_schedule(daily_calories: int) -> WeeklyCalorieSchedule:
    return WeeklyCalorieSchedule(**{name.lower(): daily_calories for name in DAY_NAMES})


def build_zigzag_schedule(
    tdee: float,
    plan_mode: PlanMode,
    schedule_type: ZigzagSchedule,
) -> WeeklyCalorieSchedule:
    """
    Spread the plan's weekly calories unevenly across the week.

    SCHEDULE_1 eats at maintenance on Saturday and Sunday and takes the
    whole weekly deficit out of the five weekdays. SCHEDULE_2 uses low
    (85%), medium and high (115%) days, nudging the medium days so the
    week still adds up to the plan's total. No day goes below zero.
    """
    target_daily = target_calories_for_plan(tdee, plan_mode)
    weekly_total = target_daily * 7

    if schedule_type == ZigzagSchedule.SCHEDULE_1:
        high = round_half_up(tdee)
        low = max(0, round_half_up((weekly_total - high * 2) / 5))
        schedule = WeeklyCalorieSchedule(
            monday=low, tuesday=low, wednesday=low, thursday=low, friday=low,
            saturday=high, sunday=high,
        )
    else:
        low = max(0, round_half_up(target_daily * LOW_DAY_FACTOR))
        high = max(0, round_half_up(target_daily * HIGH_DAY_FACTOR))
        raw_total = low * 2 + target_daily * 3 + high * 2
        medium = max(0, target_daily + round_half_up((weekly_total - raw_total) / 3))
        schedule = WeeklyCalorieSchedule(
            monday=low, tuesday=medium, wednesday=low, thursday=medium,
            friday=high, saturday=high, sunday=medium,
        )

    logger.debug(
        "zigzag_schedule_built",
        plan_mode=plan_mode.value,
        schedule_type=schedule_type.value,
        weekly_total=schedule.total,
    )
    return schedule


def weekly_average(schedule: WeeklyCalorieSchedule) -> int:
    return round_half_up(schedule.total / 7)


def calories_for_date(d: date, schedule: WeeklyCalorieSchedule) -> int:
    return schedule.days()[d.weekday()]


def format_week_label(week_start: date) -> str:
    """e.g. '9 Feb – 15 Feb 2026'"""
    week_end = week_start + timedelta(days=6)
    return f"{week_start.day} {week_start:%b} – {week_end.day} {week_end:%b} {week_end.year}"


def schedule_days(schedule: WeeklyCalorieSchedule) -> list[ScheduleDay]:
    """Monday-first (day name, kcal) rows for display."""
    return [
        ScheduleDay(day=name, calories=calories)
        for name, calories in zip(DAY_NAMES, schedule.days())
    ]
