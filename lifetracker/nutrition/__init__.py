"""Calorie schedules, nutrition targets and meal plan macros."""

from lifetracker.nutrition.calculator import (
    calculate_bmr,
    calculate_macros,
    calculate_nutrition_targets,
    calculate_tdee,
)
from lifetracker.nutrition.macros import (
    balance_warnings,
    compute_totals,
    daily_targets,
    day_macros,
    derive_fat_from_calories,
    is_within_tolerance,
    macro_differences,
    meal_macros,
    weekly_averages,
)
from lifetracker.nutrition.week_targets import (
    PLAN_MODES,
    build_flat_schedule,
    build_zigzag_schedule,
    calories_for_date,
    format_week_label,
    next_week_start,
    schedule_days,
    target_calories_for_plan,
    week_start_monday,
    weekly_average,
)

__all__ = [
    "PLAN_MODES",
    "balance_warnings",
    "build_flat_schedule",
    "build_zigzag_schedule",
    "calculate_bmr",
    "calculate_macros",
    "calculate_nutrition_targets",
    "calculate_tdee",
    "calories_for_date",
    "compute_totals",
    "daily_targets",
    "day_macros",
    "derive_fat_from_calories",
    "format_week_label",
    "is_within_tolerance",
    "macro_differences",
    "meal_macros",
    "next_week_start",
    "schedule_days",
    "target_calories_for_plan",
    "week_start_monday",
    "weekly_average",
]
