"""
Daily Targets and Macro Totals

Resolves the calorie/macro targets for a date and totals what a meal
plan actually provides, so the planner and the shopping list agree on
the same numbers.

DESIGN DECISION: Fat targets are always derived from the calories left
after protein and carbs. A stored fat target is ignored.
"""

from datetime import date
from typing import Iterable, Mapping, Optional

import structlog

from lifetracker.config import NutritionSettings, get_settings
from lifetracker.models.grocery import MealPlan, MealPlanItem, MealStatus, MealType
from lifetracker.models.nutrition import (
    BalanceWarning,
    BalanceWarningType,
    DayMacros,
    MacroDifference,
    MacroTotals,
    MealMacros,
    NutritionGoals,
    NutritionMode,
    WeeklyTargetsOverride,
)
from lifetracker.nutrition.week_targets import (
    calories_for_date,
    round_half_up,
    week_start_monday,
)


logger = structlog.get_logger(__name__)

MEAL_ORDER = [MealType.BREAKFAST, MealType.LUNCH, MealType.DINNER, MealType.SNACK]


def derive_fat_from_calories(target_calories: float, protein_grams: float, carbs_grams: float) -> int:
    """Fat grams filling the calories left after protein and carbs, never below 0."""
    remaining = target_calories - protein_grams * 4 - carbs_grams * 4
    return max(0, round_half_up(remaining / 9))


def daily_targets(
    d: date,
    goals: Optional[NutritionGoals],
    override: Optional[WeeklyTargetsOverride] = None,
    settings: Optional[NutritionSettings] = None,
) -> MacroTotals:
    """
    The calorie and macro targets for one date.

    A weekly override for the week containing `d` wins. Otherwise
    Saturday and Sunday use the weekend targets when they are enabled,
    each falling back to the everyday value and then to the configured
    default.
    """
    settings = settings or get_settings().nutrition

    if goals is None:
        return MacroTotals(
            calories=settings.default_calories,
            protein=settings.default_protein_grams,
            carbs=settings.default_carbs_grams,
            fat=settings.default_fat_grams,
        )

    protein = _first_set(goals.protein_target_grams, settings.default_protein_grams)
    carbs = _first_set(goals.carbs_target_grams, settings.default_carbs_grams)

    if override is not None and week_start_monday(d) == override.week_start_date:
        calories = calories_for_date(d, override.schedule)
        protein = _first_set(override.protein, protein)
        carbs = _first_set(override.carbs, carbs)
    elif d.weekday() >= 5 and goals.weekend_targets_enabled:
        calories = _first_set(
            goals.weekend_calorie_target, goals.daily_calorie_target, settings.default_calories
        )
        protein = _first_set(goals.weekend_protein_target_grams, protein)
        carbs = _first_set(goals.weekend_carbs_target_grams, carbs)
    else:
        calories = _first_set(goals.daily_calorie_target, settings.default_calories)

    return MacroTotals(
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=derive_fat_from_calories(calories, protein, carbs),
    )


def _first_set(*values):
    return next(v for v in values if v is not None)


def item_macros(item: MealPlanItem, grams: Optional[float] = None) -> MacroTotals:
    product = item.product
    if product.ignore_macros:
        return MacroTotals()

    multiplier = (item.quantity_grams if grams is None else grams) / 100
    return MacroTotals(
        calories=product.calories_per_100g * multiplier,
        protein=product.protein_per_100g * multiplier,
        carbs=product.carbs_per_100g * multiplier,
        fat=product.fat_per_100g * multiplier,
    )


def compute_totals(
    items: Iterable[MealPlanItem],
    grams_override: Optional[Mapping[str, float]] = None,
) -> MacroTotals:
    """
    Macros provided by the items.

    `grams_override` maps item ids to replacement quantities. Items with
    no positive quantity or with macros ignored count for nothing.
    """
    grams_override = grams_override or {}
    totals = MacroTotals()
    for item in items:
        grams = grams_override.get(item.id, item.quantity_grams)
        if grams <= 0:
            continue
        totals = totals.plus(item_macros(item, grams))
    return totals


def is_within_tolerance(
    achieved: MacroTotals,
    targets: MacroTotals,
    settings: Optional[NutritionSettings] = None,
) -> bool:
    settings = settings or get_settings().nutrition
    diff = achieved.minus(targets)
    return (
        abs(diff.calories) <= settings.calorie_tolerance
        and abs(diff.protein) <= settings.macro_tolerance_grams
        and abs(diff.carbs) <= settings.macro_tolerance_grams
        and abs(diff.fat) <= settings.macro_tolerance_grams
    )


def macro_differences(
    achieved: MacroTotals,
    targets: MacroTotals,
    settings: Optional[NutritionSettings] = None,
) -> list[MacroDifference]:
    """Rounded misses worth showing: calories at or past tolerance, macros past it."""
    settings = settings or get_settings().nutrition
    diff = achieved.minus(targets)
    differences = []

    calories = round_half_up(diff.calories)
    if abs(calories) >= settings.calorie_tolerance:
        differences.append(MacroDifference(macro="Calories", diff=calories))

    for name, value in (("Protein", diff.protein), ("Carbs", diff.carbs), ("Fat", diff.fat)):
        grams = round_half_up(value)
        if abs(grams) > settings.macro_tolerance_grams:
            differences.append(MacroDifference(macro=name, diff=grams, unit="g"))

    return differences


def meal_macros(
    items: Iterable[MealPlanItem],
    meal_type: MealType,
    status: MealStatus,
    eating_out_calories: float = 0,
) -> MealMacros:
    """Skipped meals count nothing; eating out counts its logged calories only."""
    if status == MealStatus.SKIPPED:
        return MealMacros(meal_type=meal_type, status=status)
    if status == MealStatus.EATING_OUT:
        return MealMacros(meal_type=meal_type, status=status, calories=eating_out_calories)

    totals = compute_totals(item for item in items if item.meal_type == meal_type)
    return MealMacros(meal_type=meal_type, status=status, **totals.model_dump())


def day_macros(plan: MealPlan, goals: Optional[NutritionGoals] = None) -> DayMacros:
    """
    Per-meal and whole-day macros for one plan.

    In target-based mode the day also carries its difference from the
    everyday targets, missing targets counting as zero.
    """
    meals = [
        meal_macros(
            plan.items,
            meal_type,
            plan.status_for(meal_type),
            plan.eating_out_calories_for(meal_type),
        )
        for meal_type in MEAL_ORDER
    ]

    totals = MacroTotals()
    for meal in meals:
        totals = totals.plus(meal)

    target_diff = None
    if goals is not None and goals.mode == NutritionMode.TARGET_BASED:
        target_diff = totals.minus(MacroTotals(
            calories=goals.daily_calorie_target or 0,
            protein=goals.protein_target_grams or 0,
            carbs=goals.carbs_target_grams or 0,
            fat=goals.fat_target_grams or 0,
        ))

    return DayMacros(plan_date=plan.plan_date, meals=meals, totals=totals, target_diff=target_diff)


def weekly_averages(days: Iterable[DayMacros]) -> MacroTotals:
    """Average over days with at least one planned or eaten-out meal."""
    counted = [
        day for day in days
        if any(meal.status != MealStatus.SKIPPED for meal in day.meals)
    ]
    if not counted:
        return MacroTotals()

    totals = MacroTotals()
    for day in counted:
        totals = totals.plus(day.totals)

    count = len(counted)
    return MacroTotals(
        calories=totals.calories / count,
        protein=totals.protein / count,
        carbs=totals.carbs / count,
        fat=totals.fat / count,
    )


def balance_warnings(
    day: DayMacros,
    goals: Optional[NutritionGoals] = None,
    settings: Optional[NutritionSettings] = None,
) -> list[BalanceWarning]:
    """
    Flags for a day: tiny planned meals, lopsided macro ratios, and in
    target-based mode a day too far from its calorie or protein target.
    """
    settings = settings or get_settings().nutrition
    warnings = []

    for meal in day.meals:
        if meal.status != MealStatus.PLANNED:
            continue
        if 0 < meal.calories < settings.low_meal_calories:
            warnings.append(BalanceWarning(
                warning_type=BalanceWarningType.LOW_CALORIES,
                message=f"{meal.meal_type.value} has very low calories "
                        f"({round_half_up(meal.calories)} kcal)",
                meal_type=meal.meal_type,
                warning_date=day.plan_date,
            ))

    protein_kcal = day.totals.protein * 4
    fat_kcal = day.totals.fat * 9
    macro_kcal = protein_kcal + day.totals.carbs * 4 + fat_kcal
    if day.totals.calories > 0 and macro_kcal > 0:
        protein_percent = protein_kcal / macro_kcal * 100
        fat_percent = fat_kcal / macro_kcal * 100

        if protein_percent < settings.min_protein_percent:
            warnings.append(BalanceWarning(
                warning_type=BalanceWarningType.MACRO_SKEWED,
                message=f"Very low protein ratio ({round_half_up(protein_percent)}%)",
                warning_date=day.plan_date,
            ))
        if fat_percent > settings.max_fat_percent:
            warnings.append(BalanceWarning(
                warning_type=BalanceWarningType.MACRO_SKEWED,
                message=f"High fat ratio ({round_half_up(fat_percent)}%)",
                warning_date=day.plan_date,
            ))

    if (
        goals is not None
        and goals.mode == NutritionMode.TARGET_BASED
        and day.target_diff is not None
    ):
        calories = day.target_diff.calories
        protein = day.target_diff.protein
        if abs(calories) > settings.calorie_warning_margin:
            warnings.append(BalanceWarning(
                warning_type=BalanceWarningType.TARGET_UNACHIEVABLE,
                message=f"{round_half_up(abs(calories))} kcal "
                        f"{'over' if calories > 0 else 'under'} target",
                warning_date=day.plan_date,
            ))
        if abs(protein) > settings.protein_warning_margin_grams:
            warnings.append(BalanceWarning(
                warning_type=BalanceWarningType.TARGET_UNACHIEVABLE,
                message=f"{round_half_up(abs(protein))}g protein "
                        f"{'over' if protein > 0 else 'under'} target",
                warning_date=day.plan_date,
            ))

    if warnings:
        logger.debug("balance_warnings", plan_date=day.plan_date.isoformat(), count=len(warnings))
    return warnings
