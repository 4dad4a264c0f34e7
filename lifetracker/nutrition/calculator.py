"""
Nutrition Target Calculator

BMR -> TDEE -> goal-adjusted calories -> protein/fat/carb grams.
Metric units only (cm, kg). Input ranges are enforced by BodyMetrics.
"""

from typing import Optional

import structlog

from lifetracker.models.nutrition import (
    ActivityLevel,
    BmrFormula,
    BodyMetrics,
    GoalType,
    MacroRules,
    NutritionTargets,
    Sex,
)
from lifetracker.nutrition.week_targets import round_half_up


logger = structlog.get_logger(__name__)

ACTIVITY_MULTIPLIERS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHTLY_ACTIVE: 1.375,
    ActivityLevel.MODERATELY_ACTIVE: 1.55,
    ActivityLevel.VERY_ACTIVE: 1.725,
    ActivityLevel.EXTREMELY_ACTIVE: 1.9,
}

ACTIVITY_LABELS: dict[ActivityLevel, str] = {
    ActivityLevel.SEDENTARY: "Sedentary (little or no exercise)",
    ActivityLevel.LIGHTLY_ACTIVE: "Lightly Active (1-3 days/week)",
    ActivityLevel.MODERATELY_ACTIVE: "Moderately Active (3-5 days/week)",
    ActivityLevel.VERY_ACTIVE: "Very Active (6-7 days/week)",
    ActivityLevel.EXTREMELY_ACTIVE: "Extremely Active (physical job)",
}

GOAL_ADJUSTMENTS: dict[GoalType, int] = {
    GoalType.MAINTAIN: 0,
    GoalType.CUT: -300,
    GoalType.BULK: 200,
}

GOAL_LABELS: dict[GoalType, str] = {
    GoalType.MAINTAIN: "Maintain Weight",
    GoalType.CUT: "Cut (-300 kcal)",
    GoalType.BULK: "Lean Bulk (+200 kcal)",
}

PROTEIN_KCAL_PER_GRAM = 4
CARBS_KCAL_PER_GRAM = 4
FAT_KCAL_PER_GRAM = 9


def mifflin_st_jeor(weight_kg: float, height_cm: float, age: int, sex: Sex) -> float:
    """Mifflin-St Jeor (1990): 10w + 6.25h - 5a, +5 for men, -161 for women."""
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    return base + 5 if sex == Sex.MALE else base - 161


def harris_benedict(weight_kg: float, height_cm: float, age: int, sex: Sex) -> float:
    """Revised Harris-Benedict (1984)."""
    if sex == Sex.MALE:
        return 13.397 * weight_kg + 4.799 * height_cm - 5.677 * age + 88.362
    return 9.247 * weight_kg + 3.098 * height_cm - 4.330 * age + 447.593


def katch_mcardle(weight_kg: float, body_fat_percent: float) -> float:
    """370 + 21.6 x lean body mass."""
    lean_body_mass = weight_kg * (1 - body_fat_percent / 100)
    return 370 + 21.6 * lean_body_mass


def calculate_bmr(metrics: BodyMetrics) -> float:
    if metrics.formula == BmrFormula.KATCH_MCARDLE:
        # BodyMetrics guarantees body fat for this formula
        return katch_mcardle(metrics.weight_kg, metrics.body_fat_percent)
    if metrics.formula == BmrFormula.HARRIS_BENEDICT:
        return harris_benedict(metrics.weight_kg, metrics.height_cm, metrics.age, metrics.sex)
    return mifflin_st_jeor(metrics.weight_kg, metrics.height_cm, metrics.age, metrics.sex)


def calculate_tdee(bmr: float, activity_level: ActivityLevel) -> float:
    return bmr * ACTIVITY_MULTIPLIERS[activity_level]


def calculate_macros(
    target_calories: int,
    weight_kg: float,
    rules: Optional[MacroRules] = None,
) -> tuple[int, int, int]:
    """
    (protein, fat, carbs) grams for a calorie target.

    Protein and fat are set per kg of bodyweight; carbs take whatever
    calories are left, never below zero.
    """
    rules = rules or MacroRules()
    protein = round_half_up(rules.protein_per_kg * weight_kg)
    fat = round_half_up(rules.fat_per_kg * weight_kg)

    remaining = max(
        0, target_calories - protein * PROTEIN_KCAL_PER_GRAM - fat * FAT_KCAL_PER_GRAM
    )
    carbs = round_half_up(remaining / CARBS_KCAL_PER_GRAM)
    return protein, fat, carbs


def calculate_nutrition_targets(
    metrics: BodyMetrics,
    goal: GoalType = GoalType.MAINTAIN,
    rules: Optional[MacroRules] = None,
) -> NutritionTargets:
    bmr = calculate_bmr(metrics)
    tdee = calculate_tdee(bmr, metrics.activity_level)
    target_calories = round_half_up(tdee + GOAL_ADJUSTMENTS[goal])
    protein, fat, carbs = calculate_macros(target_calories, metrics.weight_kg, rules)

    logger.debug(
        "nutrition_targets_calculated",
        formula=metrics.formula.value,
        goal=goal.value,
        target_calories=target_calories,
    )
    return NutritionTargets(
        bmr=round_half_up(bmr),
        tdee=round_half_up(tdee),
        target_calories=target_calories,
        protein_grams=protein,
        fat_grams=fat,
        carbs_grams=carbs,
    )
