"""
Nutrition Models for Life Tracker

Calorie schedules, body metrics and macro totals used to plan meals
alongside the shopping list. Energy is in kcal, macros in grams.

DESIGN DECISION: Fat targets are always derived from the calories left
after protein and carbs, so calories and macros can never disagree.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from lifetracker.models.grocery import MealStatus, MealType


# =============================================================================
# ENUMS
# =============================================================================

class PlanMode(str, Enum):
    """Weekly weight goal."""
    MAINTAIN = "maintain"
    MILD_LOSS = "mild_loss"
    LOSS = "loss"
    EXTREME_LOSS = "extreme_loss"


class ZigzagSchedule(str, Enum):
    """
    How a week's calories are spread over the days.

    SCHEDULE_1: maintenance at the weekend, weekdays carry the deficit
    SCHEDULE_2: low, medium and high days alternating through the week
    """
    SCHEDULE_1 = "schedule_1"
    SCHEDULE_2 = "schedule_2"


class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"


class ActivityLevel(str, Enum):
    SEDENTARY = "sedentary"
    LIGHTLY_ACTIVE = "lightly_active"
    MODERATELY_ACTIVE = "moderately_active"
    VERY_ACTIVE = "very_active"
    EXTREMELY_ACTIVE = "extremely_active"


class BmrFormula(str, Enum):
    MIFFLIN_ST_JEOR = "mifflin_st_jeor"
    HARRIS_BENEDICT = "harris_benedict"
    KATCH_MCARDLE = "katch_mcardle"  # Needs body fat %


class GoalType(str, Enum):
    MAINTAIN = "maintain"
    CUT = "cut"
    BULK = "bulk"


class NutritionMode(str, Enum):
    """Whether the user plans freely or against calorie/macro targets."""
    MANUAL = "manual"
    TARGET_BASED = "target_based"


class BalanceWarningType(str, Enum):
    LOW_CALORIES = "low_calories"
    MACRO_SKEWED = "macro_skewed"
    TARGET_UNACHIEVABLE = "target_unachievable"


# =============================================================================
# WEEKLY SCHEDULES
# =============================================================================

class PlanModeConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    weekly_deficit_kg: float
    daily_calorie_adjustment: int = Field(
        ...,
        description="Negative for a deficit, positive for a surplus"
    )


class WeeklyCalorieSchedule(BaseModel):
    """Calorie target for each day of a Monday-Sunday week."""

    monday: int = Field(..., ge=0)
    tuesday: int = Field(..., ge=0)
    wednesday: int = Field(..., ge=0)
    thursday: int = Field(..., ge=0)
    friday: int = Field(..., ge=0)
    saturday: int = Field(..., ge=0)
    sunday: int = Field(..., ge=0)

    def days(self) -> list[int]:
        """Targets in week order, Monday first."""
        return [
            self.monday, self.tuesday, self.wednesday, self.thursday,
            self.friday, self.saturday, self.sunday,
        ]

    @property
    def total(self) -> int:
        return sum(self.days())


class ScheduleDay(BaseModel):
    day: str
    calories: int


class WeeklyTargetsOverride(BaseModel):
    """A week-specific calorie schedule replacing the everyday targets."""

    week_start_date: date = Field(..., description="Monday the week starts on")
    schedule: WeeklyCalorieSchedule
    protein: Optional[float] = Field(default=None, ge=0)
    carbs: Optional[float] = Field(default=None, ge=0)
    fat: Optional[float] = Field(
        default=None,
        ge=0,
        description="Stored but ignored; fat is derived from calories"
    )

    @model_validator(mode='after')
    def validate_monday(self) -> 'WeeklyTargetsOverride':
        if self.week_start_date.weekday() != 0:
            raise ValueError("week_start_date must be a Monday")
        return self


# =============================================================================
# BODY METRICS AND TARGETS
# =============================================================================

class BodyMetrics(BaseModel):
    """Inputs to the BMR/TDEE calculator, metric units."""

    age: int = Field(..., ge=15, le=100)
    sex: Sex
    height_cm: float = Field(..., ge=100, le=250)
    weight_kg: float = Field(..., ge=30, le=300)
    activity_level: ActivityLevel = ActivityLevel.SEDENTARY
    body_fat_percent: Optional[float] = Field(default=None, ge=3, le=60)
    formula: BmrFormula = BmrFormula.MIFFLIN_ST_JEOR

    @model_validator(mode='after')
    def validate_body_fat_for_formula(self) -> 'BodyMetrics':
        if self.formula == BmrFormula.KATCH_MCARDLE and self.body_fat_percent is None:
            raise ValueError("Katch-McArdle formula requires body fat percentage")
        return self


class MacroRules(BaseModel):
    protein_per_kg: float = Field(default=2.2, ge=0, description="g per kg bodyweight")
    fat_per_kg: float = Field(default=0.8, ge=0, description="g per kg bodyweight")


class NutritionTargets(BaseModel):
    """Calculator output, all values rounded to whole numbers."""

    bmr: int
    tdee: int
    target_calories: int
    protein_grams: int
    fat_grams: int
    carbs_grams: int

    def is_balanced(self, tolerance: int = 5) -> bool:
        """True when the macros add back up to the calorie target."""
        calories = self.protein_grams * 4 + self.carbs_grams * 4 + self.fat_grams * 9
        return abs(calories - self.target_calories) <= tolerance


class NutritionGoals(BaseModel):
    """A household member's everyday targets, with optional weekend values."""

    mode: NutritionMode = NutritionMode.MANUAL
    daily_calorie_target: Optional[int] = Field(default=None, ge=0)
    protein_target_grams: Optional[float] = Field(default=None, ge=0)
    carbs_target_grams: Optional[float] = Field(default=None, ge=0)
    fat_target_grams: Optional[float] = Field(default=None, ge=0)
    weekend_targets_enabled: bool = False
    weekend_calorie_target: Optional[int] = Field(default=None, ge=0)
    weekend_protein_target_grams: Optional[float] = Field(default=None, ge=0)
    weekend_carbs_target_grams: Optional[float] = Field(default=None, ge=0)


# =============================================================================
# MACRO TOTALS
# =============================================================================

class MacroTotals(BaseModel):
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0

    def plus(self, other: 'MacroTotals') -> 'MacroTotals':
        return MacroTotals(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
        )

    def minus(self, other: 'MacroTotals') -> 'MacroTotals':
        return MacroTotals(
            calories=self.calories - other.calories,
            protein=self.protein - other.protein,
            carbs=self.carbs - other.carbs,
            fat=self.fat - other.fat,
        )


class MealMacros(MacroTotals):
    meal_type: MealType
    status: MealStatus


class DayMacros(BaseModel):
    plan_date: date
    meals: list[MealMacros] = Field(default_factory=list)
    totals: MacroTotals = Field(default_factory=MacroTotals)
    target_diff: Optional[MacroTotals] = Field(
        default=None,
        description="Totals minus targets; only in target-based mode"
    )


class BalanceWarning(BaseModel):
    warning_type: BalanceWarningType
    message: str
    meal_type: Optional[MealType] = None
    warning_date: Optional[date] = None


class MacroDifference(BaseModel):
    macro: str
    diff: int
    unit: str = ""
