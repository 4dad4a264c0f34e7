"""
Configuration Management for Life Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All tunable business rules are centralized here.
Tolerances, thresholds and the household's payday are household-specific,
so they are read from the environment (or .env) rather than hard-coded
in the calculation modules.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaydayConfig(BaseSettings):
    """When the household gets paid."""

    model_config = SettingsConfigDict(
        env_prefix="PAYDAY_",
        extra="ignore"
    )

    day: int = Field(
        default=20,
        ge=1,
        le=31,
        description="Day of month salary is due (clamped to short months)"
    )
    adjustment_rule: str = Field(
        default="previous_working_day",
        description="How a payday on a weekend/bank holiday is moved"
    )

    @field_validator('adjustment_rule')
    @classmethod
    def validate_adjustment_rule(cls, v: str) -> str:
        allowed = {
            "previous_working_day",
            "next_working_day",
            "closest_working_day",
            "no_adjustment",
        }
        if v not in allowed:
            raise ValueError(f"Unknown adjustment rule: {v}. Allowed: {sorted(allowed)}")
        return v


class MatchingSettings(BaseSettings):
    """Bill occurrence to bank transaction matching."""

    model_config = SettingsConfigDict(
        env_prefix="MATCHING_",
        extra="ignore"
    )

    amount_tolerance: Decimal = Field(
        default=Decimal("1.00"),
        ge=0,
        description="Largest amount difference (GBP) still considered a match"
    )
    date_window_days: int = Field(
        default=3,
        ge=0,
        le=31,
        description="Days either side of the due date a payment may land"
    )
    high_confidence_score: int = Field(
        default=80,
        ge=0,
        le=130,
        description="Score at or above which a match is auto-applied"
    )
    medium_confidence_score: int = Field(
        default=50,
        ge=0,
        le=130,
        description="Score at or above which a match is offered for review"
    )
    receipt_min_score: int = Field(
        default=30,
        ge=0,
        le=110,
        description="Lowest score at which a receipt is linked to a transaction"
    )


class DebtSettings(BaseSettings):
    """Debt payoff simulation."""

    model_config = SettingsConfigDict(
        env_prefix="DEBT_",
        extra="ignore"
    )

    max_projection_months: int = Field(
        default=360,
        ge=1,
        le=1200,
        description="Simulation horizon (30 years by default)"
    )
    paid_off_threshold: Decimal = Field(
        default=Decimal("0.01"),
        ge=0,
        description="Balance at or below which a debt counts as cleared"
    )
    default_strategy: str = Field(
        default="avalanche",
        pattern="^(avalanche|snowball)$",
        description="Strategy used when none is requested"
    )


class DashboardSettings(BaseSettings):
    """Pay-cycle dashboard alerts."""

    model_config = SettingsConfigDict(
        env_prefix="DASHBOARD_",
        extra="ignore"
    )

    runway_threshold_per_day: Decimal = Field(
        default=Decimal("10"),
        ge=0,
        description="Discretionary GBP/day below which runway is at risk"
    )
    over_pace_alert_amount: Decimal = Field(
        default=Decimal("50"),
        ge=0,
        description="Overspend versus pace that raises an alert"
    )
    large_bill_amount: Decimal = Field(
        default=Decimal("100"),
        ge=0,
        description="Bills at or above this are flagged when due soon"
    )
    large_bill_window_days: int = Field(
        default=3,
        ge=0,
        description="How many days ahead large bills are flagged"
    )


class GrocerySettings(BaseSettings):
    """Shopping list generation."""

    model_config = SettingsConfigDict(
        env_prefix="GROCERY_",
        extra="ignore"
    )

    weeks_per_month: Decimal = Field(
        default=Decimal("4.33"),
        gt=0,
        description="Multiplier from a weekly shop to a monthly forecast"
    )
    unassigned_retailer: str = Field(
        default="Unassigned",
        min_length=1,
        description="Bucket for products without a retailer"
    )


class ToiletrySettings(BaseSettings):
    """Toiletry forecasting and reordering."""

    model_config = SettingsConfigDict(
        env_prefix="TOILETRY_",
        extra="ignore"
    )

    low_stock_threshold_days: int = Field(
        default=14,
        ge=0,
        description="Days of stock at or below which an item is 'low'"
    )
    safety_buffer_days: int = Field(
        default=2,
        ge=0,
        description="Extra days added to delivery lead time"
    )
    usage_lookback_days: int = Field(
        default=30,
        ge=1,
        description="Window of usage logs used to estimate daily usage"
    )


class NutritionSettings(BaseSettings):
    """Fallback targets and warning thresholds for meal planning."""

    model_config = SettingsConfigDict(
        env_prefix="NUTRITION_",
        extra="ignore"
    )

    default_calories: int = Field(
        default=2000,
        gt=0,
        description="Daily kcal target when the user has set none"
    )
    default_protein_grams: float = Field(default=150, ge=0)
    default_carbs_grams: float = Field(default=200, ge=0)
    default_fat_grams: float = Field(default=65, ge=0)

    calorie_tolerance: float = Field(
        default=5,
        ge=0,
        description="kcal either side of target that still counts as on target"
    )
    macro_tolerance_grams: float = Field(default=1, ge=0)

    low_meal_calories: float = Field(
        default=100,
        ge=0,
        description="A planned meal under this many kcal is flagged"
    )
    min_protein_percent: float = Field(default=10, ge=0, le=100)
    max_fat_percent: float = Field(default=50, ge=0, le=100)
    calorie_warning_margin: float = Field(
        default=200,
        ge=0,
        description="kcal off target before a day is flagged"
    )
    protein_warning_margin_grams: float = Field(default=20, ge=0)


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level written by the audit logger"
    )
    currency_symbol: str = Field(
        default="£",
        max_length=3,
        description="Symbol used in user-facing messages"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are built on access so a bad section only fails
    # the code that needs it

    @property
    def payday(self) -> PaydayConfig:
        return PaydayConfig()

    @property
    def matching(self) -> MatchingSettings:
        return MatchingSettings()

    @property
    def debt(self) -> DebtSettings:
        return DebtSettings()

    @property
    def dashboard(self) -> DashboardSettings:
        return DashboardSettings()

    @property
    def grocery(self) -> GrocerySettings:
        return GrocerySettings()

    @property
    def toiletry(self) -> ToiletrySettings:
        return ToiletrySettings()

    @property
    def nutrition(self) -> NutritionSettings:
        return NutritionSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for each section that failed.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in (
        "payday", "matching", "debt", "dashboard", "grocery", "toiletry", "nutrition", "app",
    ):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
