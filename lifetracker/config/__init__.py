"""Configuration package."""

from lifetracker.config.settings import (
    AppSettings,
    DashboardSettings,
    DebtSettings,
    GrocerySettings,
    MatchingSettings,
    NutritionSettings,
    PaydayConfig,
    Settings,
    ToiletrySettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "DashboardSettings",
    "DebtSettings",
    "GrocerySettings",
    "MatchingSettings",
    "NutritionSettings",
    "PaydayConfig",
    "Settings",
    "ToiletrySettings",
    "get_settings",
    "validate_all_settings",
]
