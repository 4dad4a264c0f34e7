"""
Data Models Package

This package contains all Pydantic models used by Life Tracker.
All data flowing through the calculation modules must conform to these schemas.
"""

from lifetracker.models.pay_cycle import (
    AdjustmentRule,
    PayCycle,
    PaydayRule,
)
from lifetracker.models.bill import (
    Bill,
    BillFrequency,
    BillOccurrence,
    EnergyProjection,
    EnergyReading,
    MatchConfidence,
    MatchDiagnostic,
    MatchOutcome,
    MatchResult,
    MonthReconciliation,
    OccurrenceStatus,
    Receipt,
    ReceiptMatch,
    RiskPreference,
    StoredOccurrence,
    SwitchRecommendation,
    TrackedService,
    Transaction,
)
from lifetracker.models.debt import (
    BalancePoint,
    BalanceSnapshot,
    CsvColumnMapping,
    CsvParseResult,
    Debt,
    DebtAllocation,
    DebtPayment,
    DebtPlanReport,
    DebtStatus,
    DebtSummary,
    DebtTransaction,
    DebtType,
    InterestType,
    MonthlyAllocation,
    MonthlyBreakdown,
    PaymentCategory,
    PayoffPlan,
    PayoffScheduleItem,
    PayoffStrategy,
    StrategyComparison,
)
from lifetracker.models.grocery import (
    DiscountCalculation,
    DiscountType,
    GroceryItem,
    MealPlan,
    MealPlanItem,
    MealStatus,
    MealType,
    MultiBuyOffer,
    MultiBuyPrice,
    Product,
    Purchase,
    RetailerGroup,
    ShopReadyItem,
    ShopReadyList,
    ShopReadyTotals,
)
from lifetracker.models.toiletry import (
    OrderByResult,
    PurchaseCalculation,
    ReorderStatus,
    ShippingProfile,
    StockLevel,
    ToiletryAggregateStats,
    ToiletryForecast,
    ToiletryItem,
    UsageConfidence,
    UsageLog,
    UsageRateResult,
    WeightUsageResult,
)
from lifetracker.models.nutrition import (
    ActivityLevel,
    BalanceWarning,
    BalanceWarningType,
    BmrFormula,
    BodyMetrics,
    DayMacros,
    GoalType,
    MacroDifference,
    MacroRules,
    MacroTotals,
    MealMacros,
    NutritionGoals,
    NutritionMode,
    NutritionTargets,
    PlanMode,
    PlanModeConfig,
    ScheduleDay,
    Sex,
    WeeklyCalorieSchedule,
    WeeklyTargetsOverride,
    ZigzagSchedule,
)
from lifetracker.models.investment import (
    DailyChange,
    DailyValue,
    InvestmentTransaction,
    InvestmentTransactionType,
    InvestmentValuation,
    ProjectionPoint,
    ProjectionScenarios,
    ValuationSource,
)
from lifetracker.models.dashboard import (
    Alert,
    AlertType,
    BalanceProjection,
    CycleTransaction,
    DailySpending,
    PayCycleMetrics,
    UpcomingBill,
)
from lifetracker.models.deal import Deal, DealRule, PriceDrop
from lifetracker.models.validation import ValidationIssue, ValidationResult
from lifetracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Pay cycle models
    "AdjustmentRule",
    "PayCycle",
    "PaydayRule",
    # Bill models
    "Bill",
    "BillFrequency",
    "BillOccurrence",
    "EnergyProjection",
    "EnergyReading",
    "MatchConfidence",
    "MatchDiagnostic",
    "MatchOutcome",
    "MatchResult",
    "MonthReconciliation",
    "OccurrenceStatus",
    "Receipt",
    "ReceiptMatch",
    "RiskPreference",
    "StoredOccurrence",
    "SwitchRecommendation",
    "TrackedService",
    "Transaction",
    # Debt models
    "BalancePoint",
    "BalanceSnapshot",
    "CsvColumnMapping",
    "CsvParseResult",
    "Debt",
    "DebtAllocation",
    "DebtPayment",
    "DebtPlanReport",
    "DebtStatus",
    "DebtSummary",
    "DebtTransaction",
    "DebtType",
    "InterestType",
    "MonthlyAllocation",
    "MonthlyBreakdown",
    "PaymentCategory",
    "PayoffPlan",
    "PayoffScheduleItem",
    "PayoffStrategy",
    "StrategyComparison",
    # Grocery models
    "DiscountCalculation",
    "DiscountType",
    "GroceryItem",
    "MealPlan",
    "MealPlanItem",
    "MealStatus",
    "MealType",
    "MultiBuyOffer",
    "MultiBuyPrice",
    "Product",
    "Purchase",
    "RetailerGroup",
    "ShopReadyItem",
    "ShopReadyList",
    "ShopReadyTotals",
    # Toiletry models
    "OrderByResult",
    "PurchaseCalculation",
    "ReorderStatus",
    "ShippingProfile",
    "StockLevel",
    "ToiletryAggregateStats",
    "ToiletryForecast",
    "ToiletryItem",
    "UsageConfidence",
    "UsageLog",
    "UsageRateResult",
    "WeightUsageResult",
    # Nutrition models
    "ActivityLevel",
    "BalanceWarning",
    "BalanceWarningType",
    "BmrFormula",
    "BodyMetrics",
    "DayMacros",
    "GoalType",
    "MacroDifference",
    "MacroRules",
    "MacroTotals",
    "MealMacros",
    "NutritionGoals",
    "NutritionMode",
    "NutritionTargets",
    "PlanMode",
    "PlanModeConfig",
    "ScheduleDay",
    "Sex",
    "WeeklyCalorieSchedule",
    "WeeklyTargetsOverride",
    "ZigzagSchedule",
    # Investment models
    "DailyChange",
    "DailyValue",
    "InvestmentTransaction",
    "InvestmentTransactionType",
    "InvestmentValuation",
    "ProjectionPoint",
    "ProjectionScenarios",
    "ValuationSource",
    # Dashboard models
    "Alert",
    "AlertType",
    "BalanceProjection",
    "CycleTransaction",
    "DailySpending",
    "PayCycleMetrics",
    "UpcomingBill",
    # Deal models
    "Deal",
    "DealRule",
    "PriceDrop",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
