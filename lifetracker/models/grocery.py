"""
Grocery Models for Life Tracker

Products, meal plans and the shop-ready list built from them.
Weights are in grams (float); prices are Decimal GBP.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DiscountType(str, Enum):
    """Loyalty schemes a basket can be paid through."""
    TESCO_BENEFITS = "tesco_benefits"
    EASYSAVER = "easysaver"
    CLUBCARD = "clubcard"
    REWARDGATEWAY = "rewardgateway"
    NONE = "none"
    OTHER = "other"


class MealType(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class MealStatus(str, Enum):
    PLANNED = "planned"
    EATING_OUT = "eating_out"  # Calories logged without items
    SKIPPED = "skipped"  # Contributes nothing to the shop


class Product(BaseModel):
    """A grocery product with pricing and stock levels."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    retailer: Optional[str] = None
    price: Decimal = Field(
        ...,
        ge=0,
        description="Price per pack, or per 100g when sold loose"
    )
    pack_size_grams: Optional[float] = Field(default=None, ge=0)
    packaging_weight_grams: Optional[float] = Field(default=None, ge=0)
    quantity_on_hand: float = Field(default=0, ge=0)
    quantity_in_use: float = Field(default=0, ge=0)
    offer_label: Optional[str] = Field(
        default=None,
        description="Free text promotion, e.g. '3 for 2'"
    )

    # Nutrition per 100g
    calories_per_100g: float = Field(default=0, ge=0)
    protein_per_100g: float = Field(default=0, ge=0)
    carbs_per_100g: float = Field(default=0, ge=0)
    fat_per_100g: float = Field(default=0, ge=0)
    ignore_macros: bool = Field(
        default=False,
        description="Counted for shopping but not for nutrition (water, seasoning)"
    )


class MealPlanItem(BaseModel):
    id: Optional[str] = None
    product: Product
    meal_type: MealType
    quantity_grams: float = Field(..., ge=0)


class MealPlan(BaseModel):
    """One day of planned meals."""

    plan_date: date
    items: list[MealPlanItem] = Field(default_factory=list)
    breakfast_status: MealStatus = MealStatus.PLANNED
    lunch_status: MealStatus = MealStatus.PLANNED
    dinner_status: MealStatus = MealStatus.PLANNED
    snack_status: MealStatus = MealStatus.PLANNED
    eating_out_breakfast_calories: float = Field(default=0, ge=0)
    eating_out_lunch_calories: float = Field(default=0, ge=0)
    eating_out_dinner_calories: float = Field(default=0, ge=0)
    eating_out_snack_calories: float = Field(default=0, ge=0)

    def status_for(self, meal_type: MealType) -> MealStatus:
        return getattr(self, f"{meal_type.value}_status")

    def eating_out_calories_for(self, meal_type: MealType) -> float:
        return getattr(self, f"eating_out_{meal_type.value}_calories")


# =============================================================================
# DISCOUNT RESULTS
# =============================================================================

class DiscountCalculation(BaseModel):
    original_price: Decimal
    rounded_price: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    final_price: Decimal


class MultiBuyOffer(BaseModel):
    model_config = ConfigDict(frozen=True)

    buy_quantity: int = Field(..., gt=0, description="Items in one offer set")
    pay_quantity: int = Field(..., gt=0, description="Items paid for per set")
    offer_label: str


class MultiBuyPrice(BaseModel):
    gross_cost: Decimal
    discount_amount: Decimal
    final_cost: Decimal


# =============================================================================
# SHOPPING LISTS
# =============================================================================

class GroceryItem(BaseModel):
    """Total requirement for one product across a meal plan."""

    product: Product
    required_grams: float
    purchase_quantity: int
    purchase_units: str
    total_cost: Decimal


class ShopReadyItem(BaseModel):
    product: Product
    retailer: str
    required_grams: float
    stock_on_hand_grams: float
    net_needed_grams: float
    purchase_packs: int = 0
    pack_net_grams: float
    gross_cost: Decimal = Decimal("0")
    multi_buy_saving: Decimal = Decimal("0")


class RetailerGroup(BaseModel):
    retailer: str
    items: list[ShopReadyItem] = Field(default_factory=list)
    subtotal: Decimal
    discount_type: DiscountType
    discount_amount: Decimal
    final_total: Decimal


class ShopReadyTotals(BaseModel):
    gross_cost: Decimal = Decimal("0")
    total_discount: Decimal = Decimal("0")
    final_cost: Decimal = Decimal("0")
    item_count: int = 0


class ShopReadyList(BaseModel):
    by_retailer: list[RetailerGroup] = Field(default_factory=list)
    already_covered: list[ShopReadyItem] = Field(default_factory=list)
    totals: ShopReadyTotals = Field(default_factory=ShopReadyTotals)


class Purchase(BaseModel):
    """A completed grocery or toiletry purchase."""

    purchase_date: date
    final_cost: Optional[Decimal] = None
    discount_amount: Optional[Decimal] = None
