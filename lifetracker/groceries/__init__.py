"""Grocery lists and retailer discounts."""

from lifetracker.groceries.discounts import (
    RETAILER_OPTIONS,
    calculate_actual_monthly_spend,
    calculate_basket_discount,
    calculate_loyalty_discount,
    calculate_multi_buy_price,
    calculate_total_savings,
    default_retailer_discount,
    parse_multi_buy_offer,
    retailer_discount_options,
)
from lifetracker.groceries.shopping_list import (
    forecasted_monthly_spend,
    forecasted_weekly_spend,
    generate_grocery_list,
    generate_shop_ready_list,
    reorder_alerts,
)

__all__ = [
    "RETAILER_OPTIONS",
    "calculate_actual_monthly_spend",
    "calculate_basket_discount",
    "calculate_loyalty_discount",
    "calculate_multi_buy_price",
    "calculate_total_savings",
    "default_retailer_discount",
    "forecasted_monthly_spend",
    "forecasted_weekly_spend",
    "generate_grocery_list",
    "generate_shop_ready_list",
    "parse_multi_buy_offer",
    "reorder_alerts",
    "retailer_discount_options",
]
