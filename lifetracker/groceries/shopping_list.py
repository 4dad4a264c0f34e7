"""
Shopping Lists

Turns meal plans into what to buy: first the raw requirement per
product, then a shop-ready list with stock subtracted, whole packs,
multi-buy offers and one loyalty discount per retailer basket.
"""

import math
from decimal import Decimal
from typing import Iterable, Mapping, Optional

import structlog

from lifetracker.config import get_settings
from lifetracker.groceries.discounts import (
    calculate_basket_discount,
    calculate_multi_buy_price,
    parse_multi_buy_offer,
)
from lifetracker.models.grocery import (
    DiscountType,
    GroceryItem,
    MealPlan,
    MealStatus,
    Product,
    RetailerGroup,
    ShopReadyItem,
    ShopReadyList,
    ShopReadyTotals,
)


logger = structlog.get_logger(__name__)


def _format_grams(grams: float) -> str:
    return f"{grams:g}"


def generate_grocery_list(plans: Iterable[MealPlan]) -> list[GroceryItem]:
    """
    Total grams needed per product across the plans, sorted by name.

    Items in skipped meals are left out. Products with a pack size are
    bought in whole packs; loose products are priced per 100g.
    """
    products: dict[str, Product] = {}
    grams: dict[str, float] = {}

    for plan in plans:
        for item in plan.items:
            if plan.status_for(item.meal_type) == MealStatus.SKIPPED:
                continue
            product_id = item.product.id
            products.setdefault(product_id, item.product)
            grams[product_id] = grams.get(product_id, 0) + item.quantity_grams

    grocery_items = []
    for product_id, product in products.items():
        total_grams = grams[product_id]
        pack_size = product.pack_size_grams

        if pack_size and pack_size > 0:
            quantity = math.ceil(total_grams / pack_size)
            units = f"× {_format_grams(pack_size)}g"
            cost = product.price * quantity
        else:
            quantity = math.ceil(total_grams)
            units = "g"
            cost = Decimal(str(total_grams)) / 100 * product.price

        grocery_items.append(GroceryItem(
            product=product,
            required_grams=total_grams,
            purchase_quantity=quantity,
            purchase_units=units,
            total_cost=cost,
        ))

    return sorted(grocery_items, key=lambda g: g.product.name.lower())


def _net_pack_grams(product: Product, required_grams: float) -> float:
    """Usable grams per pack; falls back to the pack size, then the requirement."""
    pack_size = product.pack_size_grams or 0
    packaging = product.packaging_weight_grams or 0
    net = max(0.0, pack_size - packaging)
    if net <= 0:
        net = product.pack_size_grams or required_grams
    return net


def _build_shop_item(product: Product, required_grams: float, retailer: str) -> ShopReadyItem:
    pack_net = _net_pack_grams(product, required_grams)
    # Opened packs count as stock too
    stock = (product.quantity_on_hand + product.quantity_in_use) * pack_net
    net_needed = max(0.0, required_grams - stock)

    item = ShopReadyItem(
        product=product,
        retailer=retailer,
        required_grams=required_grams,
        stock_on_hand_grams=stock,
        net_needed_grams=net_needed,
        pack_net_grams=pack_net,
    )
    if net_needed == 0:
        return item

    packs = math.ceil(net_needed / pack_net) if pack_net > 0 else 1
    price = calculate_multi_buy_price(
        product.price, packs, parse_multi_buy_offer(product.offer_label)
    )
    return item.model_copy(update={
        "purchase_packs": packs,
        "gross_cost": price.final_cost,
        "multi_buy_saving": price.discount_amount,
    })


def generate_shop_ready_list(
    plans: Iterable[MealPlan],
    products: Iterable[Product] = (),
    retailer_discounts: Optional[Mapping[str, DiscountType]] = None,
) -> ShopReadyList:
    """
    What to buy, grouped by retailer.

    `products` supplies up-to-date stock and offers for products in the
    plans. Items fully covered by stock are listed separately. Each
    retailer's basket gets its discount applied once; retailers are
    alphabetical with the unassigned bucket last.
    """
    unassigned = get_settings().grocery.unassigned_retailer
    retailer_discounts = retailer_discounts or {}
    latest = {p.id: p for p in products}

    by_retailer: dict[str, list[ShopReadyItem]] = {}
    already_covered = []

    for grocery_item in generate_grocery_list(plans):
        product = latest.get(grocery_item.product.id, grocery_item.product)
        retailer = product.retailer or unassigned
        item = _build_shop_item(product, grocery_item.required_grams, retailer)

        if item.net_needed_grams == 0:
            already_covered.append(item)
        else:
            by_retailer.setdefault(retailer, []).append(item)

    groups = []
    totals = ShopReadyTotals()
    for retailer, items in by_retailer.items():
        subtotal = sum((i.gross_cost for i in items), Decimal("0"))
        discount_type = retailer_discounts.get(retailer, DiscountType.NONE)
        discount = calculate_basket_discount(subtotal, discount_type)

        groups.append(RetailerGroup(
            retailer=retailer,
            items=items,
            subtotal=subtotal,
            discount_type=discount_type,
            discount_amount=discount.discount_amount,
            final_total=discount.final_price,
        ))
        totals.gross_cost += subtotal
        totals.total_discount += discount.discount_amount
        totals.final_cost += discount.final_price
        totals.item_count += len(items)

    groups.sort(key=lambda g: (g.retailer == unassigned, g.retailer.lower()))

    logger.debug(
        "shop_ready_list_built",
        retailers=len(groups),
        items=totals.item_count,
        covered=len(already_covered),
    )
    return ShopReadyList(by_retailer=groups, already_covered=already_covered, totals=totals)


def forecasted_weekly_spend(shop_list: ShopReadyList) -> Decimal:
    return shop_list.totals.final_cost


def forecasted_monthly_spend(shop_list: ShopReadyList) -> Decimal:
    """Weekly spend scaled to a month; purchases give the real figure."""
    return shop_list.totals.final_cost * get_settings().grocery.weeks_per_month


def reorder_alerts(shop_list: ShopReadyList) -> list[ShopReadyItem]:
    """Items that need buying, in retailer order."""
    return [
        item
        for group in shop_list.by_retailer
        for item in group.items
        if item.purchase_packs > 0
    ]
