"""Tests for grocery lists and shop-ready lists."""

import pytest
from datetime import date
from decimal import Decimal

from lifetracker.groceries import (
    forecasted_monthly_spend,
    forecasted_weekly_spend,
    generate_grocery_list,
    generate_shop_ready_list,
    reorder_alerts,
)
from lifetracker.models import (
    DiscountType,
    MealPlan,
    MealPlanItem,
    MealStatus,
    MealType,
    Product,
)


@pytest.fixture
def oats():
    return Product(
        id="oats", name="Oats", retailer="Tesco",
        price=Decimal("1.20"), pack_size_grams=1000, quantity_on_hand=1,
    )


@pytest.fixture
def chicken():
    return Product(
        id="chicken", name="Chicken", retailer="Tesco",
        price=Decimal("4.00"), pack_size_grams=500, offer_label="3 for 2",
    )


@pytest.fixture
def bananas():
    return Product(id="bananas", name="Bananas", price=Decimal("0.30"))


@pytest.fixture
def plans(oats, chicken, bananas):
    return [
        MealPlan(
            plan_date=date(2025, 3, 3),
            items=[
                MealPlanItem(product=oats, meal_type=MealType.BREAKFAST, quantity_grams=80),
                MealPlanItem(product=chicken, meal_type=MealType.DINNER, quantity_grams=750),
            ],
        ),
        MealPlan(
            plan_date=date(2025, 3, 4),
            items=[
                MealPlanItem(product=oats, meal_type=MealType.BREAKFAST, quantity_grams=80),
                MealPlanItem(product=chicken, meal_type=MealType.LUNCH, quantity_grams=200),
                MealPlanItem(product=chicken, meal_type=MealType.DINNER, quantity_grams=750),
                MealPlanItem(product=bananas, meal_type=MealType.SNACK, quantity_grams=150),
            ],
            lunch_status=MealStatus.SKIPPED,
        ),
    ]


class TestGroceryList:
    """Tests for the raw requirement per product."""

    def test_totals_and_packs(self, plans):
        """Test grams are summed, skipped meals dropped and packs rounded up."""
        items = {item.product.id: item for item in generate_grocery_list(plans)}

        assert items["oats"].required_grams == 160
        assert items["oats"].purchase_quantity == 1
        assert items["oats"].purchase_units == "× 1000g"
        assert items["oats"].total_cost == Decimal("1.20")

        assert items["chicken"].required_grams == 1500
        assert items["chicken"].purchase_quantity == 3
        assert items["chicken"].total_cost == Decimal("12.00")

    def test_loose_products_priced_per_100g(self, plans):
        """Test products without a pack size."""
        items = {item.product.id: item for item in generate_grocery_list(plans)}
        assert items["bananas"].purchase_units == "g"
        assert items["bananas"].purchase_quantity == 150
        assert items["bananas"].total_cost == Decimal("0.45")

    def test_sorted_by_name(self, plans):
        """Test alphabetical order."""
        assert [i.product.name for i in generate_grocery_list(plans)] == [
            "Bananas", "Chicken", "Oats",
        ]


class TestShopReadyList:
    """Tests for stock, offers and retailer baskets."""

    def test_stock_covers_requirement(self, plans):
        """Test items covered by stock are listed separately."""
        shop_list = generate_shop_ready_list(plans)
        assert [i.product.id for i in shop_list.already_covered] == ["oats"]
        assert shop_list.already_covered[0].stock_on_hand_grams == 1000

    def test_multi_buy_applied(self, plans):
        """Test three packs on 3-for-2 cost two."""
        shop_list = generate_shop_ready_list(plans)
        tesco = shop_list.by_retailer[0]
        chicken = tesco.items[0]

        assert chicken.purchase_packs == 3
        assert chicken.gross_cost == Decimal("8.00")
        assert chicken.multi_buy_saving == Decimal("4.00")

    def test_basket_discount_once_per_retailer(self, plans):
        """Test the loyalty discount is applied to the basket total."""
        shop_list = generate_shop_ready_list(
            plans, retailer_discounts={"Tesco": DiscountType.TESCO_BENEFITS}
        )
        tesco = shop_list.by_retailer[0]

        assert tesco.retailer == "Tesco"
        assert tesco.subtotal == Decimal("8.00")
        assert tesco.discount_amount == Decimal("0.32")
        assert tesco.final_total == Decimal("7.68")

    def test_unassigned_retailer_last(self, plans):
        """Test products without a retailer are grouped at the end."""
        shop_list = generate_shop_ready_list(plans)
        assert [g.retailer for g in shop_list.by_retailer] == ["Tesco", "Unassigned"]

    def test_latest_products_used(self, plans, oats):
        """Test fresh product data overrides what the plan captured."""
        empty_cupboard = oats.model_copy(update={"quantity_on_hand": 0})
        shop_list = generate_shop_ready_list(plans, products=[empty_cupboard])

        assert shop_list.already_covered == []
        tesco_ids = [i.product.id for i in shop_list.by_retailer[0].items]
        assert tesco_ids == ["chicken", "oats"]

    def test_packaging_and_opened_stock(self):
        """Test opened packs count and packaging weight is not food."""
        rice = Product(
            id="rice", name="Rice", retailer="Aldi", price=Decimal("1.00"),
            pack_size_grams=1000, packaging_weight_grams=100,
            quantity_on_hand=1, quantity_in_use=1,
        )
        plan = MealPlan(
            plan_date=date(2025, 3, 3),
            items=[MealPlanItem(product=rice, meal_type=MealType.DINNER, quantity_grams=2000)],
        )
        item = generate_shop_ready_list([plan]).by_retailer[0].items[0]

        assert item.pack_net_grams == 900
        assert item.stock_on_hand_grams == 1800
        assert item.net_needed_grams == 200
        assert item.purchase_packs == 1

    def test_totals_and_forecasts(self, plans):
        """Test totals across baskets and the monthly forecast."""
        shop_list = generate_shop_ready_list(
            plans, retailer_discounts={"Tesco": DiscountType.TESCO_BENEFITS}
        )
        assert shop_list.totals.item_count == 2
        assert shop_list.totals.final_cost == Decimal("7.98")
        assert forecasted_weekly_spend(shop_list) == Decimal("7.98")
        assert forecasted_monthly_spend(shop_list) == Decimal("7.98") * Decimal("4.33")

    def test_reorder_alerts(self, plans):
        """Test only items with packs to buy, in retailer order."""
        alerts = reorder_alerts(generate_shop_ready_list(plans))
        assert [a.product.id for a in alerts] == ["chicken", "bananas"]
