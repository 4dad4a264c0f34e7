"""
Shared Discount Calculations

Used by the grocery and toiletry modules.

Loyalty schemes (Tesco Benefits on Tap, Iceland EasySaver) round the
basket UP to the next whole pound, take the percentage of that, and
subtract it from the ORIGINAL price.
"""

import math
import re
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from lifetracker.dates.working_days import clamped_date, shift_month
from lifetracker.models.grocery import (
    DiscountCalculation,
    DiscountType,
    MultiBuyOffer,
    MultiBuyPrice,
    Purchase,
)


PENNY = Decimal("0.01")

DISCOUNT_RATES: dict[DiscountType, Decimal] = {
    DiscountType.TESCO_BENEFITS: Decimal("0.04"),
    DiscountType.EASYSAVER: Decimal("0.07"),
    DiscountType.CLUBCARD: Decimal("0"),  # Clubcard prices are pre-reduced
    DiscountType.REWARDGATEWAY: Decimal("0.10"),
    DiscountType.NONE: Decimal("0"),
    DiscountType.OTHER: Decimal("0"),
}

RETAILER_OPTIONS = [
    "Tesco",
    "Sainsbury's",
    "ASDA",
    "Morrisons",
    "Aldi",
    "Lidl",
    "Iceland",
    "MyProtein",
    "Amazon",
    "Other",
]

_DEFAULT_RETAILER_DISCOUNTS = {
    "Tesco": DiscountType.TESCO_BENEFITS,
    "Iceland": DiscountType.EASYSAVER,
    "MyProtein": DiscountType.REWARDGATEWAY,
}

_NO_DISCOUNT_OPTION = (DiscountType.NONE, "No discount")
_RETAILER_DISCOUNT_OPTIONS = {
    "Tesco": [
        (DiscountType.TESCO_BENEFITS, "Benefits on Tap (4%)"),
        (DiscountType.CLUBCARD, "Clubcard (pre-reduced)"),
    ],
    "Iceland": [
        (DiscountType.EASYSAVER, "EasySaver Card (7%)"),
    ],
    "MyProtein": [
        (DiscountType.REWARDGATEWAY, "RewardGateway (10%)"),
    ],
}

# "4 for 3", "3 for the price of 2"
_FOR_PATTERN = re.compile(r"(\d+)\s*for\s*(?:the\s*price\s*of\s*)?(\d+)", re.IGNORECASE)
# "Buy 2 Get 1 Free"
_BUY_GET_FREE_PATTERN = re.compile(r"buy\s*(\d+)\s*get\s*(\d+)\s*free", re.IGNORECASE)

# Months covered by purchase history are counted in 30-day blocks
_DAYS_PER_MONTH = 30


def _pence(amount: Decimal) -> Decimal:
    return amount.quantize(PENNY, rounding=ROUND_HALF_UP)


def default_retailer_discount(retailer: str) -> DiscountType:
    return _DEFAULT_RETAILER_DISCOUNTS.get(retailer, DiscountType.NONE)


def retailer_discount_options(retailer: str) -> list[tuple[DiscountType, str]]:
    """(discount type, label) choices offered for a retailer."""
    return [_NO_DISCOUNT_OPTION] + _RETAILER_DISCOUNT_OPTIONS.get(retailer, [])


def calculate_loyalty_discount(price: Decimal, discount_type: DiscountType) -> DiscountCalculation:
    """Round up to the next £1, take the rate of that, subtract from the real price."""
    rate = DISCOUNT_RATES.get(discount_type, Decimal("0"))
    rounded = Decimal(math.ceil(price))
    discount = rounded * rate
    final = max(Decimal("0"), price - discount)

    return DiscountCalculation(
        original_price=price,
        rounded_price=rounded,
        discount_percent=rate,
        discount_amount=discount,
        final_price=_pence(final),
    )


def calculate_basket_discount(subtotal: Decimal, discount_type: DiscountType) -> DiscountCalculation:
    """The loyalty discount applied once to a whole retailer basket."""
    return calculate_loyalty_discount(subtotal, discount_type)


def parse_multi_buy_offer(offer_label: Optional[str]) -> Optional[MultiBuyOffer]:
    """
    Detect a multi-buy ratio in free text.

    Understands "X for Y", "X for the price of Y", "Buy X Get Y Free",
    "BOGOF" and "buy one get one". Fixed-price offers ("3 for £5")
    are not ratios and return None.
    """
    if not offer_label:
        return None
    normalized = offer_label.lower().strip()

    match = _FOR_PATTERN.search(normalized)
    if match:
        buy, pay = int(match.group(1)), int(match.group(2))
        if buy > pay > 0:
            return MultiBuyOffer(buy_quantity=buy, pay_quantity=pay, offer_label=offer_label)

    match = _BUY_GET_FREE_PATTERN.search(normalized)
    if match:
        buy, free = int(match.group(1)), int(match.group(2))
        if buy > 0 and free > 0:
            return MultiBuyOffer(buy_quantity=buy + free, pay_quantity=buy, offer_label=offer_label)

    if "bogof" in normalized or "buy one get one" in normalized:
        return MultiBuyOffer(buy_quantity=2, pay_quantity=1, offer_label=offer_label)

    return None


def calculate_multi_buy_price(
    unit_price: Decimal,
    quantity: int,
    offer: Optional[MultiBuyOffer],
) -> MultiBuyPrice:
    """Complete offer sets pay for `pay_quantity` items; the rest are full price."""
    gross = unit_price * quantity

    if offer is None or quantity < offer.buy_quantity:
        return MultiBuyPrice(gross_cost=gross, discount_amount=Decimal("0"), final_cost=gross)

    complete_sets, remainder = divmod(quantity, offer.buy_quantity)
    final = complete_sets * offer.pay_quantity * unit_price + remainder * unit_price

    return MultiBuyPrice(
        gross_cost=_pence(gross),
        discount_amount=_pence(gross - final),
        final_cost=_pence(final),
    )


def calculate_total_savings(purchases: Iterable[Purchase]) -> Decimal:
    return sum((p.discount_amount or Decimal("0") for p in purchases), Decimal("0"))


def calculate_actual_monthly_spend(
    purchases: Iterable[Purchase],
    today: Optional[date] = None,
    months: int = 12,
) -> Decimal:
    """
    Average monthly spend over the last `months` months of purchases.

    Divides by the months actually covered (at least one), so a
    fortnight of history is not spread over a year.
    """
    today = today or date.today()
    year, month = shift_month(today.year, today.month, -months)
    cutoff = clamped_date(year, month, today.day)
    recent = [p for p in purchases if p.purchase_date >= cutoff]
    if not recent:
        return Decimal("0")

    total = sum((p.final_cost or Decimal("0") for p in recent), Decimal("0"))
    oldest = min(p.purchase_date for p in recent)
    months_covered = max(Decimal("1"), Decimal((today - oldest).days) / _DAYS_PER_MONTH)
    return total / months_covered
