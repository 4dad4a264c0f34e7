"""
Deal Scanning

Dedupe hashing, saved-rule matching and price-drop detection for deals
collected from shopping feeds. Fetching the feeds happens elsewhere.
"""

import hashlib
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

import structlog

from lifetracker.models.deal import Deal, DealRule, PriceDrop


logger = structlog.get_logger(__name__)

DEFAULT_DROP_THRESHOLD_PERCENT = 5


def _price_text(price: Decimal) -> str:
    # "20" not "20.00", "19.9" not "19.90"
    return f"{Decimal(price).normalize():f}"


def hash_deal(title: str, price: Decimal, store: Optional[str], url: str) -> str:
    """
    Stable SHA-256 hex digest identifying a deal.

    Title and store are case-folded and trimmed so the same offer seen
    twice with cosmetic differences hashes the same.
    """
    normalized = "|".join([
        title.lower().strip(),
        _price_text(price),
        (store or "").lower(),
        url,
    ])
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


def deal_hash(deal: Deal) -> str:
    return hash_deal(deal.title, deal.price, deal.store, deal.url)


def _contains_any(text: str, needles: list[str]) -> bool:
    return any(n.lower() in text for n in needles)


def deal_matches_rule(deal: Deal, rule: DealRule) -> bool:
    """
    True when the deal passes every filter the rule sets.

    Empty lists and None limits don't filter. Keywords match anywhere in
    the title; stores match by substring, both case-insensitive. A deal
    with no discount never passes a minimum-discount rule. A deal with
    no category passes any category filter.
    """
    title = deal.title.lower()
    store = (deal.store or "").lower()

    if rule.keywords_include and not _contains_any(title, rule.keywords_include):
        return False
    if rule.keywords_exclude and _contains_any(title, rule.keywords_exclude):
        return False

    if rule.category and deal.category and deal.category.lower() != rule.category.lower():
        return False

    if rule.min_price is not None and deal.price < rule.min_price:
        return False
    if rule.max_price is not None and deal.price > rule.max_price:
        return False

    if rule.min_discount_percent is not None and (
        deal.discount_percent is None or deal.discount_percent < rule.min_discount_percent
    ):
        return False

    if rule.store_whitelist and not _contains_any(store, rule.store_whitelist):
        return False
    if rule.store_blacklist and _contains_any(store, rule.store_blacklist):
        return False

    return True


def matching_rules(deal: Deal, rules: Iterable[DealRule]) -> list[DealRule]:
    matched = [rule for rule in rules if deal_matches_rule(deal, rule)]
    logger.debug("deal_rules_checked", title=deal.title, matched=len(matched))
    return matched


def detect_price_drop(
    new_price: Decimal,
    old_price: Decimal,
    threshold_percent: int = DEFAULT_DROP_THRESHOLD_PERCENT,
) -> PriceDrop:
    """Drop as a whole percentage; it counts once it reaches the threshold."""
    if new_price >= old_price:
        return PriceDrop(dropped=False, drop_percent=0)

    drop = ((1 - Decimal(new_price) / Decimal(old_price)) * 100).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP
    )
    return PriceDrop(dropped=drop >= threshold_percent, drop_percent=int(drop))
