"""Deal hashing, rule matching and price drops."""

from lifetracker.deals.scanner import (
    deal_hash,
    deal_matches_rule,
    detect_price_drop,
    hash_deal,
    matching_rules,
)

__all__ = [
    "deal_hash",
    "deal_matches_rule",
    "detect_price_drop",
    "hash_deal",
    "matching_rules",
]
