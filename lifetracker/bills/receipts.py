"""
Receipt to Transaction Matching

Links receipts pulled from the mailbox to the bank transactions they
paid for. Only spending is considered; incoming money never has a
receipt.

Scoring (absolute amounts):
    amount   exact +40, within £0.50 +25, within £2.00 +10
    date     same day +30, 1 day +25, up to 3 days +15, up to a week +5
    merchant similarity >= 0.8 +30, >= 0.5 +15, >= 0.3 +5
    sender   email domain seen in the merchant +10
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional

import structlog

from lifetracker.bills.matcher import confidence_for
from lifetracker.config import MatchingSettings, get_settings
from lifetracker.models.bill import Receipt, ReceiptMatch, Transaction


logger = structlog.get_logger(__name__)

CLOSE_AMOUNT = Decimal("0.50")
NEAR_AMOUNT = Decimal("2.00")
DUPLICATE_AMOUNT = Decimal("0.01")

# Substrings of a sender address and the merchant they mean
SENDER_MERCHANTS: dict[str, str] = {
    "amazon": "Amazon",
    "tesco": "Tesco",
    "sainsburys": "Sainsbury's",
    "asda": "ASDA",
    "waitrose": "Waitrose",
    "ocado": "Ocado",
    "morrisons": "Morrisons",
    "paypal": "PayPal",
    "ebay": "eBay",
    "deliveroo": "Deliveroo",
    "ubereats": "Uber Eats",
    "justeat": "Just Eat",
    "netflix": "Netflix",
    "spotify": "Spotify",
    "apple": "Apple",
    "google": "Google",
    "steam": "Steam",
}

AMOUNT_PATTERNS = [
    re.compile(r"£\s*([\d,]+\.?\d*)"),
    re.compile(r"GBP\s*([\d,]+\.?\d*)", re.IGNORECASE),
    re.compile(r"\$\s*([\d,]+\.?\d*)"),
    re.compile(r"([\d,]+\.?\d*)\s*GBP", re.IGNORECASE),
    re.compile(r"total[:\s]*([\d,]+\.?\d*)", re.IGNORECASE),
    re.compile(r"amount[:\s]*£?\s*([\d,]+\.?\d*)", re.IGNORECASE),
]


def merchant_similarity(first: str, second: str) -> float:
    """
    1 for the same name, 0.8 when one contains the other, otherwise
    the share of words the two names have in common.
    """
    a = first.lower().strip()
    b = second.lower().strip()
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    if a in b or b in a:
        return 0.8

    words_a = set(a.split())
    words_b = set(b.split())
    return len(words_a & words_b) / len(words_a | words_b)


def _sender_domain(from_email: str) -> str:
    _, _, host = from_email.partition("@")
    return host.split(".")[0]


def _is_income(transaction: Transaction) -> bool:
    return transaction.amount > 0


def score_receipt(receipt: Receipt, transaction: Transaction) -> tuple[int, list[str]]:
    score = 0
    reasons = []

    if receipt.amount is not None:
        difference = abs(receipt.amount - abs(transaction.amount))
        if difference == 0:
            score += 40
            reasons.append("Exact amount match")
        elif difference <= CLOSE_AMOUNT:
            score += 25
            reasons.append("Amount within £0.50")
        elif difference <= NEAR_AMOUNT:
            score += 10
            reasons.append("Amount within £2.00")

    days = abs((receipt.received_at.date() - transaction.transaction_date).days)
    if days == 0:
        score += 30
        reasons.append("Same day")
    elif days == 1:
        score += 25
        reasons.append("Within 1 day")
    elif days <= 3:
        score += 15
        reasons.append(f"Within {days} days")
    elif days <= 7:
        score += 5
        reasons.append("Within a week")

    transaction_merchant = transaction.merchant or transaction.description
    if receipt.merchant_name and transaction_merchant:
        similarity = merchant_similarity(receipt.merchant_name, transaction_merchant)
        if similarity >= 0.8:
            score += 30
            reasons.append("Strong merchant match")
        elif similarity >= 0.5:
            score += 15
            reasons.append("Partial merchant match")
        elif similarity >= 0.3:
            score += 5
            reasons.append("Weak merchant match")

    if receipt.from_email and transaction_merchant:
        domain = _sender_domain(receipt.from_email).lower()
        if domain in transaction_merchant.lower():
            score += 10
            reasons.append("Email domain matches merchant")

    return score, reasons


def match_receipt(
    receipt: Receipt,
    transactions: Iterable[Transaction],
    settings: Optional[MatchingSettings] = None,
) -> Optional[ReceiptMatch]:
    """
    The best-scoring spending transaction for the receipt.

    Ties go to the earlier transaction. None when nothing reaches
    MATCHING_RECEIPT_MIN_SCORE.
    """
    settings = settings or get_settings().matching
    best: Optional[ReceiptMatch] = None

    for transaction in transactions:
        if _is_income(transaction):
            continue
        score, reasons = score_receipt(receipt, transaction)
        if best is None or score > best.score:
            best = ReceiptMatch(
                receipt_id=receipt.id,
                transaction_id=transaction.id,
                score=score,
                confidence=confidence_for(score, settings),
                reasons=reasons,
            )

    if best is None or best.score < settings.receipt_min_score:
        logger.debug("receipt_unmatched", receipt_id=receipt.id)
        return None

    logger.debug(
        "receipt_matched",
        receipt_id=receipt.id,
        transaction_id=best.transaction_id,
        score=best.score,
    )
    return best


def duplicate_candidates(receipt: Receipt, transactions: Iterable[Transaction]) -> list[Transaction]:
    """Spending of the receipt's amount within a day of it; more than one is ambiguous."""
    if receipt.amount is None:
        return []

    received = receipt.received_at.date()
    return [
        transaction for transaction in transactions
        if not _is_income(transaction)
        and abs(abs(transaction.amount) - receipt.amount) < DUPLICATE_AMOUNT
        and abs((received - transaction.transaction_date).days) <= 1
    ]


def merchant_from_email(from_email: str) -> Optional[str]:
    """A known merchant in the sender address, else the capitalised domain."""
    address = from_email.lower()
    for pattern, merchant in SENDER_MERCHANTS.items():
        if pattern in address:
            return merchant

    domain = _sender_domain(from_email)
    if len(domain) > 2:
        return domain[0].upper() + domain[1:]
    return None


def amount_from_text(text: str) -> Optional[Decimal]:
    """The first positive price found in a subject line or body."""
    for pattern in AMOUNT_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        try:
            amount = Decimal(match.group(1).replace(",", "", 1))
        except InvalidOperation:
            continue
        if amount > 0:
            return amount
    return None
