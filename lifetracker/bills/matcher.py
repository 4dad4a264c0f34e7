"""
Transaction to Bill Matching

Scores bank transactions against bill occurrences and decides which
matches are safe to apply automatically.

ASSUMPTIONS:
- Tolerance is ±£1 and the date window ±3 days (MATCHING_* settings)
- One transaction can only pay one occurrence
- Only settled transactions mark bills as paid

Scoring (absolute amounts):
    amount   exact +40, within tolerance +25, otherwise rejected
    date     same day +30, within window max(10, 25 - 5*days), otherwise rejected
    provider +30
    account  +10
"""

from decimal import Decimal
from typing import Iterable, Mapping, Optional, Union

import structlog

from lifetracker.config import MatchingSettings, get_settings
from lifetracker.models.bill import (
    Bill,
    BillOccurrence,
    MatchConfidence,
    MatchDiagnostic,
    MatchOutcome,
    MatchResult,
    OccurrenceStatus,
    Transaction,
)


logger = structlog.get_logger(__name__)

EXACT_AMOUNT_SCORE = 40
NEAR_AMOUNT_SCORE = 25
EXACT_DATE_SCORE = 30
PROVIDER_SCORE = 30
ACCOUNT_SCORE = 10

DIAGNOSTIC_AMOUNT_RANGE = Decimal("10")
DIAGNOSTIC_DAY_RANGE = 7

# Common UK utilities and subscriptions, as they appear on statements
PROVIDER_ALIASES: dict[str, list[str]] = {
    "netflix": ["netflix", "nflx"],
    "spotify": ["spotify"],
    "amazon prime": ["amazon", "prime video", "amzn", "amazon prime"],
    "disney+": ["disney", "disney plus", "disneyplus"],
    "apple": ["apple.com", "apple music", "icloud"],
    "virgin media": ["virgin", "vm", "virgin media"],
    "british gas": ["british gas", "bg", "centrica"],
    "thames water": ["thames", "thames water"],
    "council tax": ["council", "local authority", "district council", "borough council"],
    "sky": ["sky uk", "sky digital", "sky.com"],
    "bt": ["bt group", "british telecom", "bt.com"],
    "ee": ["ee limited", "everything everywhere", "ee.co.uk"],
    "vodafone": ["vodafone", "voda"],
    "o2": ["o2", "telefonica"],
    "three": ["three", "three.co.uk", "hutchison"],
    "now tv": ["now tv", "nowtv"],
    "youtube": ["youtube", "google youtube"],
    "audible": ["audible"],
    "gym": ["puregym", "the gym", "gym group", "virgin active", "nuffield"],
    "insurance": ["aviva", "direct line", "admiral", "axa", "more than"],
}


def match_provider(bill: Bill, transaction: Transaction) -> Optional[str]:
    """
    Name of the provider the transaction appears to be from, if it is the bill's.

    Tries, in order: the bill's provider (or name) verbatim in the
    merchant/description; an alias group whose key matches the
    provider; an alias group that matches both sides.
    """
    provider = (bill.provider or bill.name or "").lower()
    merchant = (transaction.merchant or "").lower()
    description = (transaction.description or "").lower()

    def seen_in_transaction(text: str) -> bool:
        return text in merchant or text in description

    if provider and seen_in_transaction(provider):
        return provider

    for key, aliases in PROVIDER_ALIASES.items():
        if key in provider or provider in key:
            for alias in aliases:
                if seen_in_transaction(alias):
                    return key

    for key, aliases in PROVIDER_ALIASES.items():
        provider_matches = any(alias in provider for alias in aliases)
        transaction_matches = any(seen_in_transaction(alias) for alias in aliases)
        if provider_matches and transaction_matches:
            return key

    return None


def confidence_for(score: int, settings: MatchingSettings) -> MatchConfidence:
    if score >= settings.high_confidence_score:
        return MatchConfidence.HIGH
    if score >= settings.medium_confidence_score:
        return MatchConfidence.MEDIUM
    return MatchConfidence.LOW


def score_match(
    occurrence: BillOccurrence,
    bill: Bill,
    transaction: Transaction,
    settings: Optional[MatchingSettings] = None,
) -> Optional[tuple[int, list[str]]]:
    """
    (score, reasons) for one pairing, or None when amount or date rule it out.
    """
    settings = settings or get_settings().matching
    reasons = []
    score = 0

    amount_diff = abs(abs(transaction.amount) - occurrence.expected_amount)
    if amount_diff == 0:
        score += EXACT_AMOUNT_SCORE
        reasons.append("Exact amount match")
    elif amount_diff <= settings.amount_tolerance:
        score += NEAR_AMOUNT_SCORE
        reasons.append(f"Amount within ±£{settings.amount_tolerance:.2f}")
    else:
        return None

    days_diff = abs((transaction.transaction_date - occurrence.due_date).days)
    if days_diff == 0:
        score += EXACT_DATE_SCORE
        reasons.append("Exact date match")
    elif days_diff <= settings.date_window_days:
        score += max(10, 25 - days_diff * 5)
        reasons.append(f"Within {days_diff} day(s) of due date")
    else:
        return None

    provider = match_provider(bill, transaction)
    if provider:
        score += PROVIDER_SCORE
        reasons.append(f"Provider match: {provider}")

    if bill.account_id and transaction.account_id == bill.account_id:
        score += ACCOUNT_SCORE
        reasons.append("Account match")

    return score, reasons


def find_matches_for_occurrence(
    occurrence: BillOccurrence,
    bill: Bill,
    transactions: Iterable[Transaction],
    linked_transaction_ids: Optional[set[str]] = None,
    settings: Optional[MatchingSettings] = None,
) -> list[MatchResult]:
    """High and medium confidence candidates, best first."""
    settings = settings or get_settings().matching
    linked = linked_transaction_ids or set()
    matches = []

    for transaction in transactions:
        # Already linked or still pending: not available
        if transaction.id in linked or transaction.bill_id or transaction.is_pending:
            continue

        scored = score_match(occurrence, bill, transaction, settings)
        if scored is None:
            continue
        score, reasons = scored

        confidence = confidence_for(score, settings)
        if confidence == MatchConfidence.LOW:
            continue

        matches.append(MatchResult(
            occurrence_id=occurrence.id,
            bill_id=bill.id,
            transaction_id=transaction.id,
            confidence=confidence,
            score=score,
            reasons=reasons,
        ))

    # Stable sort keeps transaction order among equal scores
    return sorted(matches, key=lambda m: m.score, reverse=True)


def _bill_lookup(bills: Union[Iterable[Bill], Mapping[str, Bill]]) -> dict[str, Bill]:
    if isinstance(bills, Mapping):
        return dict(bills)
    return {bill.id: bill for bill in bills}


def auto_match_transactions(
    occurrences: Iterable[BillOccurrence],
    bills: Union[Iterable[Bill], Mapping[str, Bill]],
    transactions: list[Transaction],
    existing_links: Optional[Mapping[str, str]] = None,
    settings: Optional[MatchingSettings] = None,
) -> MatchOutcome:
    """
    Pick the best match for every unpaid occurrence.

    High confidence matches are returned for auto-apply and their
    transaction is withheld from later occurrences; medium ones are
    returned for the user to review.
    """
    settings = settings or get_settings().matching
    bills_by_id = _bill_lookup(bills)
    linked = set((existing_links or {}).keys())
    outcome = MatchOutcome()

    for occurrence in occurrences:
        if occurrence.status == OccurrenceStatus.PAID:
            continue

        bill = bills_by_id.get(occurrence.bill_id)
        if bill is None:
            logger.debug("occurrence_without_bill", occurrence_id=occurrence.id)
            continue

        matches = find_matches_for_occurrence(occurrence, bill, transactions, linked, settings)
        if not matches:
            continue

        best = matches[0]
        if best.confidence == MatchConfidence.HIGH:
            outcome.auto_apply.append(best)
            linked.add(best.transaction_id)
        else:
            outcome.for_review.append(best)

    logger.debug(
        "auto_match_completed",
        auto_apply=len(outcome.auto_apply),
        for_review=len(outcome.for_review),
    )
    return outcome


def matching_diagnostics(
    occurrence: BillOccurrence,
    bill: Bill,
    transactions: Iterable[Transaction],
) -> list[MatchDiagnostic]:
    """Raw deltas for every transaction within £10 and 7 days of the occurrence."""
    diagnostics = []
    for transaction in transactions:
        amount_diff = abs(abs(transaction.amount) - occurrence.expected_amount)
        days_diff = abs((transaction.transaction_date - occurrence.due_date).days)
        if amount_diff > DIAGNOSTIC_AMOUNT_RANGE or days_diff > DIAGNOSTIC_DAY_RANGE:
            continue
        diagnostics.append(MatchDiagnostic(
            transaction_id=transaction.id,
            amount_diff=amount_diff,
            days_diff=days_diff,
            provider_match=match_provider(bill, transaction),
            account_match=bill.account_id == transaction.account_id,
        ))
    return diagnostics
