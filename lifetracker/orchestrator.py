"""
Main Orchestrator for Life Tracker

This module ties the calculation modules together into the flows the
app runs on behalf of the user:
1. Bill tracking (bills → occurrences → stored statuses → auto-match → totals)
2. Debt planning (debts → validate → payoff plan → strategy comparison)
3. Shopping (meal plans → shop-ready list)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Inputs are validated before anything is calculated
- Only high-confidence matches mark a bill paid; the rest wait for the user
- Every step is audited

The calculation modules stay pure; this is the only place that logs
audit events.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping, Optional
from uuid import UUID

import structlog

from lifetracker.audit import AuditLogger, create_correlation_id
from lifetracker.bills.matcher import auto_match_transactions
from lifetracker.bills.occurrences import (
    bill_occurrences_for_month,
    existing_transaction_links,
    mark_occurrence_paid,
    merge_occurrence_statuses,
)
from lifetracker.debts.calculations import compare_strategies, generate_payoff_plan
from lifetracker.groceries.shopping_list import generate_shop_ready_list
from lifetracker.models.bill import (
    Bill,
    MatchConfidence,
    MonthReconciliation,
    OccurrenceStatus,
    StoredOccurrence,
    Transaction,
)
from lifetracker.models.debt import Debt, DebtPlanReport, PayoffStrategy
from lifetracker.models.grocery import DiscountType, MealPlan, Product, ShopReadyList
from lifetracker.models.validation import ValidationResult
from lifetracker.validation import PlanValidator


logger = structlog.get_logger(__name__)


class InvalidPlanInputError(ValueError):
    """Raised when validation says the calculation cannot run."""

    def __init__(self, result: ValidationResult, summary: str):
        self.result = result
        super().__init__(summary)


def _sum_amounts(occurrences, status: Optional[OccurrenceStatus] = None) -> Decimal:
    return sum(
        (o.expected_amount for o in occurrences if status is None or o.status == status),
        Decimal("0"),
    )


class BillTrackingFlow:
    """
    Reconciles one calendar month of bills against bank transactions.

    Flow:
    1. Validate → bills and transactions make sense for the month
    2. Generate → occurrences for every active bill
    3. Merge → stored paid/skipped decisions, overdue detection
    4. Match → score transactions against unpaid occurrences
    5. Apply → high-confidence matches mark the occurrence paid
    6. Queue → medium-confidence matches are returned for review

    Nothing is persisted here; callers store the returned occurrences.
    """

    def __init__(
        self,
        validator: Optional[PlanValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._validator = validator or PlanValidator()
        self._audit_logger = audit_logger

    def _check(self, result: ValidationResult, correlation_id: UUID) -> None:
        if result.is_valid:
            return
        if self._audit_logger:
            self._audit_logger.log_validation_failed(
                subject=result.subject,
                issues=[issue.model_dump() for issue in result.issues],
                correlation_id=correlation_id,
            )
        if not result.can_proceed:
            raise InvalidPlanInputError(result, self._validator.user_friendly_summary(result))

    def reconcile_month(
        self,
        bills: list[Bill],
        transactions: list[Transaction],
        stored: Iterable[StoredOccurrence] = (),
        year: Optional[int] = None,
        month: Optional[int] = None,
        today: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> MonthReconciliation:
        """
        Work out which of the month's bills are paid, due or overdue.

        Defaults to the month containing `today`.

        Raises:
            InvalidPlanInputError: the inputs cannot be reconciled
        """
        correlation_id = correlation_id or create_correlation_id()
        today = today or date.today()
        year = year or today.year
        month = month or today.month
        stored = list(stored)

        self._check(
            self._validator.validate_bill_month(bills, transactions, year, month),
            correlation_id,
        )

        try:
            occurrences = bill_occurrences_for_month(bills, year, month)
            if self._audit_logger:
                self._audit_logger.log_occurrences_generated(
                    year=year,
                    month=month,
                    bill_count=len(bills),
                    occurrence_count=len(occurrences),
                    correlation_id=correlation_id,
                )

            occurrences = merge_occurrence_statuses(occurrences, stored, today)
            outcome = auto_match_transactions(
                occurrences, bills, transactions, existing_transaction_links(stored)
            )

            applied = {m.occurrence_id: m for m in outcome.auto_apply}
            reconciled = []
            for occurrence in occurrences:
                match = applied.get(occurrence.id)
                if match is not None:
                    occurrence = mark_occurrence_paid(
                        occurrence, match.transaction_id, MatchConfidence.HIGH
                    )
                    if self._audit_logger:
                        self._audit_logger.log_match_auto_applied(
                            occurrence_id=occurrence.id,
                            transaction_id=match.transaction_id,
                            score=match.score,
                            reasons=match.reasons,
                            correlation_id=correlation_id,
                        )
                reconciled.append(occurrence)

            if self._audit_logger:
                for match in outcome.for_review:
                    self._audit_logger.log_match_queued(
                        occurrence_id=match.occurrence_id,
                        transaction_id=match.transaction_id,
                        score=match.score,
                        correlation_id=correlation_id,
                    )

        except Exception as e:
            if self._audit_logger:
                self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"year": year, "month": month},
                    correlation_id=correlation_id,
                )
            raise

        not_skipped = [o for o in reconciled if o.status != OccurrenceStatus.SKIPPED]
        return MonthReconciliation(
            year=year,
            month=month,
            occurrences=reconciled,
            applied=outcome.auto_apply,
            for_review=outcome.for_review,
            total_due=_sum_amounts(not_skipped),
            total_paid=_sum_amounts(reconciled, OccurrenceStatus.PAID),
            total_overdue=_sum_amounts(reconciled, OccurrenceStatus.OVERDUE),
        )


class DebtPlanningFlow:
    """
    Builds a payoff plan and the avalanche/snowball comparison.

    Validation problems that still allow a plan (a budget below the
    minimums, a debt that interest outgrows) come back as warnings on
    the report rather than stopping it.
    """

    def __init__(
        self,
        validator: Optional[PlanValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._validator = validator or PlanValidator()
        self._audit_logger = audit_logger

    def plan(
        self,
        debts: list[Debt],
        monthly_budget: Decimal,
        strategy: Optional[PayoffStrategy] = None,
        start_month: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> DebtPlanReport:
        """
        Raises:
            InvalidPlanInputError: negative budget
        """
        correlation_id = correlation_id or create_correlation_id()

        result = self._validator.validate_debt_plan(debts, monthly_budget)
        if not result.is_valid and self._audit_logger:
            self._audit_logger.log_validation_failed(
                subject=result.subject,
                issues=[issue.model_dump() for issue in result.issues],
                correlation_id=correlation_id,
            )
        if not result.can_proceed:
            raise InvalidPlanInputError(result, self._validator.user_friendly_summary(result))

        try:
            plan = generate_payoff_plan(debts, monthly_budget, strategy, start_month)
            comparison = compare_strategies(debts, monthly_budget, start_month)
        except Exception as e:
            if self._audit_logger:
                self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"debt_count": len(debts)},
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            self._audit_logger.log_payoff_plan(
                strategy=plan.strategy.value,
                monthly_budget=plan.monthly_budget,
                debt_count=len(plan.schedule),
                months_to_debt_free=plan.months_to_debt_free,
                total_interest=plan.total_interest_paid,
                correlation_id=correlation_id,
            )

        return DebtPlanReport(
            plan=plan,
            comparison=comparison,
            warnings=[i.message for i in result.issues if i.severity != "info"],
        )


class ShoppingFlow:
    """Turns the week's meal plans into a shop-ready list."""

    def __init__(self, audit_logger: Optional[AuditLogger] = None):
        self._audit_logger = audit_logger

    def build(
        self,
        plans: Iterable[MealPlan],
        products: Iterable[Product] = (),
        retailer_discounts: Optional[Mapping[str, DiscountType]] = None,
        correlation_id: Optional[UUID] = None,
    ) -> ShopReadyList:
        correlation_id = correlation_id or create_correlation_id()

        try:
            shop_list = generate_shop_ready_list(plans, products, retailer_discounts)
        except Exception as e:
            if self._audit_logger:
                self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            self._audit_logger.log_shopping_list_built(
                retailer_count=len(shop_list.by_retailer),
                item_count=shop_list.totals.item_count,
                final_cost=shop_list.totals.final_cost,
                correlation_id=correlation_id,
            )
        return shop_list


def create_app_components(
    audit_logger: Optional[AuditLogger] = None,
) -> tuple[BillTrackingFlow, DebtPlanningFlow, ShoppingFlow]:
    """
    Factory function to create all application components.

    All flows share one validator and one audit logger, so a session's
    events can be read back from a single place.

    Returns:
        (bill_tracking_flow, debt_planning_flow, shopping_flow)
    """
    audit_logger = audit_logger or AuditLogger()
    validator = PlanValidator()

    logger.debug("app_components_created")
    return (
        BillTrackingFlow(validator=validator, audit_logger=audit_logger),
        DebtPlanningFlow(validator=validator, audit_logger=audit_logger),
        ShoppingFlow(audit_logger=audit_logger),
    )
