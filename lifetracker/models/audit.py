"""
Audit Models for Life Tracker

Every automated decision the engine makes on the user's money is
recorded: which bills were marked paid without asking, which matches
were left for review, which payoff plan was proposed.

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Bills
    OCCURRENCES_GENERATED = "occurrences_generated"
    MATCH_AUTO_APPLIED = "match_auto_applied"
    MATCH_QUEUED_FOR_REVIEW = "match_queued_for_review"

    # Debts
    PAYOFF_PLAN_GENERATED = "payoff_plan_generated"

    # Groceries
    SHOPPING_LIST_BUILT = "shopping_list_built"

    # Validation
    PLAN_VALIDATION_FAILED = "plan_validation_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'occurrence', 'payoff_plan')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Shared by all events of one user action (e.g. one reconciliation)"
    )

    description: str = Field(..., max_length=500)

    details: dict[str, Any] = Field(default_factory=dict)

    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = False

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.match_auto_applied(occurrence_id, ...)
        event = AuditEventBuilder.payoff_plan_generated(strategy, ...)
    """

    @staticmethod
    def occurrences_generated(
        year: int,
        month: int,
        bill_count: int,
        occurrence_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OCCURRENCES_GENERATED,
            entity_type="bill_month",
            entity_id=f"{year:04d}-{month:02d}",
            correlation_id=correlation_id,
            description=(
                f"Generated {occurrence_count} occurrences from "
                f"{bill_count} bills for {year:04d}-{month:02d}"
            ),
            details={
                "bill_count": bill_count,
                "occurrence_count": occurrence_count,
            },
        )

    @staticmethod
    def match_auto_applied(
        occurrence_id: str,
        transaction_id: str,
        score: int,
        reasons: list[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MATCH_AUTO_APPLIED,
            entity_type="occurrence",
            entity_id=occurrence_id,
            correlation_id=correlation_id,
            description=f"Marked paid by transaction {transaction_id} (score {score})",
            details={
                "transaction_id": transaction_id,
                "score": score,
                "reasons": reasons,
            },
        )

    @staticmethod
    def match_queued_for_review(
        occurrence_id: str,
        transaction_id: str,
        score: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MATCH_QUEUED_FOR_REVIEW,
            entity_type="occurrence",
            entity_id=occurrence_id,
            correlation_id=correlation_id,
            description=f"Possible payment {transaction_id} needs review (score {score})",
            details={
                "transaction_id": transaction_id,
                "score": score,
            },
        )

    @staticmethod
    def payoff_plan_generated(
        strategy: str,
        monthly_budget: Decimal,
        debt_count: int,
        months_to_debt_free: Optional[int],
        total_interest: Decimal,
        correlation_id: UUID,
    ) -> AuditEvent:
        if months_to_debt_free is None:
            outcome = "not debt-free within the projection horizon"
        else:
            outcome = f"debt-free in {months_to_debt_free} months"
        return AuditEvent(
            event_type=AuditEventType.PAYOFF_PLAN_GENERATED,
            entity_type="payoff_plan",
            correlation_id=correlation_id,
            description=f"{strategy.capitalize()} plan for {debt_count} debts: {outcome}",
            details={
                "strategy": strategy,
                "monthly_budget": str(monthly_budget),
                "debt_count": debt_count,
                "months_to_debt_free": months_to_debt_free,
                "total_interest": str(total_interest),
            },
            is_user_action=True,
        )

    @staticmethod
    def plan_validation_failed(
        subject: str,
        issues: list[dict],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PLAN_VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=subject,
            correlation_id=correlation_id,
            description=f"Validation of {subject} failed with {len(issues)} issues",
            details={
                "issues": issues,
            },
        )

    @staticmethod
    def shopping_list_built(
        retailer_count: int,
        item_count: int,
        final_cost: Decimal,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SHOPPING_LIST_BUILT,
            entity_type="shopping_list",
            correlation_id=correlation_id,
            description=(
                f"Shopping list built: {item_count} items across "
                f"{retailer_count} retailers, £{final_cost}"
            ),
            details={
                "retailer_count": retailer_count,
                "item_count": item_count,
                "final_cost": str(final_cost),
            },
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
