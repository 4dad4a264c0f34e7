"""
Audit Logger

DESIGN DECISION: Every automated decision about the user's money is logged.
This provides:
1. Traceability of bills marked paid without the user
2. Debugging capability for surprising matches or plans
3. A history the dashboard can show

The audit logger:
- Writes structured JSON through structlog
- Keeps the events of the current session in memory (`events`)
- Supports correlation IDs to trace related events
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

import structlog

from lifetracker.config import get_settings
from lifetracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: Optional[str] = None) -> None:
    """
    Route structlog output through the standard library root logger.

    Uses AppSettings.log_level unless a level is given.
    """
    level = level or get_settings().app.log_level
    logging.basicConfig(format="%(message)s", level=getattr(logging, level))


class AuditLogger:
    """
    Central audit logging service.

    Logs events to:
    1. Structured local log (for debugging)
    2. An in-memory history for the current session
    """

    def __init__(self, logger_name: str = "lifetracker.audit"):
        self._logger = structlog.get_logger(logger_name)
        self._events: list[AuditEvent] = []

    @property
    def events(self) -> list[AuditEvent]:
        """Events logged so far, oldest first."""
        return list(self._events)

    def events_for(self, correlation_id: UUID) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    def log(self, event: AuditEvent) -> AuditEvent:
        """Log an audit event at the level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        self._events.append(event)
        return event

    def log_occurrences_generated(
        self,
        year: int,
        month: int,
        bill_count: int,
        occurrence_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log occurrence generation for a month."""
        self.log(AuditEventBuilder.occurrences_generated(
            year=year,
            month=month,
            bill_count=bill_count,
            occurrence_count=occurrence_count,
            correlation_id=correlation_id,
        ))

    def log_match_auto_applied(
        self,
        occurrence_id: str,
        transaction_id: str,
        score: int,
        reasons: list[str],
        correlation_id: UUID,
    ) -> None:
        """Log a bill marked paid by a high-confidence match."""
        self.log(AuditEventBuilder.match_auto_applied(
            occurrence_id=occurrence_id,
            transaction_id=transaction_id,
            score=score,
            reasons=reasons,
            correlation_id=correlation_id,
        ))

    def log_match_queued(
        self,
        occurrence_id: str,
        transaction_id: str,
        score: int,
        correlation_id: UUID,
    ) -> None:
        """Log a medium-confidence match left for the user."""
        self.log(AuditEventBuilder.match_queued_for_review(
            occurrence_id=occurrence_id,
            transaction_id=transaction_id,
            score=score,
            correlation_id=correlation_id,
        ))

    def log_payoff_plan(
        self,
        strategy: str,
        monthly_budget: Decimal,
        debt_count: int,
        months_to_debt_free: Optional[int],
        total_interest: Decimal,
        correlation_id: UUID,
    ) -> None:
        """Log a generated payoff plan."""
        self.log(AuditEventBuilder.payoff_plan_generated(
            strategy=strategy,
            monthly_budget=monthly_budget,
            debt_count=debt_count,
            months_to_debt_free=months_to_debt_free,
            total_interest=total_interest,
            correlation_id=correlation_id,
        ))

    def log_validation_failed(
        self,
        subject: str,
        issues: list[dict],
        correlation_id: UUID,
    ) -> None:
        """Log validation failure."""
        self.log(AuditEventBuilder.plan_validation_failed(
            subject=subject,
            issues=issues,
            correlation_id=correlation_id,
        ))

    def log_shopping_list_built(
        self,
        retailer_count: int,
        item_count: int,
        final_cost: Decimal,
        correlation_id: UUID,
    ) -> None:
        """Log a built shopping list."""
        self.log(AuditEventBuilder.shopping_list_built(
            retailer_count=retailer_count,
            item_count=item_count,
            final_cost=final_cost,
            correlation_id=correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., reconciling a month).
    Pass it through all subsequent operations.
    """
    return uuid4()
