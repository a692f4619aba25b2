"""
Audit Logger

DESIGN DECISION: Every change to a cycle is logged.
This provides:
1. Complete traceability of how the budget was spent
2. Debugging capability
3. The user can see a history of their actions

The audit logger:
- Is synchronous, like the rest of the app
- Gracefully handles failures (doesn't break a flow if logging fails)
"""

import logging
from typing import Optional

import structlog

from burnrate.config import get_settings
from burnrate.models.audit import AuditEvent, AuditEventBuilder
from burnrate.services.storage import AuditStorageInterface, StorageError


def configure_logging(level: Optional[str] = None) -> str:
    """
    Configure structlog for local JSON logging.

    Debug mode forces DEBUG unless a level is given explicitly. Every
    entry carries the application environment.
    Safe to call more than once; the last call wins.

    Returns:
        The level name in effect
    """
    app = get_settings().app
    level_name = level or ("DEBUG" if app.debug_mode else app.log_level)
    logging.basicConfig(format="%(message)s", level=getattr(logging, level_name))

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(environment=app.app_environment)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
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
    return level_name


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence and user visibility), when configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("burnrate.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except StorageError as e:
                # Audit persistence must never break the calling flow
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_cycle_created(
        self,
        cycle_id: str,
        monthly_budget: float,
        start_date: str,
        end_date: str,
    ) -> None:
        """Log cycle setup."""
        self.log(AuditEventBuilder.cycle_created(
            cycle_id=cycle_id,
            monthly_budget=monthly_budget,
            start_date=start_date,
            end_date=end_date,
        ))

    def log_expense_added(
        self,
        cycle_id: str,
        expense_id: str,
        amount: float,
        category: str,
    ) -> None:
        """Log an expense being appended."""
        self.log(AuditEventBuilder.expense_added(
            cycle_id=cycle_id,
            expense_id=expense_id,
            amount=amount,
            category=category,
        ))

    def log_budget_adjusted(
        self,
        cycle_id: str,
        previous_budget: float,
        new_budget: float,
    ) -> None:
        """Log an emergency budget change."""
        self.log(AuditEventBuilder.budget_adjusted(
            cycle_id=cycle_id,
            previous_budget=previous_budget,
            new_budget=new_budget,
        ))

    def log_cycle_archived(
        self,
        cycle_id: str,
        end_reason: str,
        days_survived: int,
        overspent_amount: float,
    ) -> None:
        """Log a cycle moving into history."""
        self.log(AuditEventBuilder.cycle_archived(
            cycle_id=cycle_id,
            end_reason=end_reason,
            days_survived=days_survived,
            overspent_amount=overspent_amount,
        ))

    def log_cycle_reset(self, cycle_id: str) -> None:
        self.log(AuditEventBuilder.cycle_reset(cycle_id))

    def log_input_rejected(
        self,
        form: str,
        issues: list[dict],
    ) -> None:
        """Log a form submission that failed validation."""
        self.log(AuditEventBuilder.input_rejected(form=form, issues=issues))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))

    def log_storage_error(
        self,
        operation: str,
        error_message: str,
    ) -> None:
        self.log(AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
        ))
