"""
Audit Models for Burnrate

Every change to a cycle is logged for audit purposes.
This provides:
1. A trail of how the budget was spent down
2. Debugging information when things go wrong
3. Ability to reconstruct history

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every user action on a cycle has its own event type.
    """
    # Cycle lifecycle
    CYCLE_CREATED = "cycle_created"
    CYCLE_ARCHIVED = "cycle_archived"
    CYCLE_RESET = "cycle_reset"
    BUDGET_ADJUSTED = "budget_adjusted"

    # Expenses
    EXPENSE_ADDED = "expense_added"

    # Validation
    SETUP_REJECTED = "setup_rejected"
    EXPENSE_REJECTED = "expense_rejected"

    # System events
    SYSTEM_ERROR = "system_error"
    STORAGE_ERROR = "storage_error"


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

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred (local time)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'cycle', 'expense')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.cycle_created(cycle_id, budget, start, end)
        event = AuditEventBuilder.expense_added(cycle_id, expense_id, amount, category)
    """

    @staticmethod
    def cycle_created(
        cycle_id: str,
        monthly_budget: float,
        start_date: str,
        end_date: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CYCLE_CREATED,
            entity_type="cycle",
            entity_id=cycle_id,
            description=f"Cycle created: {monthly_budget:g} from {start_date} to {end_date}",
            details={
                "monthly_budget": monthly_budget,
                "start_date": start_date,
                "end_date": end_date,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_added(
        cycle_id: str,
        expense_id: str,
        amount: float,
        category: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense added: {amount:g} ({category})",
            details={
                "cycle_id": cycle_id,
                "amount": amount,
                "category": category,
            },
            is_user_action=True,
        )

    @staticmethod
    def budget_adjusted(
        cycle_id: str,
        previous_budget: float,
        new_budget: float,
    ) -> AuditEvent:
        direction = "increased" if new_budget >= previous_budget else "decreased"
        return AuditEvent(
            event_type=AuditEventType.BUDGET_ADJUSTED,
            severity=AuditSeverity.WARNING,
            entity_type="cycle",
            entity_id=cycle_id,
            description=f"Emergency budget {direction}: {previous_budget:g} -> {new_budget:g}",
            details={
                "previous_budget": previous_budget,
                "new_budget": new_budget,
            },
            is_user_action=True,
        )

    @staticmethod
    def cycle_archived(
        cycle_id: str,
        end_reason: str,
        days_survived: int,
        overspent_amount: float,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CYCLE_ARCHIVED,
            entity_type="cycle",
            entity_id=cycle_id,
            description=f"Cycle archived ({end_reason}) after {days_survived} days",
            details={
                "end_reason": end_reason,
                "days_survived": days_survived,
                "overspent_amount": overspent_amount,
            },
        )

    @staticmethod
    def cycle_reset(cycle_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CYCLE_RESET,
            entity_type="cycle",
            entity_id=cycle_id,
            description="Active cycle cleared by user",
            is_user_action=True,
        )

    @staticmethod
    def input_rejected(
        form: str,
        issues: list[dict],
    ) -> AuditEvent:
        event_type = (
            AuditEventType.SETUP_REJECTED
            if form == "setup"
            else AuditEventType.EXPENSE_REJECTED
        )
        return AuditEvent(
            event_type=event_type,
            severity=AuditSeverity.WARNING,
            description=f"{form.capitalize()} input rejected with {len(issues)} issues",
            details={
                "form": form,
                "issues": issues,
            },
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={
                "operation": operation,
            },
        )
