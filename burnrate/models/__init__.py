"""
Data Models Package

This package contains all Pydantic models used in Burnrate.
All data flowing through the system must conform to these schemas.
"""

from burnrate.models.cycle import (
    Cycle,
    CycleParams,
    DefeatRecord,
    EndReason,
    Expense,
    ExpenseCategory,
    NewExpense,
    RecordModel,
)
from burnrate.models.pacing import (
    CategoryShare,
    CycleStage,
    CycleState,
    PacePoint,
    PacingSnapshot,
)
from burnrate.models.validation import (
    ExpenseValidationResult,
    SetupValidationResult,
    ValidationIssue,
    ValidationResult,
)
from burnrate.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Cycle records
    "Cycle",
    "CycleParams",
    "DefeatRecord",
    "EndReason",
    "Expense",
    "ExpenseCategory",
    "NewExpense",
    "RecordModel",
    # Computed pacing values
    "CategoryShare",
    "CycleStage",
    "CycleState",
    "PacePoint",
    "PacingSnapshot",
    # Validation
    "ExpenseValidationResult",
    "SetupValidationResult",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
