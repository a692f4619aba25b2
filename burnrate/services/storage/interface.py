"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the pacing engine free of any persistence concern
2. Use in-memory storage for testing
3. Swap the JSON file for something sturdier later

The interface is intentionally simple - we're not building a full ORM.
Just the operations the budgeting flows need.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from burnrate.models.audit import AuditEvent
from burnrate.models.cycle import (
    Cycle,
    CycleParams,
    DefeatRecord,
    Expense,
    NewExpense,
)


class CycleStorageInterface(ABC):
    """
    Abstract interface for cycle storage operations.

    At most one cycle is active at a time; the active cycle is tracked
    by an ID pointer kept separately from the cycles themselves.
    """

    @abstractmethod
    def get_cycles(self) -> list[Cycle]:
        """
        List every stored cycle, oldest first.
        """
        pass

    @abstractmethod
    def get_cycle(self, cycle_id: str) -> Optional[Cycle]:
        """
        Retrieve a cycle by its ID.

        Returns:
            The cycle if found, None otherwise
        """
        pass

    @abstractmethod
    def get_active_cycle(self) -> Optional[Cycle]:
        """
        Retrieve the cycle the active pointer refers to.

        Returns:
            The active cycle, or None when no cycle is active
        """
        pass

    @abstractmethod
    def set_active_cycle_id(self, cycle_id: Optional[str]) -> None:
        """
        Point the active pointer at a cycle, or clear it with None.
        """
        pass

    @abstractmethod
    def create_cycle(self, params: CycleParams) -> Cycle:
        """
        Create a cycle, persist it and make it the active one.

        Args:
            params: Budget and date range

        Returns:
            The new cycle (with no expenses)
        """
        pass

    @abstractmethod
    def update_cycle(self, cycle: Cycle) -> Cycle:
        """
        Replace a stored cycle.

        Raises:
            NotFoundError: If no cycle has this ID
        """
        pass

    @abstractmethod
    def add_expense(
        self,
        cycle_id: str,
        expense: NewExpense,
        today: date,
    ) -> Expense:
        """
        Append an expense to a cycle.

        Args:
            cycle_id: Cycle to append to
            expense: User-supplied expense fields
            today: Day used when the expense carries no date

        Returns:
            The stored expense

        Raises:
            NotFoundError: If no cycle has this ID
        """
        pass


class HistoryStorageInterface(ABC):
    """
    Abstract interface for the defeat history.

    History is append-only - we never delete or modify records.
    """

    @abstractmethod
    def append_defeat(self, record: DefeatRecord) -> DefeatRecord:
        pass

    @abstractmethod
    def get_defeats_history(self) -> list[DefeatRecord]:
        """All records, oldest first."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity, in chronological order.
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events (newest first).
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass
