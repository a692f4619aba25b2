"""
Main Orchestrator for Burnrate

This module ties together all the components and defines the
end-to-end flows for:
1. Setup (form → validate → create → archive previous cycle)
2. Expense logging (form → validate → append → pace → archive if exhausted)
3. Emergency budget adjustment
4. Reset and history

DESIGN DECISION: The orchestrator is the only place that knows what day
it is. It reads its clock once per flow and passes that day to storage and
to the pacing engine, which never read the clock themselves.

Every change to a cycle is audited.
"""

from datetime import date
from typing import Callable, Optional, Union

import structlog
from pydantic import BaseModel

from burnrate.audit import AuditLogger, configure_logging
from burnrate.config import get_settings
from burnrate.engine import (
    build_snapshot,
    days_survived,
    overspent_amount,
    remaining_budget,
)
from burnrate.models.cycle import (
    Cycle,
    DefeatRecord,
    EndReason,
    Expense,
    ExpenseCategory,
)
from burnrate.models.pacing import PacingSnapshot
from burnrate.models.validation import ValidationResult
from burnrate.services.storage import (
    CycleStorageInterface,
    HistoryStorageInterface,
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorage,
    StorageError,
)
from burnrate.validation import CycleSetupValidator


logger = structlog.get_logger(__name__)


class FlowError(Exception):
    """Base exception for flow failures the user can act on."""
    pass


class NoActiveCycleError(FlowError):
    """The flow needs an active cycle and there is none."""
    pass


class InputRejectedError(FlowError):
    """Form input failed validation; nothing was stored."""

    def __init__(self, result: ValidationResult):
        super().__init__(result.error_summary())
        self.result = result


class SetupRejectedError(InputRejectedError):
    pass


class ExpenseRejectedError(InputRejectedError):
    pass


class FlowOutcome(BaseModel):
    """
    What a mutating flow produced.

    When the change exhausted the budget, the cycle has already been
    archived and is no longer active; snapshot shows its final state.
    """

    cycle: Cycle
    snapshot: PacingSnapshot
    expense: Optional[Expense] = None
    archived: Optional[DefeatRecord] = None


class BudgetFlow:
    """
    Orchestrates every user action on the active cycle.

    Flow for an expense:
    1. Validate → reject loudly with all issues
    2. Append → storage assigns ID and (default) date
    3. Pace → compute the snapshot for today
    4. Archive → if the remaining budget hit zero
    """

    def __init__(
        self,
        cycle_storage: CycleStorageInterface,
        history_storage: Optional[HistoryStorageInterface] = None,
        validator: Optional[CycleSetupValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Optional[Callable[[], date]] = None,
    ):
        if history_storage is None:
            if not isinstance(cycle_storage, HistoryStorageInterface):
                raise TypeError("history_storage is required when cycle storage keeps no history")
            history_storage = cycle_storage

        self._storage = cycle_storage
        self._history = history_storage
        self._validator = validator or CycleSetupValidator()
        self._audit_logger = audit_logger or AuditLogger()
        self._clock = clock or date.today

    def today(self) -> date:
        return self._clock()

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def start_cycle(
        self,
        monthly_budget: Union[str, float, None],
        start_date: Union[str, date, None],
        end_date: Union[str, date, None],
    ) -> Cycle:
        """
        Create a new cycle from the setup form.

        An existing active cycle is archived as a manual restart once the
        new cycle is stored.

        Raises:
            SetupRejectedError: If the form is invalid (nothing changes)
        """
        result = self._validator.validate_setup(monthly_budget, start_date, end_date)
        if not result.is_valid:
            self._reject("setup", result)

        today = self.today()
        try:
            active = self._storage.get_active_cycle()
            # A failed create leaves the old cycle active and unarchived
            cycle = self._storage.create_cycle(result.params)
            if active is not None:
                self._archive(
                    active,
                    EndReason.MANUAL_NEW_CYCLE,
                    today,
                    clear_active=False,
                )
        except StorageError as e:
            self._audit_logger.log_storage_error("start_cycle", str(e))
            raise

        self._audit_logger.log_cycle_created(
            cycle_id=cycle.id,
            monthly_budget=cycle.monthly_budget,
            start_date=cycle.start_date.isoformat(),
            end_date=cycle.end_date.isoformat(),
        )
        return cycle

    # -------------------------------------------------------------------------
    # Expenses and budget
    # -------------------------------------------------------------------------

    def log_expense(
        self,
        amount: Union[str, float, None],
        category: Union[str, ExpenseCategory, None] = None,
        comment: Optional[str] = None,
        expense_date: Union[str, date, None] = None,
    ) -> FlowOutcome:
        """
        Append an expense to the active cycle.

        Raises:
            NoActiveCycleError: If no cycle is active
            ExpenseRejectedError: If the form is invalid (nothing changes)
        """
        cycle = self._require_active()
        result = self._validator.validate_expense(amount, category, comment, expense_date)
        if not result.is_valid:
            self._reject("expense", result)

        today = self.today()
        try:
            expense = self._storage.add_expense(cycle.id, result.expense, today)
        except StorageError as e:
            self._audit_logger.log_storage_error("add_expense", str(e))
            raise

        self._audit_logger.log_expense_added(
            cycle_id=cycle.id,
            expense_id=expense.id,
            amount=expense.amount,
            category=expense.category.value,
        )

        cycle.expenses.append(expense)
        outcome = self._settle(cycle, today)
        outcome.expense = expense
        return outcome

    def adjust_budget(self, delta: float) -> FlowOutcome:
        """
        Emergency increase (positive delta) or decrease of the budget.

        The budget never drops below zero. Cutting it to or below what has
        already been spent exhausts the cycle.

        Raises:
            NoActiveCycleError: If no cycle is active
        """
        cycle = self._require_active()
        previous = cycle.monthly_budget
        updated = cycle.model_copy(update={"monthly_budget": max(0.0, previous + delta)})

        try:
            self._storage.update_cycle(updated)
        except StorageError as e:
            self._audit_logger.log_storage_error("adjust_budget", str(e))
            raise

        self._audit_logger.log_budget_adjusted(
            cycle_id=updated.id,
            previous_budget=previous,
            new_budget=updated.monthly_budget,
        )
        return self._settle(updated, self.today())

    # -------------------------------------------------------------------------
    # Reads and reset
    # -------------------------------------------------------------------------

    def active_cycle(self) -> Optional[Cycle]:
        return self._storage.get_active_cycle()

    def dashboard(self) -> Optional[PacingSnapshot]:
        """Pacing snapshot of the active cycle, or None without one."""
        cycle = self._storage.get_active_cycle()
        if cycle is None:
            return None
        return build_snapshot(cycle, self.today())

    def history(self) -> list[DefeatRecord]:
        return self._history.get_defeats_history()

    def reset(self) -> Optional[str]:
        """
        Clear the active pointer without writing a history record.

        The cycle itself stays in storage.

        Returns:
            ID of the cycle that was active, if any
        """
        active = self._storage.get_active_cycle()
        self._storage.set_active_cycle_id(None)
        if active is None:
            return None
        self._audit_logger.log_cycle_reset(active.id)
        return active.id

    def report_error(self, operation: str, error: Exception) -> None:
        """Audit an unexpected failure raised while serving a user action."""
        logger.error(
            "flow_failed",
            operation=operation,
            error_type=type(error).__name__,
            exc_info=error,
        )
        self._audit_logger.log_error(
            error_type=type(error).__name__,
            error_message=str(error),
            details={
                "operation": operation,
                "environment": get_settings().app.app_environment,
            },
        )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require_active(self) -> Cycle:
        cycle = self._storage.get_active_cycle()
        if cycle is None:
            raise NoActiveCycleError("No active cycle. Set up a budget first.")
        return cycle

    def _reject(self, form: str, result: ValidationResult) -> None:
        issues = [
            {"field": i.field, "type": i.issue_type, "message": i.message}
            for i in result.issues
        ]
        self._audit_logger.log_input_rejected(form=form, issues=issues)
        if form == "setup":
            raise SetupRejectedError(result)
        raise ExpenseRejectedError(result)

    def _settle(self, cycle: Cycle, today: date) -> FlowOutcome:
        """Compute the snapshot and archive the cycle if its budget is gone."""
        snapshot = build_snapshot(cycle, today)
        archived = None
        if remaining_budget(cycle) <= 0:
            archived = self._archive(cycle, EndReason.BUDGET_EXHAUSTED, today)
        return FlowOutcome(cycle=cycle, snapshot=snapshot, archived=archived)

    def _archive(
        self,
        cycle: Cycle,
        reason: EndReason,
        today: date,
        clear_active: bool = True,
    ) -> DefeatRecord:
        """Append the cycle's outcome to history, clearing the active pointer by default."""
        record = DefeatRecord(
            cycle_id=cycle.id,
            days_survived=days_survived(cycle, today),
            overspent_amount=overspent_amount(cycle),
            end_reason=reason,
        )
        self._history.append_defeat(record)
        if clear_active:
            self._storage.set_active_cycle_id(None)

        self._audit_logger.log_cycle_archived(
            cycle_id=cycle.id,
            end_reason=reason.value,
            days_survived=record.days_survived,
            overspent_amount=record.overspent_amount,
        )
        logger.info("cycle_archived", cycle_id=cycle.id, end_reason=reason.value)
        return record


def create_storage(use_storage: bool = True) -> KeyValueStorage:
    """
    Build the configured storage backend.

    Args:
        use_storage: False forces in-memory storage (nothing touches disk)
    """
    settings = get_settings().storage
    if not use_storage or settings.backend == "memory":
        return InMemoryStorage(namespace=settings.namespace)
    return JsonFileStorage(path=settings.data_path, namespace=settings.namespace)


def create_app_components(
    use_storage: bool = True,
) -> tuple[BudgetFlow, KeyValueStorage]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to persist to the configured backend.
                    Set to False for a throwaway in-memory session.

    Returns:
        (budget_flow, storage)
    """
    configure_logging()

    storage = create_storage(use_storage)
    audit_logger = AuditLogger(storage)
    flow = BudgetFlow(
        cycle_storage=storage,
        history_storage=storage,
        audit_logger=audit_logger,
    )
    return flow, storage
