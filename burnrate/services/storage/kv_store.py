"""
Key-Value Storage

DESIGN DECISION: Everything is stored under a handful of keys in a flat
key-value namespace, the same layout the browser version kept in
localStorage:

    <namespace>_cycles   - list of cycle records
    <namespace>_active   - ID of the active cycle
    <namespace>_defeats  - append-only history records
    <namespace>_audit    - append-only audit events

Concrete backends only provide _read/_write/_remove for a single key;
all record handling lives here.

TRADEOFFS:
- Every write rewrites the whole list under a key (fine for personal use)
- No transactions; single user, single device is assumed
- An unreadable record is skipped on read but kept on write-back, so
  one bad record never costs the others
"""

from abc import abstractmethod
from datetime import date, datetime
from typing import Any, Optional, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from burnrate.models.audit import AuditEvent
from burnrate.models.cycle import (
    Cycle,
    CycleParams,
    DefeatRecord,
    Expense,
    NewExpense,
    RecordModel,
)
from burnrate.services.storage.interface import (
    AuditStorageInterface,
    CycleStorageInterface,
    HistoryStorageInterface,
    NotFoundError,
)


DEFAULT_NAMESPACE = "financial_discipline"

# Oldest audit events are dropped beyond this many
MAX_AUDIT_EVENTS = 1000

ModelT = TypeVar("ModelT", bound=BaseModel)

logger = structlog.get_logger(__name__)


class KeyValueStorage(
    CycleStorageInterface,
    HistoryStorageInterface,
    AuditStorageInterface,
):
    """
    Cycle, history and audit storage over a flat key-value namespace.

    Subclasses implement the three single-key primitives.
    """

    def __init__(self, namespace: str = DEFAULT_NAMESPACE):
        self._namespace = namespace
        self._cycles_key = f"{namespace}_cycles"
        self._active_key = f"{namespace}_active"
        self._defeats_key = f"{namespace}_defeats"
        self._audit_key = f"{namespace}_audit"

    @property
    def namespace(self) -> str:
        return self._namespace

    # -------------------------------------------------------------------------
    # Primitives
    # -------------------------------------------------------------------------

    @abstractmethod
    def _read(self, key: str) -> Optional[Any]:
        """Return the JSON-compatible value under key, or None if unset."""
        pass

    @abstractmethod
    def _write(self, key: str, value: Any) -> None:
        """Store a JSON-compatible value under key."""
        pass

    @abstractmethod
    def _remove(self, key: str) -> None:
        """Delete key if present."""
        pass

    def _load_entries(self, key: str, model: type[ModelT]) -> list[Any]:
        """
        Load a list value, one record at a time.

        Records that fail validation are logged and kept as their raw JSON
        value, so writing the list back never drops them.
        """
        raw = self._read(key)
        if not raw:
            return []
        if not isinstance(raw, list):
            logger.warning("storage_value_unreadable", key=key, error="not a list")
            return []

        entries: list[Any] = []
        for index, item in enumerate(raw):
            try:
                entries.append(model.model_validate(item))
            except ValidationError as e:
                logger.warning(
                    "storage_record_unreadable",
                    key=key,
                    index=index,
                    error=str(e),
                )
                entries.append(item)
        return entries

    def _load_list(self, key: str, model: type[ModelT]) -> list[ModelT]:
        """Load the readable records under key."""
        return [e for e in self._load_entries(key, model) if isinstance(e, model)]

    def _save_entries(self, key: str, entries: list[Any]) -> None:
        """Write records and any unreadable raw values back in their order."""
        values = []
        for entry in entries:
            if isinstance(entry, RecordModel):
                values.append(entry.to_record())
            elif isinstance(entry, BaseModel):
                values.append(entry.model_dump(mode="json"))
            else:
                values.append(entry)
        self._write(key, values)

    # -------------------------------------------------------------------------
    # Cycles
    # -------------------------------------------------------------------------

    def _find_cycle(self, entries: list[Any], cycle_id: str) -> Optional[int]:
        for idx, entry in enumerate(entries):
            if isinstance(entry, Cycle) and entry.id == cycle_id:
                return idx
        return None

    def get_cycles(self) -> list[Cycle]:
        return self._load_list(self._cycles_key, Cycle)

    def get_cycle(self, cycle_id: str) -> Optional[Cycle]:
        for cycle in self.get_cycles():
            if cycle.id == cycle_id:
                return cycle
        return None

    def get_active_cycle(self) -> Optional[Cycle]:
        cycle_id = self._read(self._active_key)
        if not cycle_id:
            return None
        return self.get_cycle(str(cycle_id))

    def set_active_cycle_id(self, cycle_id: Optional[str]) -> None:
        if cycle_id:
            self._write(self._active_key, cycle_id)
        else:
            self._remove(self._active_key)

    def create_cycle(self, params: CycleParams) -> Cycle:
        entries = self._load_entries(self._cycles_key, Cycle)
        cycle = Cycle.from_params(params)
        entries.append(cycle)
        self._save_entries(self._cycles_key, entries)
        self.set_active_cycle_id(cycle.id)
        logger.info("cycle_stored", cycle_id=cycle.id)
        return cycle

    def update_cycle(self, cycle: Cycle) -> Cycle:
        entries = self._load_entries(self._cycles_key, Cycle)
        idx = self._find_cycle(entries, cycle.id)
        if idx is None:
            raise NotFoundError(f"Cycle not found: {cycle.id}")
        entries[idx] = cycle
        self._save_entries(self._cycles_key, entries)
        return cycle

    def add_expense(
        self,
        cycle_id: str,
        expense: NewExpense,
        today: date,
    ) -> Expense:
        entries = self._load_entries(self._cycles_key, Cycle)
        idx = self._find_cycle(entries, cycle_id)
        if idx is None:
            raise NotFoundError(f"Cycle not found: {cycle_id}")

        stored = Expense(
            amount=expense.amount,
            category=expense.category,
            comment=expense.comment,
            expense_date=expense.expense_date or today,
            created_at=datetime.now(),
        )
        entries[idx].expenses.append(stored)
        self._save_entries(self._cycles_key, entries)
        return stored

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def append_defeat(self, record: DefeatRecord) -> DefeatRecord:
        entries = self._load_entries(self._defeats_key, DefeatRecord)
        entries.append(record)
        self._save_entries(self._defeats_key, entries)
        return record

    def get_defeats_history(self) -> list[DefeatRecord]:
        return self._load_list(self._defeats_key, DefeatRecord)

    # -------------------------------------------------------------------------
    # Audit
    # -------------------------------------------------------------------------

    def append_event(self, event: AuditEvent) -> bool:
        entries = self._load_entries(self._audit_key, AuditEvent)
        entries.append(event)
        self._save_entries(self._audit_key, entries[-MAX_AUDIT_EVENTS:])
        return True

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        return [
            event for event in self._load_list(self._audit_key, AuditEvent)
            if event.entity_type == entity_type and event.entity_id == entity_id
        ]

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        events = self._load_list(self._audit_key, AuditEvent)
        return list(reversed(events))[:limit]
