"""
Tests for the audit logger.
"""

import pytest

from burnrate.audit import AuditLogger, configure_logging
from burnrate.models.audit import AuditEventBuilder, AuditEventType, AuditSeverity
from burnrate.services.storage import InMemoryStorage, StorageError


class FailingAuditStorage(InMemoryStorage):
    def append_event(self, event):
        raise StorageError("audit log unavailable")


class TestAuditLogger:
    """Tests for AuditLogger persistence behaviour."""

    def test_without_storage_only_logs_locally(self):
        audit_logger = AuditLogger()
        assert audit_logger.log(AuditEventBuilder.cycle_reset("c_1")) is True

    def test_event_is_persisted(self):
        storage = InMemoryStorage()
        audit_logger = AuditLogger(storage)

        assert audit_logger.log(AuditEventBuilder.cycle_reset("c_1")) is True
        events = storage.get_events_by_entity("cycle", "c_1")
        assert [e.event_type for e in events] == [AuditEventType.CYCLE_RESET]

    def test_storage_failure_does_not_raise(self):
        """A broken audit store must not break the calling flow."""
        audit_logger = AuditLogger(FailingAuditStorage())
        assert audit_logger.log(AuditEventBuilder.cycle_reset("c_1")) is False

    def test_helpers_build_expected_events(self):
        storage = InMemoryStorage()
        audit_logger = AuditLogger(storage)

        audit_logger.log_cycle_created("c_1", 3000, "2024-01-01", "2024-01-31")
        audit_logger.log_budget_adjusted("c_1", previous_budget=3000, new_budget=3500)
        audit_logger.log_cycle_archived("c_1", "budget_exhausted", 12, 40.0)
        audit_logger.log_error("ValueError", "boom", {"where": "test"})

        recent = storage.get_recent_events()
        assert [e.event_type for e in recent] == [
            AuditEventType.SYSTEM_ERROR,
            AuditEventType.CYCLE_ARCHIVED,
            AuditEventType.BUDGET_ADJUSTED,
            AuditEventType.CYCLE_CREATED,
        ]
        assert recent[2].severity == AuditSeverity.WARNING
        assert "increased" in recent[2].description
        assert recent[0].severity == AuditSeverity.ERROR

    def test_input_rejection_is_recorded(self):
        storage = InMemoryStorage()
        AuditLogger(storage).log_input_rejected(
            form="expense",
            issues=[{"field": "amount", "type": "invalid_value", "message": "Amount must be a number."}],
        )

        event = storage.get_recent_events(limit=1)[0]
        assert event.event_type == AuditEventType.EXPENSE_REJECTED
        assert event.details["form"] == "expense"


class TestConfigureLogging:
    """Tests for structlog setup."""

    def test_configure_logging_accepts_explicit_level(self, monkeypatch):
        monkeypatch.setenv("BURNRATE_DEBUG_MODE", "true")
        assert configure_logging("WARNING") == "WARNING"

    def test_debug_mode_forces_debug_level(self, monkeypatch):
        monkeypatch.setenv("BURNRATE_DEBUG_MODE", "true")
        monkeypatch.setenv("BURNRATE_LOG_LEVEL", "ERROR")
        assert configure_logging() == "DEBUG"

    def test_configured_level_without_debug_mode(self, monkeypatch):
        monkeypatch.setenv("BURNRATE_DEBUG_MODE", "false")
        monkeypatch.setenv("BURNRATE_LOG_LEVEL", "ERROR")
        assert configure_logging() == "ERROR"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
