"""Audit logging package."""

from burnrate.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
