"""Audit logging package."""

from finance_ledger.audit.logger import AuditLogger, configure_logging, create_run_id

__all__ = ["AuditLogger", "configure_logging", "create_run_id"]
