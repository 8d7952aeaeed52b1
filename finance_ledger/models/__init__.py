"""
Data Models Package

This package contains all Pydantic models used in the Finance Ledger.
All data flowing out of the validator must conform to these schemas.
"""

from finance_ledger.models.record import (
    DATE_SEPARATOR,
    FIELD_SEPARATOR,
    LedgerSummary,
    ParsedRecord,
    RecordFormat,
    Sign,
    ValidationError,
    ValidationErrorCode,
    ValidationResult,
)
from finance_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Record models
    "DATE_SEPARATOR",
    "FIELD_SEPARATOR",
    "LedgerSummary",
    "ParsedRecord",
    "RecordFormat",
    "Sign",
    "ValidationError",
    "ValidationErrorCode",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
