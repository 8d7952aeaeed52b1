"""
Audit Models for the Finance Ledger

Every significant step of a ledger run is logged as an audit event:
opening the data file, rejecting a line, aborting on too many bad
lines, and the final summary.

DESIGN DECISION: Events are plain data. Emitting them is the job of
the AuditLogger, so the validator and processor stay free of I/O.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from finance_ledger.models.record import LedgerSummary, ValidationError


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Data file
    DATA_FILE_OPENED = "data_file_opened"
    DATA_FILE_FALLBACK = "data_file_fallback"
    DATA_FILE_FAILED = "data_file_failed"

    # Line processing
    LINE_REJECTED = "line_rejected"
    TOO_MANY_INVALID_LINES = "too_many_invalid_lines"
    CLOCK_UNAVAILABLE = "clock_unavailable"

    # Result
    SUMMARY_COMPUTED = "summary_computed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single audit event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Correlation - all events from one run share this
    run_id: Optional[UUID] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "run_id": str(self.run_id) if self.run_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.line_rejected(error, run_id)
        event = AuditEventBuilder.summary_computed(summary, run_id)
    """

    @staticmethod
    def data_file_opened(path: str, run_id: Optional[UUID] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_FILE_OPENED,
            severity=AuditSeverity.DEBUG,
            run_id=run_id,
            description=f"Data file opened: {path}",
            details={"path": path},
        )

    @staticmethod
    def data_file_fallback(
        requested: str,
        fallback: str,
        run_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_FILE_FALLBACK,
            severity=AuditSeverity.INFO,
            run_id=run_id,
            description="Requested data file unusable, using default data file",
            details={"requested": requested, "fallback": fallback},
        )

    @staticmethod
    def data_file_failed(
        path: str,
        error_message: str,
        run_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_FILE_FAILED,
            severity=AuditSeverity.ERROR,
            run_id=run_id,
            description=f"Failed to read data file: {path}",
            details={"path": path},
            error_message=error_message,
        )

    @staticmethod
    def line_rejected(
        error: ValidationError,
        message: str,
        run_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LINE_REJECTED,
            severity=AuditSeverity.INFO,
            run_id=run_id,
            description=message,
            details={
                "line_number": error.line_number,
                "code": error.code.value,
                "value": error.value,
            },
        )

    @staticmethod
    def too_many_invalid_lines(
        failures: int,
        line_number: int,
        run_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TOO_MANY_INVALID_LINES,
            severity=AuditSeverity.ERROR,
            run_id=run_id,
            description=f"Too many wrong lines in data file ({failures}), aborting",
            details={"failures": failures, "line_number": line_number},
        )

    @staticmethod
    def clock_unavailable(error_message: str, run_id: Optional[UUID] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CLOCK_UNAVAILABLE,
            severity=AuditSeverity.WARNING,
            run_id=run_id,
            description="Current date unavailable, future-date check skipped",
            error_message=error_message,
        )

    @staticmethod
    def summary_computed(summary: LedgerSummary, run_id: Optional[UUID] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUMMARY_COMPUTED,
            run_id=run_id,
            description=(
                f"Read {summary.lines_read} lines, "
                f"{summary.records} records, {summary.failures} rejected"
            ),
            details={
                "lines_read": summary.lines_read,
                "records": summary.records,
                "failures": summary.failures,
                "profit": str(summary.profit),
                "cost": str(summary.cost),
                "balance": str(summary.balance),
            },
        )
