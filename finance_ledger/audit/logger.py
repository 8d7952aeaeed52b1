"""
Audit Logger

DESIGN DECISION: The validator and the processor never print.
Everything worth knowing about a run (rejected lines, the data file
used, the final totals) goes through this logger as an AuditEvent.

The audit logger:
- Renders structured events with structlog, on top of stdlib logging
- Supports a run ID to tie together all events of one pass over a file
- Never raises: a logging failure must not abort a ledger run
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from finance_ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from finance_ledger.models.record import LedgerSummary, ValidationError


_SHARED_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


def _configure_structlog(json_output: bool) -> None:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[*_SHARED_PROCESSORS, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Library default: JSON lines through stdlib logging
_configure_structlog(json_output=True)


def configure_logging(level: str = "WARNING", json_output: bool = False) -> None:
    """
    Configure logging for an application entry point (e.g. the CLI).

    Log lines go to stderr so they never mix with the printed summary.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.WARNING),
        force=True,
    )
    _configure_structlog(json_output)


class AuditLogger:
    """Central audit logging service for ledger runs."""

    def __init__(self, run_id: Optional[UUID] = None):
        """
        Initialize audit logger.

        Args:
            run_id: ID shared by all events of one run. Generated if None.
        """
        self.run_id = run_id or create_run_id()
        self._logger = structlog.get_logger("finance_ledger")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the event could not be emitted.
        """
        log_dict = event.to_log_dict()
        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except (OSError, ValueError, TypeError):
            return False
        return True

    def log_data_file_opened(self, path: str) -> None:
        self.log(AuditEventBuilder.data_file_opened(path, self.run_id))

    def log_data_file_fallback(self, requested: str, fallback: str) -> None:
        self.log(AuditEventBuilder.data_file_fallback(requested, fallback, self.run_id))

    def log_data_file_failed(self, path: str, error_message: str) -> None:
        self.log(AuditEventBuilder.data_file_failed(path, error_message, self.run_id))

    def log_line_rejected(self, error: ValidationError, message: str) -> None:
        """Log a rejected line with its rendered diagnostic."""
        self.log(AuditEventBuilder.line_rejected(error, message, self.run_id))

    def log_too_many_invalid_lines(self, failures: int, line_number: int) -> None:
        self.log(AuditEventBuilder.too_many_invalid_lines(failures, line_number, self.run_id))

    def log_clock_unavailable(self, error_message: str) -> None:
        self.log(AuditEventBuilder.clock_unavailable(error_message, self.run_id))

    def log_summary(self, summary: LedgerSummary) -> None:
        self.log(AuditEventBuilder.summary_computed(summary, self.run_id))


def create_run_id() -> UUID:
    """Create a new ID for tracking the events of one ledger run."""
    return uuid4()
