"""
Main Orchestrator for the Finance Ledger

This module ties the components together into the one end-to-end flow
the tool has: read the data file, validate every line, sum the records.

    storage -> lines -> RecordValidator -> LedgerSummary

DESIGN DECISION: The orchestrator owns the policy, the validator owns
the rules:
- Which date counts as "today" (and what to do if the clock fails)
- How many rejected lines are tolerated before giving up
- Where rejected lines are reported
"""

from collections.abc import Callable, Iterable
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Optional, Union

from finance_ledger.audit import AuditLogger
from finance_ledger.config import get_settings
from finance_ledger.errors import StorageError, TooManyInvalidLinesError
from finance_ledger.models.record import (
    LedgerSummary,
    RecordFormat,
    Sign,
    ValidationError,
)
from finance_ledger.storage import (
    FlatFileLedgerStorage,
    LedgerStorageInterface,
    resolve_data_file,
)
from finance_ledger.validation import RecordValidator


def strip_terminator(line: str) -> str:
    """Remove one trailing line terminator, if any."""
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith(("\n", "\r")):
        return line[:-1]
    return line


class LineProcessor:
    """
    Validates lines in order and accumulates the ledger totals.

    Flow per line:
    1. Count it (blank lines included)
    2. Skip it if blank
    3. Validate it
    4. Rejected -> report, count failure, abort at the limit
    5. Accepted -> add the amount to profit or cost
    """

    def __init__(
        self,
        validator: Optional[RecordValidator] = None,
        max_wrong_lines: Optional[int] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Callable[[], date] = date.today,
        on_rejected: Optional[Callable[[ValidationError], None]] = None,
        on_line: Optional[Callable[[int, str], None]] = None,
    ):
        """
        Initialize the processor.

        Args:
            validator: Record validator. Defaults to one built from settings.
            max_wrong_lines: Rejected lines tolerated before aborting.
                             Defaults to the configured value.
            audit_logger: Where rejected lines and the summary are logged.
            clock: Returns today's date. If it raises, the future-date
                   check is skipped for the whole run.
            on_rejected: Called with every rejected line's error.
            on_line: Called with the number and text of every non-blank
                     line before it is validated.
        """
        self._validator = validator or RecordValidator()
        self._max_wrong_lines = (
            max_wrong_lines
            if max_wrong_lines is not None
            else get_settings().app.max_wrong_lines
        )
        if self._max_wrong_lines < 1:
            raise ValueError("max_wrong_lines must be at least 1")
        self._audit_logger = audit_logger or AuditLogger()
        self._clock = clock
        self._on_rejected = on_rejected
        self._on_line = on_line

    @property
    def validator(self) -> RecordValidator:
        return self._validator

    def current_date(self) -> Optional[date]:
        """Today's date, or None if the clock cannot be read."""
        try:
            return self._clock()
        except (OSError, OverflowError, ValueError) as e:
            self._audit_logger.log_clock_unavailable(str(e))
            return None

    def process_lines(self, lines: Iterable[str]) -> LedgerSummary:
        """
        Process lines and return the totals.

        Raises:
            TooManyInvalidLinesError: When the rejected-line limit is reached
        """
        today = self.current_date()

        lines_read = 0
        records = 0
        failures = 0
        profit = Decimal("0")
        cost = Decimal("0")

        for raw_line in lines:
            lines_read += 1
            line = strip_terminator(raw_line)
            if not line:
                continue
            if self._on_line is not None:
                self._on_line(lines_read, line)

            result = self._validator.validate(line, lines_read, today)

            if result.error is not None:
                failures += 1
                self._report(result.error)
                if failures >= self._max_wrong_lines:
                    self._audit_logger.log_too_many_invalid_lines(failures, lines_read)
                    raise TooManyInvalidLinesError(failures, lines_read)
                continue

            records += 1
            if result.record.sign is Sign.COST:
                cost += result.record.amount
            else:
                profit += result.record.amount

        summary = LedgerSummary(
            lines_read=lines_read,
            records=records,
            failures=failures,
            profit=profit,
            cost=cost,
        )
        self._audit_logger.log_summary(summary)
        return summary

    def process(self, storage: LedgerStorageInterface) -> LedgerSummary:
        """
        Process every line from a storage backend.

        Raises:
            StorageError: If the storage cannot be read
            TooManyInvalidLinesError: When the rejected-line limit is reached
        """
        self._audit_logger.log_data_file_opened(storage.location)
        try:
            return self.process_lines(storage.iter_lines())
        except StorageError as e:
            self._audit_logger.log_data_file_failed(storage.location, str(e))
            raise

    def _report(self, error: ValidationError) -> None:
        self._audit_logger.log_line_rejected(error, self._validator.describe(error))
        if self._on_rejected is not None:
            self._on_rejected(error)


def summarize_data_file(
    path: Optional[Union[str, Path]] = None,
    record_format: Optional[RecordFormat] = None,
    max_wrong_lines: Optional[int] = None,
    audit_logger: Optional[AuditLogger] = None,
    on_rejected: Optional[Callable[[ValidationError], None]] = None,
    on_line: Optional[Callable[[int, str], None]] = None,
) -> LedgerSummary:
    """
    Read a data file and return its summary.

    If ``path`` is not an existing regular file the configured default
    data file is used instead.
    """
    audit_logger = audit_logger or AuditLogger()
    data_file, fell_back = resolve_data_file(path)
    if fell_back:
        audit_logger.log_data_file_fallback(str(path), str(data_file))

    processor = LineProcessor(
        validator=RecordValidator(record_format=record_format),
        max_wrong_lines=max_wrong_lines,
        audit_logger=audit_logger,
        on_rejected=on_rejected,
        on_line=on_line,
    )
    return processor.process(FlatFileLedgerStorage(data_file))
