"""
Exceptions for the Finance Ledger

A rejected line is NOT an exception; it is a ValidationError value.
These classes cover the conditions that stop a whole run.
"""


class LedgerError(Exception):
    """Base exception for the finance ledger."""
    pass


class StorageError(LedgerError):
    """Base exception for storage operations."""
    pass


class DataFileNotFoundError(StorageError):
    """Data file does not exist or is not a regular file."""
    pass


class TooManyInvalidLinesError(LedgerError):
    """The data file has more rejected lines than the configured limit."""

    def __init__(self, failures: int, line_number: int):
        super().__init__(
            f"Too many wrong lines in data file ({failures}), "
            f"last one at line {line_number}"
        )
        self.failures = failures
        self.line_number = line_number
