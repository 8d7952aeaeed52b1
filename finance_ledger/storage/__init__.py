"""
Storage Package

Provides the abstract line source and its implementations.
The flat text file is the production backend; memory is for tests.
"""

from finance_ledger.errors import DataFileNotFoundError, StorageError
from finance_ledger.storage.interface import (
    InMemoryLedgerStorage,
    LedgerStorageInterface,
)
from finance_ledger.storage.flat_file import (
    FlatFileLedgerStorage,
    is_regular_file,
    resolve_data_file,
)

__all__ = [
    # Interfaces
    "LedgerStorageInterface",
    # Exceptions
    "DataFileNotFoundError",
    "StorageError",
    # Implementations
    "FlatFileLedgerStorage",
    "InMemoryLedgerStorage",
    # Helpers
    "is_regular_file",
    "resolve_data_file",
]
