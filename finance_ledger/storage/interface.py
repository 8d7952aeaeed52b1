"""
Abstract Storage Interface

DESIGN DECISION: The line processor never opens files itself.
It reads lines from a storage object, which lets us:
1. Read the flat data file in production
2. Use in-memory storage for testing
3. Add other sources later without touching the read loop

The interface is read-only. Appending records is not supported.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator


class LedgerStorageInterface(ABC):
    """
    Abstract source of ledger lines.

    Any storage implementation must yield lines in file order.
    """

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable description of where the lines come from."""

    @abstractmethod
    def iter_lines(self) -> Iterator[str]:
        """
        Yield raw lines in order.

        Lines may still carry their terminator; the processor strips it.

        Raises:
            StorageError: If the source cannot be read
        """


class InMemoryLedgerStorage(LedgerStorageInterface):
    """Ledger lines held in a list. Used by tests and embedding callers."""

    def __init__(self, lines: Iterable[str], location: str = "<memory>"):
        self._lines = list(lines)
        self._location = location

    @property
    def location(self) -> str:
        return self._location

    def iter_lines(self) -> Iterator[str]:
        return iter(self._lines)

