"""
Flat File Storage

Reads ledger lines from a plain UTF-8 text file, one record per line.
By default the file is ``finance.db`` in the user's home directory.
"""

from collections.abc import Iterator
from pathlib import Path
from typing import Optional, Union

from finance_ledger.config import AppSettings, get_settings
from finance_ledger.errors import DataFileNotFoundError, StorageError
from finance_ledger.storage.interface import LedgerStorageInterface


def is_regular_file(path: Union[str, Path]) -> bool:
    """True if ``path`` exists and is a regular file (not a directory, FIFO...)."""
    try:
        return Path(path).is_file()
    except OSError:
        return False


def resolve_data_file(
    requested: Optional[Union[str, Path]] = None,
    settings: Optional[AppSettings] = None,
) -> tuple[Path, bool]:
    """
    Pick the data file to read.

    A requested path is used only if it is an existing regular file.
    Otherwise the configured default is used.

    Returns:
        (path, fell_back) where fell_back is True if a requested path
        was rejected in favor of the default.
    """
    settings = settings or get_settings().app
    if requested is not None:
        if is_regular_file(requested):
            return Path(requested), False
        return settings.default_data_file, True
    return settings.default_data_file, False


class FlatFileLedgerStorage(LedgerStorageInterface):
    """Ledger lines read lazily from a text file."""

    def __init__(self, path: Union[str, Path], encoding: str = "utf-8"):
        self._path = Path(path)
        self._encoding = encoding

    @property
    def path(self) -> Path:
        return self._path

    @property
    def location(self) -> str:
        return str(self._path)

    def iter_lines(self) -> Iterator[str]:
        if not is_regular_file(self._path):
            raise DataFileNotFoundError(
                f"Data file {self._path} does not exist or is not a regular file"
            )
        try:
            with self._path.open(encoding=self._encoding, newline="") as f:
                yield from f
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read data file {self._path}: {e}") from e
