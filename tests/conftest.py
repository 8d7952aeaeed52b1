import os

import pytest

from finance_ledger.audit import AuditLogger
from finance_ledger.config import get_settings


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep host environment and any local .env out of the settings."""
    for key in list(os.environ):
        if key.startswith("FINANCE_LEDGER_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("FINANCE_LEDGER_DATA_DIR", str(tmp_path / "home"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class RecordingAuditLogger(AuditLogger):
    """Keeps events in memory instead of emitting them."""

    def __init__(self):
        super().__init__()
        self.events = []

    def log(self, event):
        self.events.append(event)
        return True


@pytest.fixture
def audit_logger():
    return RecordingAuditLogger()
