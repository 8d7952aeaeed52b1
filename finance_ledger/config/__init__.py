"""Configuration package."""

from finance_ledger.config.settings import (
    AppSettings,
    Settings,
    ValidationSettings,
    get_settings,
)

__all__ = [
    "AppSettings",
    "Settings",
    "ValidationSettings",
    "get_settings",
]
