"""
Configuration Management for the Finance Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The wrong-line limit, the data file location and the line format
are settings, never module constants.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from finance_ledger.models.record import RecordFormat


class ValidationSettings(BaseSettings):
    """Record validation rules."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_LEDGER_VALIDATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    record_format: RecordFormat = Field(
        default=RecordFormat.CATEGORIZED,
        description="Line format version of the data file"
    )
    # Off reproduces the historical behavior: only February is checked
    strict_month_days: bool = Field(
        default=False,
        description="Reject day 31 in 30-day months"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Data file
    data_dir: Path = Field(
        default_factory=Path.home,
        description="Directory holding the default data file"
    )
    data_file_name: str = Field(
        default="finance.db",
        min_length=1,
        description="Name of the default data file"
    )

    # Line processing
    max_wrong_lines: int = Field(
        default=5,
        ge=1,
        description="Abort once this many lines have been rejected"
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Log level name for the structured logger"
    )
    log_json: bool = Field(
        default=False,
        description="Render log lines as JSON instead of console text"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def default_data_file(self) -> Path:
        """Full path to the data file used when none is given."""
        return self.data_dir / self.data_file_name


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def validation(self) -> ValidationSettings:
        return ValidationSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()
