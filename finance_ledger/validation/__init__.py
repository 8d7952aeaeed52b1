"""Record validation package."""

from finance_ledger.validation.validator import RecordValidator, is_leap_year, validate

__all__ = ["RecordValidator", "is_leap_year", "validate"]
