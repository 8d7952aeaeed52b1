"""
Two-Stage Record Validation

DESIGN DECISION: Every line goes through two stages, fail fast:

STAGE 1 - STRUCTURAL VALIDATION:
- Minimum length
- Sign field
- Field separators (split on '|', one rule per token)
- Category and amount characters
- Date digits and date separators

STAGE 2 - CALENDAR VALIDATION:
- Day, month and year ranges
- February length (leap years)
- Future date rejection

The first failing check ends validation; later checks never run.
Only a line that passes both stages yields a ParsedRecord.

IMPORTANT: The validator is pure. It never logs, never reads the clock
and never raises for a bad line. ``today`` is passed in by the caller;
``None`` means the clock was unavailable and the future-date check is
skipped.
"""

import calendar
import string
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import NamedTuple, Optional

from finance_ledger.config import get_settings
from finance_ledger.models.record import (
    DATE_SEPARATOR,
    FIELD_SEPARATOR,
    ParsedRecord,
    RecordFormat,
    Sign,
    ValidationError,
    ValidationErrorCode,
    ValidationResult,
)


_DIGITS = frozenset(string.digits)
_AMOUNT_CHARS = _DIGITS | {".", ","}

# DD.MM.YYYY
_DATE_LENGTH = 10
_DATE_DIGIT_POSITIONS = (0, 1, 3, 4, 6, 7, 8, 9)
_DATE_SEPARATOR_POSITIONS = (2, 5)

_THIRTY_DAY_MONTHS = frozenset({4, 6, 9, 11})

_MESSAGES = {
    ValidationErrorCode.TOO_SHORT: "String is too small",
    ValidationErrorCode.INVALID_SIGN: "First field of string should be sign '+' or '-'",
    ValidationErrorCode.INVALID_SEPARATOR: "Separator for fields should be sign '|'",
    ValidationErrorCode.MISSING_CATEGORY_SEPARATOR: "Separator after category field not found",
    ValidationErrorCode.MISSING_AMOUNT_SEPARATOR: "Separator after amount field not found",
    ValidationErrorCode.INVALID_CATEGORY: "Category field should consist of digits only",
    ValidationErrorCode.INVALID_AMOUNT: "Amount field should be a number of digits and point or comma",
    ValidationErrorCode.INVALID_DATE_DIGITS: "Date should consist of digits only",
    ValidationErrorCode.INVALID_DATE_SEPARATOR: "Separator for date should be sign '.'",
    ValidationErrorCode.DAY_OUT_OF_RANGE: "Invalid number of day",
    ValidationErrorCode.MONTH_OUT_OF_RANGE: "Invalid number of month",
    ValidationErrorCode.YEAR_IS_ZERO: "Invalid number of year, year should be more than 0",
    ValidationErrorCode.LEAP_DAY_OUT_OF_RANGE: "Invalid day of February",
    ValidationErrorCode.DAY_OUT_OF_RANGE_FOR_MONTH: "Invalid day of month",
    ValidationErrorCode.DATE_IN_FUTURE: "Date in future",
}


class _Rejected(Exception):
    """Ends validation of one line at the first failing check."""

    def __init__(self, code: ValidationErrorCode, value: Optional[str] = None):
        super().__init__(code.value)
        self.code = code
        self.value = value


class _Fields(NamedTuple):
    """Tokens of a structurally valid line."""
    sign: str
    date: str
    category: Optional[str]
    amount: str
    comment: str


def is_leap_year(year: int) -> bool:
    """Every 4th year, except centuries not divisible by 400."""
    return calendar.isleap(year)


def _is_digits(token: str) -> bool:
    return bool(token) and all(c in _DIGITS for c in token)


class RecordValidator:
    """
    Validates record lines and extracts ParsedRecords from them.

    Holds only immutable rules, so one instance can validate any number
    of lines, in any order, from any thread.
    """

    def __init__(
        self,
        record_format: Optional[RecordFormat] = None,
        strict_month_days: Optional[bool] = None,
    ):
        """
        Initialize validator.

        Args:
            record_format: Line format version. Defaults to the configured one.
            strict_month_days: Also reject day 31 in 30-day months.
                               Defaults to the configured value.
        """
        settings = get_settings().validation
        self._format = record_format or settings.record_format
        self._strict_month_days = (
            settings.strict_month_days
            if strict_month_days is None
            else strict_month_days
        )

    @property
    def record_format(self) -> RecordFormat:
        return self._format

    def _validate_structure(self, line: str) -> _Fields:
        """
        Stage 1: structural validation.

        Raises _Rejected on the first failing check.
        """
        fmt = self._format

        if len(line) < fmt.min_length:
            raise _Rejected(ValidationErrorCode.TOO_SHORT, str(len(line)))

        if line[0] not in (Sign.PROFIT.value, Sign.COST.value):
            raise _Rejected(ValidationErrorCode.INVALID_SIGN, line[0])

        # The comment is the last field and may itself contain '|'
        tokens = line.split(FIELD_SEPARATOR, fmt.field_count - 1)
        if (
            len(tokens) < 3
            or len(tokens[0]) != 1
            or len(tokens[1]) != _DATE_LENGTH
        ):
            raise _Rejected(ValidationErrorCode.INVALID_SEPARATOR)

        if fmt.has_category:
            if len(tokens) < 4:
                raise _Rejected(ValidationErrorCode.MISSING_CATEGORY_SEPARATOR)
            if len(tokens) < 5:
                raise _Rejected(ValidationErrorCode.MISSING_AMOUNT_SEPARATOR)
            sign, date_token, category, amount, comment = tokens
            if not _is_digits(category):
                raise _Rejected(ValidationErrorCode.INVALID_CATEGORY, category)
        else:
            if len(tokens) < 4:
                raise _Rejected(ValidationErrorCode.MISSING_AMOUNT_SEPARATOR)
            sign, date_token, amount, comment = tokens
            category = None

        if not amount or any(c not in _AMOUNT_CHARS for c in amount):
            raise _Rejected(ValidationErrorCode.INVALID_AMOUNT, amount)

        if any(date_token[i] not in _DIGITS for i in _DATE_DIGIT_POSITIONS):
            raise _Rejected(ValidationErrorCode.INVALID_DATE_DIGITS, date_token)

        if any(date_token[i] != DATE_SEPARATOR for i in _DATE_SEPARATOR_POSITIONS):
            raise _Rejected(ValidationErrorCode.INVALID_DATE_SEPARATOR, date_token)

        return _Fields(sign, date_token, category, amount, comment)

    def _validate_calendar(
        self,
        date_token: str,
        today: Optional[date],
    ) -> tuple[int, int, int]:
        """
        Stage 2: calendar validation.

        Returns (day, month, year). Raises _Rejected on the first failing check.
        """
        day = int(date_token[0:2])
        month = int(date_token[3:5])
        year = int(date_token[6:10])

        if not 1 <= day <= 31:
            raise _Rejected(ValidationErrorCode.DAY_OUT_OF_RANGE, str(day))

        if not 1 <= month <= 12:
            raise _Rejected(ValidationErrorCode.MONTH_OUT_OF_RANGE, str(month))

        if year == 0:
            raise _Rejected(ValidationErrorCode.YEAR_IS_ZERO, str(year))

        if month == 2:
            february_days = 29 if is_leap_year(year) else 28
            if day > february_days:
                raise _Rejected(ValidationErrorCode.LEAP_DAY_OUT_OF_RANGE, f"{day}.{month}")

        if self._strict_month_days and month in _THIRTY_DAY_MONTHS and day > 30:
            raise _Rejected(ValidationErrorCode.DAY_OUT_OF_RANGE_FOR_MONTH, f"{day}.{month}")

        if today is not None and (year, month, day) > (today.year, today.month, today.day):
            raise _Rejected(ValidationErrorCode.DATE_IN_FUTURE, f"{day}.{month}.{year}")

        return day, month, year

    @staticmethod
    def _parse_amount(amount: str) -> Decimal:
        """Read a comma as the decimal point; reject anything not one number."""
        try:
            return Decimal(amount.replace(",", "."))
        except InvalidOperation:
            raise _Rejected(ValidationErrorCode.INVALID_AMOUNT, amount) from None

    def validate(
        self,
        line: str,
        line_number: int,
        today: Optional[date],
    ) -> ValidationResult:
        """
        Validate one line and extract its record.

        Args:
            line: The raw line, terminator already stripped
            line_number: Line number used in the error, if any
            today: Current date, or None to skip the future-date check

        Returns:
            ValidationResult holding either the record or the error
        """
        try:
            fields = self._validate_structure(line)
            day, month, year = self._validate_calendar(fields.date, today)
            amount = self._parse_amount(fields.amount)
        except _Rejected as rejected:
            return ValidationResult.fail(rejected.code, line_number, rejected.value)

        record = ParsedRecord(
            sign=Sign(fields.sign),
            day=day,
            month=month,
            year=year,
            category=int(fields.category) if fields.category is not None else None,
            amount=amount,
            comment=fields.comment,
        )
        return ValidationResult.ok(record, line_number)

    @staticmethod
    def describe(error: ValidationError) -> str:
        """
        Render an error as a one-line diagnostic: ``<line>: <message>``.

        This is the only place that turns error codes into text.
        """
        message = _MESSAGES[error.code]
        if error.value is not None and error.code not in (
            ValidationErrorCode.TOO_SHORT,
            ValidationErrorCode.INVALID_SIGN,
        ):
            return f"{error.line_number}: {message}: {error.value}"
        return f"{error.line_number}: {message}"


def validate(
    line: str,
    line_number: int,
    today: Optional[date],
    record_format: RecordFormat = RecordFormat.CATEGORIZED,
) -> ValidationResult:
    """Validate a single line with the given format and default rules."""
    return RecordValidator(record_format=record_format).validate(line, line_number, today)
