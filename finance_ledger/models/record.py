"""
Core Data Models for the Finance Ledger

These models define the strict schemas for everything that flows out of
the record validator:
1. ParsedRecord - a line that passed every check
2. ValidationError - the tagged reason a line was rejected
3. ValidationResult - exactly one of the two above
4. LedgerSummary - totals accumulated over a whole data file

DESIGN DECISION: Validation failures are VALUES, not exceptions.
A bad line is reported and skipped; it never crashes the read loop.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


FIELD_SEPARATOR = "|"
DATE_SEPARATOR = "."


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Sign(str, Enum):
    """Polarity of a record."""
    PROFIT = "+"
    COST = "-"


class RecordFormat(str, Enum):
    """
    Line format versions.

    CATEGORIZED: SIGN|DD.MM.YYYY|CATEGORY|AMOUNT|COMMENT
    LEGACY:      SIGN|DD.MM.YYYY|AMOUNT|COMMENT

    DESIGN DECISION: The version is always chosen explicitly.
    There is no silent fallback from one format to the other.
    """
    CATEGORIZED = "categorized"
    LEGACY = "legacy"

    @property
    def has_category(self) -> bool:
        return self is RecordFormat.CATEGORIZED

    @property
    def field_count(self) -> int:
        return 5 if self.has_category else 4

    @property
    def min_length(self) -> int:
        """Shortest line that can possibly hold every field."""
        return 18 if self.has_category else 15


class ValidationErrorCode(str, Enum):
    """
    Every reason a line can be rejected.

    Listed in the order the checks run. The first failing check wins.
    """
    TOO_SHORT = "too_short"
    INVALID_SIGN = "invalid_sign"
    INVALID_SEPARATOR = "invalid_separator"
    MISSING_CATEGORY_SEPARATOR = "missing_category_separator"
    MISSING_AMOUNT_SEPARATOR = "missing_amount_separator"
    INVALID_CATEGORY = "invalid_category"
    INVALID_AMOUNT = "invalid_amount"
    INVALID_DATE_DIGITS = "invalid_date_digits"
    INVALID_DATE_SEPARATOR = "invalid_date_separator"
    DAY_OUT_OF_RANGE = "day_out_of_range"
    MONTH_OUT_OF_RANGE = "month_out_of_range"
    YEAR_IS_ZERO = "year_is_zero"
    LEAP_DAY_OUT_OF_RANGE = "leap_day_out_of_range"
    DAY_OUT_OF_RANGE_FOR_MONTH = "day_out_of_range_for_month"
    DATE_IN_FUTURE = "date_in_future"


# =============================================================================
# RECORD MODELS
# =============================================================================

class ParsedRecord(BaseModel):
    """
    A record that passed every structural and calendar check.

    CRITICAL: Only the validator creates these, and only for lines that
    passed every check. There is no partially-valid record.

    Day/month/year are kept as plain integers rather than a ``date``:
    the accepted calendar is looser than the real one (see the
    ``strict_month_days`` setting), so ``31.04.2020`` can be a valid record.
    """
    model_config = ConfigDict(frozen=True)

    sign: Sign
    day: int = Field(..., ge=1, le=31)
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., gt=0, le=9999)
    category: Optional[int] = Field(
        default=None,
        ge=0,
        description="Numeric category (absent in the legacy format)"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Amount with a canonical '.' decimal point"
    )
    comment: str = Field(
        default="",
        description="Free text, remainder of the line"
    )

    @property
    def is_profit(self) -> bool:
        return self.sign is Sign.PROFIT

    @property
    def date_key(self) -> tuple[int, int, int]:
        """(year, month, day), ordered the way dates compare."""
        return (self.year, self.month, self.day)

    def to_line(self) -> str:
        """Serialize back into the record line format."""
        fields = [
            self.sign.value,
            f"{self.day:02d}{DATE_SEPARATOR}{self.month:02d}{DATE_SEPARATOR}{self.year:04d}",
        ]
        if self.category is not None:
            fields.append(str(self.category))
        fields.append(format(self.amount, "f"))
        fields.append(self.comment)
        return FIELD_SEPARATOR.join(fields)


class ValidationError(BaseModel):
    """
    Why a single line was rejected.

    Carries the line number so the caller decides how to report it.
    Never persisted.
    """
    model_config = ConfigDict(frozen=True)

    code: ValidationErrorCode
    line_number: int = Field(..., ge=0)
    value: Optional[str] = Field(
        default=None,
        description="Offending field value, for diagnostics"
    )


class ValidationResult(BaseModel):
    """
    Outcome of validating one line: a record OR an error, never both.
    """
    model_config = ConfigDict(frozen=True)

    line_number: int = Field(..., ge=0)
    record: Optional[ParsedRecord] = None
    error: Optional[ValidationError] = None

    @model_validator(mode='after')
    def exactly_one_outcome(self) -> 'ValidationResult':
        if (self.record is None) == (self.error is None):
            raise ValueError("A result holds exactly one of record or error")
        return self

    @classmethod
    def ok(cls, record: ParsedRecord, line_number: int) -> 'ValidationResult':
        return cls(line_number=line_number, record=record)

    @classmethod
    def fail(
        cls,
        code: ValidationErrorCode,
        line_number: int,
        value: Optional[str] = None,
    ) -> 'ValidationResult':
        return cls(
            line_number=line_number,
            error=ValidationError(code=code, line_number=line_number, value=value),
        )

    @property
    def is_valid(self) -> bool:
        return self.record is not None


# =============================================================================
# SUMMARY MODEL
# =============================================================================

class LedgerSummary(BaseModel):
    """Totals over one pass of a data file."""

    lines_read: int = Field(default=0, ge=0)
    records: int = Field(default=0, ge=0, description="Valid records")
    failures: int = Field(default=0, ge=0, description="Rejected lines")
    profit: Decimal = Field(default=Decimal("0"))
    cost: Decimal = Field(default=Decimal("0"))

    @property
    def balance(self) -> Decimal:
        return self.profit - self.cost
