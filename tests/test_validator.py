"""
Tests for the record validator.

Every rejection reason has at least one line that triggers it, and the
ordering tests pin down which reason wins when a line has several faults.
"""

import pytest
from datetime import date
from decimal import Decimal

from finance_ledger.models.record import RecordFormat, Sign, ValidationErrorCode
from finance_ledger.validation import RecordValidator, is_leap_year, validate


TODAY = date(2025, 1, 1)

Code = ValidationErrorCode


@pytest.fixture
def validator():
    return RecordValidator(record_format=RecordFormat.CATEGORIZED, strict_month_days=False)


def error_code(validator, line, today=TODAY):
    result = validator.validate(line, 1, today)
    assert result.error is not None, f"expected {line!r} to be rejected"
    return result.error.code


class TestValidRecords:
    """Lines that pass every check."""

    def test_salary_record(self, validator):
        """Test the canonical profit record."""
        result = validator.validate("+|01.01.2020|5|100.50|salary", 1, TODAY)
        assert result.is_valid is True
        record = result.record
        assert record.sign == Sign.PROFIT
        assert (record.day, record.month, record.year) == (1, 1, 2020)
        assert record.category == 5
        assert record.amount == Decimal("100.50")
        assert record.comment == "salary"

    def test_cost_record(self, validator):
        """Test a cost record."""
        result = validator.validate("-|15.06.2021|12|40|groceries", 2, TODAY)
        assert result.record.sign == Sign.COST
        assert result.record.category == 12
        assert result.line_number == 2

    def test_comma_is_decimal_point(self, validator):
        """Test that a comma in the amount is read as the decimal point."""
        result = validator.validate("-|01.01.2020|5|100,50|bus", 1, TODAY)
        assert result.record.amount == Decimal("100.50")

    def test_comment_may_contain_separator(self, validator):
        """Test that everything after the amount is the comment."""
        result = validator.validate("+|01.01.2020|1|10|gift|from mom", 1, TODAY)
        assert result.record.comment == "gift|from mom"

    def test_empty_comment(self, validator):
        result = validator.validate("+|01.01.2020|1|1000|", 1, TODAY)
        assert result.record.comment == ""
        assert result.record.amount == Decimal("1000")

    def test_validation_is_idempotent(self, validator):
        """Test that the same input always yields the same result."""
        line = "+|31.12.2019|3|12.5|coffee"
        assert validator.validate(line, 4, TODAY) == validator.validate(line, 4, TODAY)

    def test_reserialized_record_is_equivalent(self, validator):
        """Test that a record written back out validates to the same record."""
        original = validator.validate("-|07.03.2022|9|12,30|lunch", 1, TODAY).record
        again = validator.validate(original.to_line(), 1, TODAY).record
        assert again == original

    def test_tiny_amount_is_written_without_exponent(self, validator):
        """Test that amounts below 1e-6 are written in plain decimal notation."""
        record = validator.validate("+|01.01.2020|1|0.0000001|x", 1, TODAY).record
        assert record.to_line() == "+|01.01.2020|1|0.0000001|x"
        again = validator.validate(record.to_line(), 1, TODAY)
        assert again.is_valid
        assert again.record == record

    def test_module_level_validate(self):
        """Test the convenience function."""
        result = validate("+|01.01.2020|5|100.50|salary", 1, TODAY)
        assert result.is_valid is True


class TestStructuralChecks:
    """Stage 1: length, sign, separators, category, amount, date shape."""

    def test_empty_line_is_too_short(self, validator):
        assert error_code(validator, "") == Code.TOO_SHORT

    def test_seventeen_characters_is_too_short(self, validator):
        line = "+|01.01.2020|1|1|"
        assert len(line) == 17
        assert error_code(validator, line) == Code.TOO_SHORT

    def test_invalid_sign(self, validator):
        assert error_code(validator, "*|01.01.2020|1|10|x") == Code.INVALID_SIGN

    def test_missing_separator_after_sign(self, validator):
        assert error_code(validator, "+-01.01.2020|1|10|x") == Code.INVALID_SEPARATOR

    def test_missing_separator_after_date(self, validator):
        assert error_code(validator, "+|01.01.2020-1|10|x") == Code.INVALID_SEPARATOR

    def test_missing_category_separator(self, validator):
        assert error_code(validator, "+|01.01.2020|123456") == Code.MISSING_CATEGORY_SEPARATOR

    def test_missing_amount_separator(self, validator):
        assert error_code(validator, "+|01.01.2020|1|1000") == Code.MISSING_AMOUNT_SEPARATOR

    def test_non_digit_category(self, validator):
        assert error_code(validator, "+|01.01.2020|a1|10|x") == Code.INVALID_CATEGORY

    def test_empty_category(self, validator):
        assert error_code(validator, "+|01.01.2020||100|xx") == Code.INVALID_CATEGORY

    def test_non_digit_amount(self, validator):
        assert error_code(validator, "+|01.01.2020|1|10x|x") == Code.INVALID_AMOUNT

    def test_empty_amount(self, validator):
        assert error_code(validator, "+|01.01.2020|1||xxx") == Code.INVALID_AMOUNT

    def test_amount_with_two_points(self, validator):
        """Test that allowed characters still have to form one number."""
        assert error_code(validator, "+|01.01.2020|1|1.2.3|x") == Code.INVALID_AMOUNT

    def test_amount_with_point_and_comma(self, validator):
        assert error_code(validator, "+|01.01.2020|1|1,000.50|x") == Code.INVALID_AMOUNT

    def test_non_digit_date(self, validator):
        assert error_code(validator, "+|0a.01.2020|1|10|x") == Code.INVALID_DATE_DIGITS

    def test_wrong_date_separator(self, validator):
        assert error_code(validator, "+|01-01-2020|1|10|x") == Code.INVALID_DATE_SEPARATOR


class TestCalendarChecks:
    """Stage 2: ranges, February, future dates."""

    def test_last_day_of_january(self, validator):
        assert validator.validate("+|31.01.2024|1|10|x", 1, TODAY).is_valid

    def test_day_32(self, validator):
        assert error_code(validator, "+|32.01.2024|1|10|x") == Code.DAY_OUT_OF_RANGE

    def test_day_zero(self, validator):
        assert error_code(validator, "+|00.01.2024|1|10|x") == Code.DAY_OUT_OF_RANGE

    def test_month_13(self, validator):
        assert error_code(validator, "-|15.13.2020|2|50|rent") == Code.MONTH_OUT_OF_RANGE

    def test_month_zero(self, validator):
        assert error_code(validator, "+|01.00.2020|1|10|x") == Code.MONTH_OUT_OF_RANGE

    def test_year_zero(self, validator):
        assert error_code(validator, "+|01.01.0000|1|10|x") == Code.YEAR_IS_ZERO

    @pytest.mark.parametrize("line", [
        "+|29.02.2024|1|10|x",
        "+|29.02.2000|1|10|x",
        "+|28.02.2023|1|10|x",
    ])
    def test_valid_february_days(self, validator, line):
        assert validator.validate(line, 1, TODAY).is_valid

    @pytest.mark.parametrize("line", [
        "+|29.02.2023|1|10|x",
        "+|29.02.1900|1|10|x",
        "+|30.02.2024|1|10|x",
    ])
    def test_invalid_february_days(self, validator, line):
        assert error_code(validator, line) == Code.LEAP_DAY_OUT_OF_RANGE

    def test_thirty_day_months_not_checked_by_default(self, validator):
        """Known quirk: only February is checked, so 31 April is accepted."""
        assert validator.validate("+|31.04.2020|1|10|x", 1, TODAY).is_valid

    @pytest.mark.parametrize("month", ["04", "06", "09", "11"])
    def test_strict_month_days(self, month):
        """Test that the opt-in rule rejects day 31 in 30-day months."""
        strict = RecordValidator(strict_month_days=True)
        line = f"+|31.{month}.2020|1|10|x"
        assert error_code(strict, line) == Code.DAY_OUT_OF_RANGE_FOR_MONTH
        assert strict.validate(f"+|30.{month}.2020|1|10|x", 1, TODAY).is_valid

    def test_strict_month_days_from_settings(self, monkeypatch):
        monkeypatch.setenv("FINANCE_LEDGER_VALIDATION_STRICT_MONTH_DAYS", "true")
        assert error_code(RecordValidator(), "+|31.04.2020|1|10|x") == Code.DAY_OUT_OF_RANGE_FOR_MONTH

    def test_date_in_future(self, validator):
        assert error_code(validator, "+|01.01.2099|1|10|x") == Code.DATE_IN_FUTURE

    def test_tomorrow_is_future(self, validator):
        assert error_code(validator, "+|02.01.2025|1|10|x") == Code.DATE_IN_FUTURE

    def test_today_is_not_future(self, validator):
        assert validator.validate("+|01.01.2025|1|10|x", 1, TODAY).is_valid

    def test_unknown_today_skips_future_check(self, validator):
        """Test the fail-open behavior when the clock is unavailable."""
        assert validator.validate("+|01.01.2099|1|10|x", 1, None).is_valid

    @pytest.mark.parametrize("year,expected", [
        (2000, True),
        (1900, False),
        (2024, True),
        (2023, False),
    ])
    def test_is_leap_year(self, year, expected):
        assert is_leap_year(year) is expected


class TestCheckOrder:
    """The first failing check wins."""

    def test_amount_checked_before_date(self, validator):
        assert error_code(validator, "+|32.13.2020|1|10x|x") == Code.INVALID_AMOUNT

    def test_category_checked_before_amount(self, validator):
        assert error_code(validator, "+|01.01.2020|x|10x|x") == Code.INVALID_CATEGORY

    def test_day_checked_before_month_and_year(self, validator):
        assert error_code(validator, "+|32.13.0000|1|10|x") == Code.DAY_OUT_OF_RANGE

    def test_length_checked_before_sign(self, validator):
        assert error_code(validator, "*") == Code.TOO_SHORT

    def test_future_checked_last(self, validator):
        assert error_code(validator, "+|30.02.2099|1|10|x") == Code.LEAP_DAY_OUT_OF_RANGE


class TestLegacyFormat:
    """SIGN|DD.MM.YYYY|AMOUNT|COMMENT"""

    @pytest.fixture
    def legacy(self):
        return RecordValidator(record_format=RecordFormat.LEGACY)

    def test_legacy_record(self, legacy):
        result = legacy.validate("+|01.01.2020|10|x", 1, TODAY)
        assert result.is_valid is True
        assert result.record.category is None
        assert result.record.amount == Decimal("10")
        assert result.record.to_line() == "+|01.01.2020|10|x"

    def test_legacy_minimum_length(self, legacy):
        """Test that 15 characters are enough without a category."""
        assert legacy.validate("+|01.01.2020|1|", 1, TODAY).is_valid
        assert error_code(legacy, "+|01.01.2020|") == Code.TOO_SHORT

    def test_legacy_missing_amount_separator(self, legacy):
        assert error_code(legacy, "+|01.01.2020|100") == Code.MISSING_AMOUNT_SEPARATOR

    def test_legacy_invalid_amount(self, legacy):
        assert error_code(legacy, "+|01.01.2020|1a|x") == Code.INVALID_AMOUNT

    def test_format_from_settings(self, monkeypatch):
        monkeypatch.setenv("FINANCE_LEDGER_VALIDATION_RECORD_FORMAT", "legacy")
        assert RecordValidator().record_format is RecordFormat.LEGACY


class TestDescribe:
    """Rendering errors for people."""

    def test_describe_with_value(self, validator):
        error = validator.validate("+|32.01.2020|1|10|x", 7, TODAY).error
        assert RecordValidator.describe(error) == "7: Invalid number of day: 32"

    def test_describe_without_value(self, validator):
        error = validator.validate("short", 3, TODAY).error
        assert RecordValidator.describe(error) == "3: String is too small"

    def test_every_code_has_a_message(self):
        from finance_ledger.models.record import ValidationError

        for code in ValidationErrorCode:
            text = RecordValidator.describe(ValidationError(code=code, line_number=1))
            assert text.startswith("1: ")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
