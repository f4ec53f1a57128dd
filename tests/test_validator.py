"""Tests for the new-commission form validation."""

import pytest
from datetime import date
from decimal import Decimal

from comissio.validation import CommissionIntakeValidator, parse_amount


def issue_fields(result) -> list[str]:
    return [issue.field for issue in result.issues]


class TestParseAmount:
    """Tests for parse_amount."""

    @pytest.mark.parametrize("raw,expected", [
        ("1200", Decimal("1200")),
        ("1234.56", Decimal("1234.56")),
        ("1234,56", Decimal("1234.56")),
        ("1.234,56", Decimal("1234.56")),
        ("1.234.567,89", Decimal("1234567.89")),
        ("R$ 1.500,00", Decimal("1500.00")),
        (" 99,9 ", Decimal("99.9")),
        (300, Decimal("300")),
        (Decimal("12.5"), Decimal("12.5")),
    ])
    def test_valid_amounts(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "12a", "NaN", True])
    def test_invalid_amounts(self, raw):
        assert parse_amount(raw) is None


class TestCommissionIntakeValidator:
    """Tests for CommissionIntakeValidator.validate."""

    def test_valid_submission(self, validator):
        result = validator.validate(
            description="Consultoria",
            client_name="Maria",
            total_value="1.200,00",
            sale_date=date(2024, 1, 15),
            installment_count=4,
        )
        assert result.is_valid
        assert result.commission.total_value == Decimal("1200.00")
        assert result.commission.sale_date == date(2024, 1, 15)
        assert result.commission.installment_count == 4

    def test_text_is_trimmed(self, validator):
        result = validator.validate("  Consultoria ", " Maria ", "10")
        assert result.commission.description == "Consultoria"
        assert result.commission.client_name == "Maria"

    def test_missing_date_defaults_to_today(self, validator):
        result = validator.validate("Consultoria", "Maria", "10", sale_date=None)
        assert result.commission.sale_date == date.today()

    def test_blank_date_string_defaults_to_today(self, validator):
        result = validator.validate("Consultoria", "Maria", "10", sale_date="  ")
        assert result.commission.sale_date == date.today()

    def test_iso_date_string(self, validator):
        result = validator.validate("Consultoria", "Maria", "10", sale_date="2024-03-31")
        assert result.commission.sale_date == date(2024, 3, 31)

    def test_invalid_date(self, validator):
        result = validator.validate("Consultoria", "Maria", "10", sale_date="31/02/2024")
        assert issue_fields(result) == ["date"]

    def test_missing_text_fields(self, validator):
        result = validator.validate("", "   ", "10")
        assert not result.is_valid
        assert result.commission is None
        assert issue_fields(result) == ["description", "client_name"]

    def test_none_text_fields(self, validator):
        result = validator.validate(None, None, "10")
        assert issue_fields(result) == ["description", "client_name"]

    def test_text_too_long(self, validator):
        result = validator.validate("x" * 201, "Maria", "10")
        assert result.issues[0].issue_type == "too_long"

    def test_non_numeric_value(self, validator):
        result = validator.validate("Consultoria", "Maria", "muito")
        assert result.issues[0].field == "total_value"
        assert result.issues[0].issue_type == "invalid_format"

    @pytest.mark.parametrize("value", ["0", "-50", "0,00"])
    def test_non_positive_value(self, validator, value):
        result = validator.validate("Consultoria", "Maria", value)
        assert result.issues[0].issue_type == "invalid_value"
        assert result.issues[0].message == "O valor total deve ser maior que zero"

    def test_value_above_limit(self, validator):
        result = validator.validate("Consultoria", "Maria", "1000000,01")
        assert result.issues[0].issue_type == "suspicious_value"

    def test_disallowed_installment_count(self, validator):
        result = validator.validate("Consultoria", "Maria", "10", installment_count=7)
        assert result.issues[0].field == "installment_count"
        assert result.issues[0].issue_type == "not_allowed"

    def test_installment_count_as_string(self, validator):
        result = validator.validate("Consultoria", "Maria", "10", installment_count="12")
        assert result.commission.installment_count == 12

    def test_garbage_installment_count(self, validator):
        result = validator.validate("Consultoria", "Maria", "10", installment_count="doze")
        assert [i.issue_type for i in result.issues] == ["invalid_format"]

    def test_collects_every_issue(self, validator):
        result = validator.validate("", "", "abc", sale_date="x", installment_count=0)
        assert result.error_count == 5

    def test_allowed_counts_are_copied(self, validator):
        counts = validator.allowed_installment_counts
        counts.append(99)
        assert 99 not in validator.allowed_installment_counts

    def test_user_friendly_summary(self, validator):
        valid = validator.validate("Consultoria", "Maria", "10")
        invalid = validator.validate("", "Maria", "10")

        assert validator.get_user_friendly_summary(valid) == "Comissão pronta para lançamento."
        assert "Informe a descrição da venda" in validator.get_user_friendly_summary(invalid)

    def test_defaults_from_settings(self, monkeypatch):
        monkeypatch.setenv("ALLOWED_INSTALLMENT_COUNTS", "1,3")
        from comissio.config import get_settings

        get_settings.cache_clear()
        try:
            validator = CommissionIntakeValidator()
            assert validator.allowed_installment_counts == [1, 3]
        finally:
            get_settings.cache_clear()
