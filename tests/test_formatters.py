"""Tests for the pt-BR display formatters."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from comissio.utils.formatters import (
    format_currency,
    format_date,
    month_key,
    month_year_label,
    to_date,
)


class TestFormatCurrency:
    """Tests for BRL amount formatting."""

    def test_thousands_and_cents(self):
        assert format_currency(Decimal("1234.5")) == "R$ 1.234,50"

    def test_millions(self):
        assert format_currency(1234567.891) == "R$ 1.234.567,89"

    def test_zero(self):
        assert format_currency(0) == "R$ 0,00"

    def test_negative(self):
        assert format_currency(Decimal("-5")) == "-R$ 5,00"

    def test_repeating_division_rounds_to_cents(self):
        """Test that 100/3 shows as 33,33."""
        assert format_currency(Decimal("100") / 3) == "R$ 33,33"

    def test_half_cent_rounds_up(self):
        assert format_currency(Decimal("0.005")) == "R$ 0,01"


class TestDates:
    """Tests for date formatting and bucketing."""

    def test_format_date(self):
        assert format_date(date(2024, 1, 5)) == "05/01/2024"

    def test_format_date_from_iso_string(self):
        assert format_date("2024-12-31") == "31/12/2024"

    def test_month_year_label(self):
        assert month_year_label(date(2024, 3, 10)) == "Março 2024"
        assert month_year_label(date(2023, 12, 1)) == "Dezembro 2023"

    def test_month_key(self):
        assert month_key(date(2024, 2, 29)) == (2024, 2)

    def test_to_date_accepts_datetime(self):
        assert to_date(datetime(2024, 1, 15, 13, 45)) == date(2024, 1, 15)

    def test_to_date_accepts_iso_timestamp(self):
        assert to_date("2024-01-15T00:00:00.000Z") == date(2024, 1, 15)

    def test_to_date_rejects_garbage(self):
        with pytest.raises(ValueError):
            to_date("not a date")
