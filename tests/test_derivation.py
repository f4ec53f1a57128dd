"""Tests for splitting a commission into installments."""

import pytest
from datetime import date
from decimal import Decimal

from comissio.engine import add_months, derive_installments
from comissio.models.commission import CommissionInput, InstallmentStatus


def make_input(total="1200", sale_date=date(2024, 1, 15), count=4) -> CommissionInput:
    return CommissionInput(
        description="Venda",
        client_name="Maria",
        total_value=Decimal(total),
        sale_date=sale_date,
        installment_count=count,
    )


class TestAddMonths:
    """Tests for calendar month arithmetic."""

    def test_keeps_day_of_month(self):
        assert add_months(date(2024, 1, 15), 1) == date(2024, 2, 15)

    def test_crosses_year_boundary(self):
        assert add_months(date(2024, 11, 10), 3) == date(2025, 2, 10)

    def test_clamps_to_leap_day(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_clamps_to_february_28(self):
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)

    def test_negative_offset(self):
        assert add_months(date(2024, 3, 31), -1) == date(2024, 2, 29)


class TestDeriveInstallments:
    """Tests for derive_installments."""

    def test_equal_split_scenario(self):
        """Test 1200 in 4x from 2024-01-15."""
        commission, installments = derive_installments(make_input())

        assert commission.total_value == Decimal("1200")
        assert commission.installment_count == 4
        assert [i.value for i in installments] == [Decimal("300")] * 4
        assert [i.due_date for i in installments] == [
            date(2024, 1, 15),
            date(2024, 2, 15),
            date(2024, 3, 15),
            date(2024, 4, 15),
        ]
        assert all(i.status == InstallmentStatus.PENDING for i in installments)

    def test_numbering_and_parent_link(self):
        commission, installments = derive_installments(make_input(count=6))

        assert [i.number for i in installments] == [1, 2, 3, 4, 5, 6]
        assert all(i.total_installments == 6 for i in installments)
        assert all(i.commission_id == commission.id for i in installments)

    def test_month_end_sale_clamps(self):
        """Test 100 in 2x from 2024-01-31."""
        _, installments = derive_installments(
            make_input(total="100", sale_date=date(2024, 1, 31), count=2)
        )
        assert [i.due_date for i in installments] == [
            date(2024, 1, 31),
            date(2024, 2, 29),
        ]

    def test_day_returns_in_longer_months(self):
        """Test that offsets are taken from the sale date, not chained."""
        _, installments = derive_installments(
            make_input(total="300", sale_date=date(2024, 1, 31), count=3)
        )
        assert [i.due_date for i in installments] == [
            date(2024, 1, 31),
            date(2024, 2, 29),
            date(2024, 3, 31),
        ]

    def test_uneven_split_drift_is_bounded(self):
        """Test that 100 in 3x sums to 100 within a cent per installment."""
        _, installments = derive_installments(make_input(total="100", count=3))

        total = sum(i.value for i in installments)
        assert len(installments) == 3
        assert installments[0].value == installments[1].value == installments[2].value
        assert abs(total - Decimal("100")) <= Decimal("0.01") * 3

    @pytest.mark.parametrize("count", [1, 2, 5, 12, 24])
    def test_count_matches_installment_count(self, count):
        commission, installments = derive_installments(make_input(count=count))
        assert len(installments) == count
        assert installments[-1].due_date == add_months(commission.sale_date, count - 1)

    def test_ids_are_unique(self):
        commission, installments = derive_installments(make_input(count=12))
        ids = {i.id for i in installments} | {commission.id}
        assert len(ids) == 13

    def test_single_installment(self):
        commission, installments = derive_installments(make_input(total="99.90", count=1))
        assert len(installments) == 1
        assert installments[0].value == Decimal("99.90")
        assert installments[0].due_date == commission.sale_date
