"""
Installment Derivation

Turns one sale into its payment schedule: an equal split of the total
value, one installment per month starting on the sale date.

DESIGN DECISION: The value is a plain Decimal division with no remainder
redistribution. 100 split in 3 gives three installments of 33.33...,
whose sum drifts from 100 in the last decimal places. This is accepted
behavior, not a bug.

Month arithmetic clamps to the last day of the target month
(Jan 31 + 1 month = Feb 29 in a leap year, Feb 28 otherwise).
Every due date is computed from the sale date itself, never from the
previous installment, so the day-of-month comes back in longer months.
"""

from datetime import date
from uuid import uuid4

from dateutil.relativedelta import relativedelta

from comissio.models.commission import (
    Commission,
    CommissionInput,
    Installment,
    InstallmentStatus,
)


def add_months(start: date, months: int) -> date:
    """Shift a date by whole calendar months, clamping the day."""
    return start + relativedelta(months=months)


def derive_installments(
    commission: CommissionInput,
) -> tuple[Commission, list[Installment]]:
    """
    Create a Commission and its installments, ordered by number.

    The input is trusted: validation belongs to the intake form.
    Nothing is persisted here.
    """
    created = Commission(
        id=uuid4(),
        description=commission.description,
        client_name=commission.client_name,
        total_value=commission.total_value,
        sale_date=commission.sale_date,
        installment_count=commission.installment_count,
    )

    count = commission.installment_count
    installment_value = commission.total_value / count

    installments = [
        Installment(
            id=uuid4(),
            commission_id=created.id,
            number=number,
            total_installments=count,
            value=installment_value,
            due_date=add_months(commission.sale_date, number - 1),
            status=InstallmentStatus.PENDING,
        )
        for number in range(1, count + 1)
    ]

    return created, installments
