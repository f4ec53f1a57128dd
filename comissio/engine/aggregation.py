"""
Aggregation Engine

DESIGN DECISION: Every number on the dashboard is recomputed from the
installment list on each call. There is no cache and no incremental
state: with a single salesperson's data the full pass is trivially cheap,
and a mutation can never leave a stale total behind.

"Now" is an explicit argument (defaulting to today) so the
current-month figures and the cash-flow window are reproducible in tests.
The cash-flow window moves with that date; it is not a historical record.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

from comissio.engine.derivation import add_months
from comissio.models.commission import (
    CashFlowPoint,
    Commission,
    FinancialSummary,
    Installment,
    InstallmentStatus,
    MonthlyGroup,
    MonthlyStats,
)
from comissio.utils.formatters import month_key, month_year_label

# Cash-flow window, in months relative to the current month (inclusive)
WINDOW_MONTHS_BEFORE = 3
WINDOW_MONTHS_AFTER = 6

_ZERO = Decimal("0")


def _sum_values(installments: Iterable[Installment]) -> Decimal:
    return sum((inst.value for inst in installments), _ZERO)


def compute_summary(
    installments: list[Installment],
    today: Optional[date] = None,
) -> FinancialSummary:
    """
    Compute the four dashboard totals.

    - total_expected: every installment
    - total_received: PAID installments
    - month_revenue: installments due in the current month
    - month_pending: PENDING installments due in the current month
    """
    today = today or date.today()
    current = (today.year, today.month)

    this_month = [
        inst for inst in installments
        if month_key(inst.due_date) == current
    ]

    return FinancialSummary(
        total_expected=_sum_values(installments),
        total_received=_sum_values(
            inst for inst in installments
            if inst.status == InstallmentStatus.PAID
        ),
        month_revenue=_sum_values(this_month),
        month_pending=_sum_values(
            inst for inst in this_month
            if inst.status == InstallmentStatus.PENDING
        ),
    )


def cash_flow_series(
    installments: list[Installment],
    today: Optional[date] = None,
) -> list[CashFlowPoint]:
    """
    Monthly totals for the 10-month chart window.

    Always returns one bucket per month from 3 months before to 6 months
    after the current month, in chronological order, including empty
    months. Installments outside the window are left out of the series.
    """
    today = today or date.today()
    first_of_month = today.replace(day=1)

    buckets: dict[tuple[int, int], Decimal] = {}
    for offset in range(-WINDOW_MONTHS_BEFORE, WINDOW_MONTHS_AFTER + 1):
        buckets[month_key(add_months(first_of_month, offset))] = _ZERO

    for inst in installments:
        key = month_key(inst.due_date)
        if key in buckets:
            buckets[key] += inst.value

    return [
        CashFlowPoint(
            year=year,
            month=month,
            label=month_year_label(date(year, month, 1)),
            value=value,
        )
        for (year, month), value in buckets.items()
    ]


def group_by_month(installments: list[Installment]) -> list[MonthlyGroup]:
    """
    Group every installment by due month, for the statement view.

    The list is sorted by due date first (stable, so ties keep their
    original order), which makes the groups come out chronologically.
    No window is applied and the caller's list is left untouched.
    """
    groups: dict[str, MonthlyGroup] = {}
    for inst in sorted(installments, key=lambda i: i.due_date):
        label = month_year_label(inst.due_date)
        if label not in groups:
            groups[label] = MonthlyGroup(label=label)
        groups[label].installments.append(inst)
    return list(groups.values())


def monthly_stats(installments: list[Installment]) -> list[MonthlyStats]:
    """Expected, received and pending totals for every month with installments."""
    stats = []
    for group in group_by_month(installments):
        first = group.installments[0].due_date
        received = _sum_values(i for i in group.installments if i.is_paid)
        pending = _sum_values(
            i for i in group.installments
            if i.status == InstallmentStatus.PENDING
        )
        stats.append(MonthlyStats(
            month=group.label,
            year=first.year,
            total_expected=group.total,
            total_received=received,
            total_pending=pending,
        ))
    return stats


def find_commission(
    commissions: list[Commission],
    commission_id: UUID,
) -> Optional[Commission]:
    """Look up an installment's commission; None when it is missing."""
    for commission in commissions:
        if commission.id == commission_id:
            return commission
    return None
