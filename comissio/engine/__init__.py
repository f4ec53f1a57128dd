"""Installment derivation and aggregation engine."""

from comissio.engine.aggregation import (
    WINDOW_MONTHS_AFTER,
    WINDOW_MONTHS_BEFORE,
    cash_flow_series,
    compute_summary,
    find_commission,
    group_by_month,
    monthly_stats,
)
from comissio.engine.derivation import add_months, derive_installments
from comissio.engine.status import toggle_status

__all__ = [
    "WINDOW_MONTHS_AFTER",
    "WINDOW_MONTHS_BEFORE",
    "add_months",
    "cash_flow_series",
    "compute_summary",
    "derive_installments",
    "find_commission",
    "group_by_month",
    "monthly_stats",
    "toggle_status",
]
