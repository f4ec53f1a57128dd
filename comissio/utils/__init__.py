"""Formatting helpers package."""

from comissio.utils.formatters import (
    MONTH_NAMES,
    format_currency,
    format_date,
    month_key,
    month_year_label,
    to_date,
)

__all__ = [
    "MONTH_NAMES",
    "format_currency",
    "format_date",
    "month_key",
    "month_year_label",
    "to_date",
]
