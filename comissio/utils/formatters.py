"""
Display formatting for amounts and dates.

All user-facing text is pt-BR: amounts are shown as Brazilian reais
("R$ 1.234,56") and months by their Portuguese names ("Março 2024").
"""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

DateLike = Union[date, datetime, str]

MONTH_NAMES = (
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
)

CURRENCY_SYMBOL = "R$"

_CENT = Decimal("0.01")


def to_date(value: DateLike) -> date:
    """
    Coerce a date, datetime or ISO string to a calendar date.

    ISO timestamps ("2024-01-15T00:00:00.000Z") keep only their date part.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if "T" in text:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    return date.fromisoformat(text)


def format_currency(value: Union[Decimal, float, int]) -> str:
    """Format an amount as BRL, e.g. 1234.5 -> 'R$ 1.234,50'."""
    amount = Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    # Swap the US separators for the Brazilian ones
    body = f"{abs(amount):,.2f}".translate(str.maketrans(",.", ".,"))
    return f"{sign}{CURRENCY_SYMBOL} {body}"


def format_date(value: DateLike) -> str:
    """Format a date as dd/mm/yyyy."""
    return to_date(value).strftime("%d/%m/%Y")


def month_key(value: DateLike) -> tuple[int, int]:
    """(year, month) bucket key for a date."""
    d = to_date(value)
    return d.year, d.month


def month_year_label(value: DateLike) -> str:
    """'Month Year' label, e.g. 'Janeiro 2024'."""
    d = to_date(value)
    return f"{MONTH_NAMES[d.month - 1]} {d.year}"
