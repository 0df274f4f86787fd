"""
Display formatting.

Brazilian conventions, matching the backend's audience: "R$ 1.234,56",
dates as dd/mm/yyyy. Rounding happens here and only here.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from fintrack.models.ledger import EntryType


CENTS = Decimal("0.01")

Number = Union[Decimal, int, float]


def _group_thousands(value: Decimal) -> str:
    # format with "," thousands and "." decimals, then swap to pt-BR
    text = f"{value:,.2f}"
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_currency(value: Number, symbol: str = "R$") -> str:
    """1234.5 -> 'R$ 1.234,50', -10 -> '-R$ 10,00'."""
    amount = Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol} {_group_thousands(abs(amount))}"


def format_signed_amount(amount: Number, type: EntryType, symbol: str = "R$") -> str:
    """'+R$ 10,00' for income, '-R$ 10,00' for expense."""
    sign = "+" if type is EntryType.INCOME else "-"
    return f"{sign}{format_currency(abs(Decimal(str(amount))), symbol)}"


def format_percentage(rate: Number) -> str:
    """Monthly rate as a percentage: 0.008 -> '0.80%'."""
    percent = (Decimal(str(rate)) * 100).quantize(CENTS, rounding=ROUND_HALF_UP)
    return f"{percent}%"


def format_progress(percent: float) -> str:
    return f"{percent:.1f}%"


def format_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")
