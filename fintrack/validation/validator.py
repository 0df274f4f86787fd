"""
Form Input Validation

Turns raw form text into typed values before anything is dispatched to
the backend.

IMPORTANT: Validation NEVER silently fixes input. Anything that cannot
be read unambiguously is rejected with a message the user can act on.
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Union

from fintrack.models.ledger import EntryType
from fintrack.services.gateway.interface import ValidationError


# Formats accepted for typed-in dates, ISO first
DATE_FORMATS = ["%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y"]

_CURRENCY_NOISE = re.compile(r"[\sR$€£]")


def parse_amount(
    value: Union[str, int, float, Decimal, None],
    field: str = "amount",
    allow_zero: bool = True,
) -> Decimal:
    """
    Parse a money amount.

    Accepts "1234.56", "1234,56", "1.234,56", "1,234.56" and an optional
    currency symbol. The rightmost separator is the decimal separator.

    Raises:
        ValidationError: If the text is empty, unparsable or negative
    """
    if value is None:
        raise ValidationError(f"Please enter the {field}")

    if isinstance(value, bool):
        raise ValidationError(f"The {field} must be a number")

    if isinstance(value, (int, float, Decimal)):
        text = str(value)
    else:
        text = _CURRENCY_NOISE.sub("", value)
        if not text:
            raise ValidationError(f"Please enter the {field}")
        last_comma, last_dot = text.rfind(","), text.rfind(".")
        if last_comma > last_dot:
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValidationError(f"'{value}' is not a valid {field}")

    if not amount.is_finite():
        raise ValidationError(f"'{value}' is not a valid {field}")
    if amount < 0:
        raise ValidationError(f"The {field} cannot be negative")
    if not allow_zero and amount == 0:
        raise ValidationError(f"The {field} must be greater than zero")
    return amount


def parse_date(value: Union[str, date, datetime, None], field: str = "date") -> date:
    """
    Parse a calendar date.

    Raises:
        ValidationError: If no known format matches
    """
    if value is None:
        raise ValidationError(f"Please enter the {field}")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = value.strip()
    if not text:
        raise ValidationError(f"Please enter the {field}")
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValidationError(f"'{value}' is not a valid {field} (use YYYY-MM-DD or DD/MM/YYYY)")


def parse_entry_type(value: Union[str, EntryType, None]) -> EntryType:
    """
    Parse income/expense, in English or the backend's Portuguese.

    Raises:
        ValidationError: If the value is neither
    """
    try:
        return EntryType.parse(value)
    except ValueError as e:
        raise ValidationError(str(e))


def require_text(value: Union[str, None], field: str, max_length: int = 255) -> str:
    """
    Strip and check a required free-text field.

    Raises:
        ValidationError: If the text is blank or too long
    """
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"Please enter the {field}")
    if len(text) > max_length:
        raise ValidationError(f"The {field} must be at most {max_length} characters")
    return text
