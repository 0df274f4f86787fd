"""Input validation package."""

from fintrack.validation.validator import (
    DATE_FORMATS,
    parse_amount,
    parse_date,
    parse_entry_type,
    require_text,
)

__all__ = [
    "DATE_FORMATS",
    "parse_amount",
    "parse_date",
    "parse_entry_type",
    "require_text",
]
