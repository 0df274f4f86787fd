"""Tests for display formatting."""

import pytest
from datetime import date
from decimal import Decimal

from fintrack.aggregation.formatting import (
    format_currency,
    format_date,
    format_percentage,
    format_progress,
    format_signed_amount,
)
from fintrack.models.ledger import EntryType


class TestCurrency:
    """Tests for pt-BR currency formatting."""

    @pytest.mark.parametrize("value,expected", [
        (Decimal("0"), "R$ 0,00"),
        (Decimal("1234.56"), "R$ 1.234,56"),
        (1234.5, "R$ 1.234,50"),
        (1000000, "R$ 1.000.000,00"),
        (Decimal("-10"), "-R$ 10,00"),
        (Decimal("0.005"), "R$ 0,01"),
    ])
    def test_format_currency(self, value, expected):
        assert format_currency(value) == expected

    def test_custom_symbol(self):
        assert format_currency(Decimal("5"), symbol="US$") == "US$ 5,00"

    def test_signed_amount(self):
        """Test the sign follows the entry type, not the number."""
        assert format_signed_amount(Decimal("10"), EntryType.INCOME) == "+R$ 10,00"
        assert format_signed_amount(Decimal("10"), EntryType.EXPENSE) == "-R$ 10,00"


class TestOtherFormats:
    """Tests for percentages, progress and dates."""

    def test_percentage(self):
        assert format_percentage(Decimal("0.008")) == "0.80%"
        assert format_percentage(Decimal("0.0125")) == "1.25%"

    def test_progress(self):
        assert format_progress(25.0) == "25.0%"
        assert format_progress(100.0) == "100.0%"

    def test_date(self):
        assert format_date(date(2024, 3, 5)) == "05/03/2024"
