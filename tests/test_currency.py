"""Tests for currency formatting and conversion."""

from decimal import Decimal

import pytest

from tripsplit.currency import (
    convert_currency,
    format_currency,
    get_currency_name,
    get_currency_symbol,
)


class TestFormatCurrency:
    """Tests for format_currency."""

    @pytest.mark.parametrize(
        "amount,currency,expected",
        [
            (Decimal("1234.50"), "USD", "$1,234.5"),
            (Decimal("12"), "USD", "$12"),
            (Decimal("1234.567"), "USD", "$1,234.57"),
            (Decimal("0.05"), "GBP", "£0.05"),
            (Decimal("1234.5"), "JPY", "¥1,235"),
            (Decimal("1234567.5"), "INR", "₹12,34,567.5"),
            (Decimal("999"), "INR", "₹999"),
            (Decimal("2500"), "CAD", "C$2,500"),
        ],
    )
    def test_formats(self, amount, currency, expected):
        assert format_currency(amount, currency) == expected

    def test_negative_sign_before_symbol(self):
        assert format_currency(Decimal("-5"), "USD") == "-$5"

    def test_zero(self):
        assert format_currency(Decimal("0"), "EUR") == "€0"

    def test_rounds_to_zero_without_sign(self):
        """A sub-cent negative amount renders as plain zero."""
        assert format_currency(Decimal("-0.001"), "USD") == "$0"

    def test_nan(self):
        assert format_currency(float("nan"), "USD") == "$0"

    def test_accepts_floats_and_ints(self):
        assert format_currency(19.99, "USD") == "$19.99"
        assert format_currency(7, "AUD") == "A$7"

    def test_lowercase_code(self):
        assert format_currency(Decimal("3"), "eur") == "€3"

    def test_unknown_currency(self):
        with pytest.raises(ValueError, match="Unsupported currency"):
            format_currency(Decimal("1"), "XYZ")


class TestConvertCurrency:
    """Tests for convert_currency."""

    def test_usd_to_eur(self):
        assert convert_currency(Decimal("100"), "USD", "EUR") == Decimal("85.00")

    def test_cross_rate_through_usd(self):
        """GBP to INR goes through USD."""
        assert convert_currency(Decimal("73"), "GBP", "INR") == Decimal("8300.00")

    def test_same_currency_is_identity(self):
        assert convert_currency(Decimal("12.345"), "USD", "usd") == Decimal("12.345")

    def test_rounds_to_cents(self):
        assert convert_currency(Decimal("10"), "EUR", "USD") == Decimal("11.76")

    def test_unknown_currency(self):
        with pytest.raises(ValueError):
            convert_currency(Decimal("1"), "USD", "BTC")


def test_symbol_and_name_lookup():
    assert get_currency_symbol("jpy") == "¥"
    assert get_currency_name("INR") == "Indian Rupee"
