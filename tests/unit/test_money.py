"""
Unit tests for Money, Currency and decimal conversion.

Verifies:
- Float inputs are converted through str
- Rounding to the currency minor unit is ROUND_HALF_UP
- Arithmetic and comparison refuse mixed currencies
"""

import pytest
from decimal import Decimal

from sponsor_kernel.domain.values import Currency, Money, to_decimal


class TestToDecimal:
    """Tests for to_decimal."""

    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_string_is_stripped(self):
        assert to_decimal(" 100.50 ") == Decimal("100.50")

    def test_decimal_passes_through(self):
        value = Decimal("42.00")
        assert to_decimal(value) is value

    @pytest.mark.parametrize("bad", ["abc", "", "NaN", "Infinity", True])
    def test_rejects_non_numbers(self, bad):
        with pytest.raises(ValueError):
            to_decimal(bad)


class TestCurrency:
    """Tests for the Currency value object."""

    def test_normalizes_to_uppercase(self):
        assert Currency("usd").code == "USD"

    def test_unknown_code_rejected(self):
        with pytest.raises(ValueError, match="Invalid ISO 4217"):
            Currency("XXX")

    def test_decimal_places(self):
        assert Currency("USD").decimal_places == 2
        assert Currency("JPY").decimal_places == 0
        assert Currency("KWD").decimal_places == 3


class TestMoney:
    """Tests for Money construction and arithmetic."""

    def test_of_accepts_float(self):
        money = Money.of(19.99, "USD")
        assert money.amount == Decimal("19.99")
        assert money.currency == Currency("USD")

    def test_zero(self):
        assert Money.zero("EUR").is_zero

    def test_round_half_up(self):
        assert Money.of("10.555", "USD").round().amount == Decimal("10.56")
        assert Money.of("10.554", "USD").round().amount == Decimal("10.55")

    def test_round_zero_decimal_currency(self):
        assert Money.of("1234.5", "JPY").round().amount == Decimal("1235")

    def test_round_three_decimal_currency(self):
        assert Money.of("1.2345", "KWD").round().amount == Decimal("1.235")

    def test_round_beyond_precision_raises_value_error(self):
        with pytest.raises(ValueError, match="Cannot round"):
            Money.of("1e27", "USD").round()

    def test_add_and_subtract(self):
        a = Money.of("100.00", "USD")
        b = Money.of("15.00", "USD")
        assert (a + b).amount == Decimal("115.00")
        assert (a - b).amount == Decimal("85.00")

    def test_multiply_by_decimal(self):
        assert (Money.of("200", "USD") * Decimal("0.15")).amount == Decimal("30.00")
        assert (Decimal("2") * Money.of("5", "USD")).amount == Decimal("10")

    def test_multiply_by_float_not_supported(self):
        with pytest.raises(TypeError):
            Money.of("1", "USD") * 0.5

    def test_mixed_currency_add_rejected(self):
        with pytest.raises(ValueError, match="different currencies"):
            Money.of("1", "USD") + Money.of("1", "EUR")

    def test_mixed_currency_compare_rejected(self):
        with pytest.raises(ValueError):
            Money.of("1", "USD") < Money.of("1", "EUR")

    def test_sign_properties(self):
        assert Money.of("1", "USD").is_positive
        assert (-Money.of("1", "USD")).is_negative

    def test_str(self):
        assert str(Money.of("50000", "USD")) == "50000 USD"
