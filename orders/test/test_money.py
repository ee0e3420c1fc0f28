"""
Unit tests for the Money value object.
"""
from decimal import Decimal

from django.test import SimpleTestCase

from orders.domain.exceptions import (
    CurrencyMismatch,
    InvalidAmount,
    UnknownCurrency,
    ValidationError,
)
from orders.domain.money import Money, minor_units


class MoneyCreationTest(SimpleTestCase):
    """Tests for Money construction and scaling."""

    def test_amount_scaled_to_currency_precision(self):
        """Test that USD amounts are held with two decimal places."""
        money = Money.of("10", "USD")
        self.assertEqual(money.amount, Decimal("10.00"))
        self.assertEqual(str(money.amount), "10.00")

    def test_rounds_half_up(self):
        """Test that excess precision is rounded half-up."""
        self.assertEqual(Money.of("10.005", "USD").amount, Decimal("10.01"))
        self.assertEqual(Money.of("10.004", "USD").amount, Decimal("10.00"))

    def test_float_input_uses_literal_value(self):
        """Test that floats are converted through their string form."""
        self.assertEqual(Money.of(10.005, "USD").amount, Decimal("10.01"))

    def test_zero_decimal_currency(self):
        """Test that JPY amounts have no minor units."""
        money = Money.of("100.5", "JPY")
        self.assertEqual(money.amount, Decimal("101"))
        self.assertEqual(minor_units("JPY"), 0)

    def test_three_decimal_currency(self):
        """Test that BHD amounts keep three decimal places."""
        self.assertEqual(str(Money.of("1.2345", "BHD").amount), "1.235")

    def test_currency_code_normalized(self):
        """Test that currency codes are case-insensitive."""
        self.assertEqual(Money.of("1", " usd ").currency, "USD")

    def test_negative_amount_fails(self):
        """Test that negative amounts are rejected."""
        with self.assertRaises(InvalidAmount):
            Money.of("-0.01", "USD")

    def test_missing_amount_fails(self):
        """Test that a missing amount is rejected."""
        with self.assertRaises(InvalidAmount):
            Money.of(None, "USD")

    def test_non_numeric_amount_fails(self):
        """Test that non-numeric and non-finite amounts are rejected."""
        for amount in ("abc", "NaN", "Infinity", True):
            with self.assertRaises(InvalidAmount):
                Money.of(amount, "USD")

    def test_amount_beyond_precision_fails(self):
        """Test that amounts too large for exact decimals are rejected."""
        with self.assertRaises(InvalidAmount) as context:
            Money.of("1e30", "USD")
        self.assertIn("out of range", str(context.exception))

    def test_unknown_currency_fails(self):
        """Test that unknown currency codes are rejected."""
        with self.assertRaises(UnknownCurrency):
            Money.of("1", "XXX1")
        with self.assertRaises(UnknownCurrency):
            Money.of("1", None)

    def test_validation_errors_are_value_errors(self):
        """Test that validation failures are ValueErrors too."""
        with self.assertRaises(ValueError):
            Money.of("-1", "USD")
        self.assertTrue(issubclass(UnknownCurrency, ValidationError))

    def test_usd_and_zero_factories(self):
        """Test convenience factories."""
        self.assertEqual(Money.usd("2.5"), Money.of("2.50", "USD"))
        self.assertTrue(Money.zero("EUR").is_zero())


class MoneyArithmeticTest(SimpleTestCase):
    """Tests for Money arithmetic and comparison."""

    def test_add_same_currency(self):
        """Test adding two amounts in the same currency."""
        total = Money.of("10.50", "USD").add(Money.of("0.75", "USD"))
        self.assertEqual(total, Money.of("11.25", "USD"))

    def test_add_different_currency_fails(self):
        """Test that adding across currencies fails."""
        with self.assertRaises(CurrencyMismatch) as context:
            Money.of("1", "USD").add(Money.of("1", "EUR"))
        self.assertIn("USD", str(context.exception))
        self.assertIn("EUR", str(context.exception))

    def test_multiply_by_quantity(self):
        """Test multiplying by an integer quantity."""
        self.assertEqual(Money.of("19.99", "USD").multiply(3), Money.of("59.97", "USD"))
        self.assertTrue(Money.of("19.99", "USD").multiply(0).is_zero())

    def test_multiply_rejects_negative_and_non_integer(self):
        """Test that negative and non-integer multipliers are rejected."""
        money = Money.of("1", "USD")
        for quantity in (-1, 1.5, True):
            with self.assertRaises(InvalidAmount):
                money.multiply(quantity)

    def test_multiply_beyond_precision_fails(self):
        """Test that a product too large for exact decimals is an invalid amount."""
        with self.assertRaises(InvalidAmount):
            Money.of("1e25", "USD").multiply(10000)

    def test_is_greater_than(self):
        """Test comparison of amounts."""
        self.assertTrue(Money.of("2", "USD").is_greater_than(Money.of("1.99", "USD")))
        self.assertFalse(Money.of("1", "USD").is_greater_than(Money.of("1", "USD")))

    def test_is_greater_than_different_currency_fails(self):
        """Test that comparing across currencies fails."""
        with self.assertRaises(CurrencyMismatch):
            Money.of("2", "USD").is_greater_than(Money.of("1", "GBP"))

    def test_equality_by_value(self):
        """Test that equal amount and currency are equal values."""
        self.assertEqual(Money.of("10", "USD"), Money.of("10.00", "usd"))
        self.assertNotEqual(Money.of("10", "USD"), Money.of("10", "EUR"))
        self.assertEqual(hash(Money.of("10", "USD")), hash(Money.of("10.00", "USD")))

    def test_string_form(self):
        """Test human-readable form."""
        self.assertEqual(str(Money.of("10", "USD")), "10.00 USD")
        self.assertEqual(Money.of("10", "USD").to_dict(), {"amount": "10.00", "currency": "USD"})
