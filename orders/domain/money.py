"""
Money value object.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from orders.domain.exceptions import CurrencyMismatch, InvalidAmount, UnknownCurrency


# ISO 4217 active codes mapped to their minor units (decimal places).
ISO_4217_MINOR_UNITS: dict[str, int] = {
    "AED": 2, "AFN": 2, "ALL": 2, "AMD": 2, "ANG": 2, "AOA": 2, "ARS": 2,
    "AUD": 2, "AWG": 2, "AZN": 2, "BAM": 2, "BBD": 2, "BDT": 2, "BGN": 2,
    "BHD": 3, "BIF": 0, "BMD": 2, "BND": 2, "BOB": 2, "BOV": 2, "BRL": 2,
    "BSD": 2, "BTN": 2, "BWP": 2, "BYN": 2, "BZD": 2, "CAD": 2, "CDF": 2,
    "CHE": 2, "CHF": 2, "CHW": 2, "CLF": 4, "CLP": 0, "CNY": 2, "COP": 2,
    "COU": 2, "CRC": 2, "CUP": 2, "CVE": 2, "CZK": 2, "DJF": 0, "DKK": 2,
    "DOP": 2, "DZD": 2, "EGP": 2, "ERN": 2, "ETB": 2, "EUR": 2, "FJD": 2,
    "FKP": 2, "GBP": 2, "GEL": 2, "GHS": 2, "GIP": 2, "GMD": 2, "GNF": 0,
    "GTQ": 2, "GYD": 2, "HKD": 2, "HNL": 2, "HTG": 2, "HUF": 2, "IDR": 2,
    "ILS": 2, "INR": 2, "IQD": 3, "IRR": 2, "ISK": 0, "JMD": 2, "JOD": 3,
    "JPY": 0, "KES": 2, "KGS": 2, "KHR": 2, "KMF": 0, "KPW": 2, "KRW": 0,
    "KWD": 3, "KYD": 2, "KZT": 2, "LAK": 2, "LBP": 2, "LKR": 2, "LRD": 2,
    "LSL": 2, "LYD": 3, "MAD": 2, "MDL": 2, "MGA": 2, "MKD": 2, "MMK": 2,
    "MNT": 2, "MOP": 2, "MRU": 2, "MUR": 2, "MVR": 2, "MWK": 2, "MXN": 2,
    "MXV": 2, "MYR": 2, "MZN": 2, "NAD": 2, "NGN": 2, "NIO": 2, "NOK": 2,
    "NPR": 2, "NZD": 2, "OMR": 3, "PAB": 2, "PEN": 2, "PGK": 2, "PHP": 2,
    "PKR": 2, "PLN": 2, "PYG": 0, "QAR": 2, "RON": 2, "RSD": 2, "RUB": 2,
    "RWF": 0, "SAR": 2, "SBD": 2, "SCR": 2, "SDG": 2, "SEK": 2, "SGD": 2,
    "SHP": 2, "SLE": 2, "SOS": 2, "SRD": 2, "SSP": 2, "STN": 2, "SVC": 2,
    "SYP": 2, "SZL": 2, "THB": 2, "TJS": 2, "TMT": 2, "TND": 3, "TOP": 2,
    "TRY": 2, "TTD": 2, "TWD": 2, "TZS": 2, "UAH": 2, "UGX": 0, "USD": 2,
    "USN": 2, "UYI": 0, "UYU": 2, "UYW": 4, "UZS": 2, "VED": 2, "VES": 2,
    "VND": 0, "VUV": 0, "WST": 2, "XAF": 0, "XCD": 2, "XOF": 0, "XPF": 0,
    "YER": 2, "ZAR": 2, "ZMW": 2, "ZWG": 2,
}


def minor_units(currency_code: str) -> int:
    """Get canonical decimal places for a currency code."""
    return ISO_4217_MINOR_UNITS[_normalize_currency(currency_code)]


def _normalize_currency(currency_code) -> str:
    if not isinstance(currency_code, str):
        raise UnknownCurrency(f"Unknown currency code: {currency_code!r}")
    code = currency_code.strip().upper()
    if code not in ISO_4217_MINOR_UNITS:
        raise UnknownCurrency(f"Unknown currency code: {currency_code!r}")
    return code


def _to_decimal(amount) -> Decimal:
    if amount is None:
        raise InvalidAmount("Amount cannot be None")
    if isinstance(amount, bool):
        raise InvalidAmount(f"Amount must be numeric: {amount!r}")
    if isinstance(amount, float):
        # str() keeps the literal the caller wrote (10.005, not 10.00499...)
        amount = str(amount)
    try:
        value = Decimal(amount)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmount(f"Amount must be numeric: {amount!r}") from None
    if not value.is_finite():
        raise InvalidAmount(f"Amount must be finite: {amount!r}")
    return value


@dataclass(frozen=True)
class Money:
    """Exact-decimal amount bound to an ISO 4217 currency.

    The amount is always held at the currency's canonical precision, rounded
    half-up. Equality is by currency and numeric amount.
    """

    amount: Decimal
    currency: str

    def __post_init__(self) -> None:
        amount = _to_decimal(self.amount)
        if amount < 0:
            raise InvalidAmount(f"Amount cannot be negative: {amount}")
        currency = _normalize_currency(self.currency)
        exponent = Decimal(1).scaleb(-ISO_4217_MINOR_UNITS[currency])
        try:
            amount = amount.quantize(exponent, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            # More digits than the decimal context precision can hold
            raise InvalidAmount(f"Amount out of range: {amount}") from None
        object.__setattr__(self, "amount", amount)
        object.__setattr__(self, "currency", currency)

    @classmethod
    def of(cls, amount, currency_code: str) -> Money:
        """Create money scaled to the currency's canonical precision."""
        return cls(amount=amount, currency=currency_code)

    @classmethod
    def usd(cls, amount) -> Money:
        return cls.of(amount, "USD")

    @classmethod
    def zero(cls, currency_code: str) -> Money:
        return cls.of(0, currency_code)

    def add(self, other: Money) -> Money:
        """Sum of two amounts in the same currency."""
        self._assert_same_currency(other, "add")
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def multiply(self, quantity: int) -> Money:
        """Scale by an integer quantity (line totals)."""
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidAmount(f"Multiplier must be an integer: {quantity!r}")
        if quantity < 0:
            raise InvalidAmount(f"Multiplier cannot be negative: {quantity}")
        return Money(amount=self.amount * quantity, currency=self.currency)

    def is_greater_than(self, other: Money) -> bool:
        self._assert_same_currency(other, "compare")
        return self.amount > other.amount

    def is_zero(self) -> bool:
        return self.amount == 0

    def to_dict(self) -> dict:
        return {"amount": str(self.amount), "currency": self.currency}

    def _assert_same_currency(self, other: Money, operation: str) -> None:
        if self.currency != other.currency:
            raise CurrencyMismatch(
                f"Cannot {operation} different currencies: {self.currency} and {other.currency}"
            )

    def __str__(self) -> str:
        return f"{self.amount:f} {self.currency}"
