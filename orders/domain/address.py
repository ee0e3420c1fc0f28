"""
Shipping address value object.
"""
from __future__ import annotations

from dataclasses import dataclass

from orders.domain.exceptions import InvalidAddress


def _required(value, label: str) -> str:
    if value is None or not isinstance(value, str) or not value.strip():
        raise InvalidAddress(f"{label} cannot be blank")
    return value.strip()


@dataclass(frozen=True)
class Address:
    """Validated, immutable postal address."""

    street: str
    city: str
    state: str
    postal_code: str
    country: str

    @classmethod
    def of(cls, street, city, state, postal_code, country) -> Address:
        """Create address; state and country are normalized to uppercase."""
        street = _required(street, "Street address")
        city = _required(city, "City")
        state = _required(state, "State")
        postal_code = _required(postal_code, "Postal code")
        country = _required(country, "Country")
        if len(country) != 2:
            raise InvalidAddress(
                f"Country code must be 2 characters (ISO 3166-1 alpha-2): {country}"
            )
        return cls(
            street=street,
            city=city,
            state=state.upper(),
            postal_code=postal_code,
            country=country.upper(),
        )

    @classmethod
    def us(cls, street, city, state, zip_code) -> Address:
        return cls.of(street, city, state, zip_code, "US")

    def is_us(self) -> bool:
        return self.country == "US"

    def formatted(self) -> str:
        """Multi-line form for shipping labels."""
        return f"{self.street}\n{self.city}, {self.state} {self.postal_code}\n{self.country}"

    def to_dict(self) -> dict:
        return {
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "postal_code": self.postal_code,
            "country": self.country,
        }

    def __str__(self) -> str:
        return f"{self.street}, {self.city}, {self.state} {self.postal_code}, {self.country}"
