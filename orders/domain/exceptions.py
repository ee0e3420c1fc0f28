"""
Domain error taxonomy.
"""
from __future__ import annotations


class DomainError(Exception):
    """Base domain error."""
    code = "DOMAIN_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationError(DomainError, ValueError):
    """Bad caller input rejected at construction time."""
    code = "VALIDATION_ERROR"


class InvalidAmount(ValidationError):
    pass


class UnknownCurrency(ValidationError):
    pass


class CurrencyMismatch(ValidationError):
    code = "CURRENCY_MISMATCH"


class InvalidAddress(ValidationError):
    pass


class InvalidItem(ValidationError):
    pass


class InvalidOrder(ValidationError):
    pass


class EmptyOrderTotal(InvalidOrder):
    pass


class InvalidTransition(DomainError):
    """Mutator called from a status that does not reach the target."""
    code = "INVALID_STATE"


class OrderNotFound(DomainError):
    code = "NOT_FOUND"


class PersistenceError(Exception):
    """Persistence collaborator failure."""


class TransientPersistenceError(PersistenceError):
    """Failure that may succeed when the unit of work is repeated."""


class ConcurrentModificationError(TransientPersistenceError):
    """Order was saved by someone else since it was loaded."""
