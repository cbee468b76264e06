"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Each specific error keeps the identifiers and quantities it was raised with
as attributes, so callers can render their own message if they need to.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


# --- Stock --------------------------------------------------------------------


class InsufficientStock(ValidationError):
    """More units were requested than are available for reservation."""

    def __init__(self, product_id: int, product_name: str, requested: int, available: int) -> None:
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {product_name}. "
            f"Available: {available}, Requested: {requested}"
        )


class InsufficientReservation(ValidationError):
    """A release asked for more units than are currently reserved.

    This never happens when reservations and lines agree, so it signals a
    data-consistency bug rather than bad user input.
    """

    def __init__(self, product_id: int, product_name: str, requested: int, reserved: int) -> None:
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.reserved = reserved
        super().__init__(
            f"Insufficient reserved stock for {product_name}. "
            f"Reserved: {reserved}, Trying to release: {requested}"
        )


class ConcurrencyConflict(ValidationError):
    """A row changed underneath us between load and save."""


# --- Sales / delivery -----------------------------------------------------------


class OverDelivery(ValidationError):
    def __init__(self, line_id: int, product_name: str, requested: int, remaining: int) -> None:
        self.line_id = line_id
        self.product_name = product_name
        self.requested = requested
        self.remaining = remaining
        super().__init__(
            f"Cannot deliver {requested} of {product_name} (line #{line_id}). "
            f"Only {remaining} remaining."
        )


class AlreadyFulfilled(ValidationError):
    def __init__(self, transaction_id: int, number: str) -> None:
        self.transaction_id = transaction_id
        self.number = number
        super().__init__(f"{number} has already been fully taken")


class TransactionHasReturns(ValidationError):
    def __init__(self, transaction_id: int, number: str) -> None:
        self.transaction_id = transaction_id
        self.number = number
        super().__init__(f"{number} has returns recorded against it and cannot be deleted")


# --- Lookups --------------------------------------------------------------------


class CounterpartyNotFound(EntityNotFoundError):
    def __init__(self, counterparty_id: int) -> None:
        self.counterparty_id = counterparty_id
        super().__init__(f"Customer #{counterparty_id} not found")


class ProductNotFound(EntityNotFoundError):
    def __init__(self, product_id: int) -> None:
        self.product_id = product_id
        super().__init__(f"Product #{product_id} not found")


class TransactionNotFound(EntityNotFoundError):
    def __init__(self, transaction_id: int) -> None:
        self.transaction_id = transaction_id
        super().__init__(f"Sales transaction #{transaction_id} not found")


class LineNotFound(EntityNotFoundError):
    def __init__(self, transaction_id: int, line_id: int) -> None:
        self.transaction_id = transaction_id
        self.line_id = line_id
        super().__init__(f"Line #{line_id} not found on sales transaction #{transaction_id}")


class ReturnNotFound(EntityNotFoundError):
    def __init__(self, return_id: int) -> None:
        self.return_id = return_id
        super().__init__(f"Sales return #{return_id} not found")
