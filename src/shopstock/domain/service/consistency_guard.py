"""Invariant checks shared by the issuance, delivery and return services.

All checks are pure: they look at aggregates already loaded and raise a
domain error (or, for the store-wide audit, return a list of violations)
without touching persistence.
"""

from __future__ import annotations

from dataclasses import dataclass

from shopstock.domain.exceptions import (
    AlreadyFulfilled,
    InsufficientStock,
    OverDelivery,
    ValidationError,
)
from shopstock.domain.model.product import Product
from shopstock.domain.model.sales import SalesLine, SalesTransaction


@dataclass(frozen=True)
class ConsistencyViolation:
    product_id: int
    product_name: str
    expected_reserved: int
    actual_reserved: int

    def __str__(self) -> str:
        return (
            f"{self.product_name} (#{self.product_id}): reserved {self.actual_reserved}, "
            f"open sales lines account for {self.expected_reserved}"
        )


def ensure_can_reserve(product: Product, quantity: int) -> None:
    if quantity > product.available_stock:
        raise InsufficientStock(product.id, product.name, quantity, product.available_stock)


def ensure_product_invariant(product: Product) -> None:
    if product.reserved_stock < 0 or product.reserved_stock > product.physical_stock:
        raise ValidationError(
            f"Stock invariant broken for {product.name}: "
            f"physical={product.physical_stock}, reserved={product.reserved_stock}"
        )


def ensure_open_for_delivery(transaction: SalesTransaction) -> None:
    if not transaction.is_open_for_delivery:
        raise AlreadyFulfilled(transaction.id, transaction.number)


def ensure_within_remaining(line: SalesLine, quantity: int) -> None:
    if quantity <= 0:
        raise ValidationError("Delivery quantity must be positive")
    if quantity > line.quantity_remaining:
        raise OverDelivery(line.id, line.product_name, quantity, line.quantity_remaining)


def ensure_returnable(line: SalesLine, quantity: int) -> None:
    if quantity <= 0:
        raise ValidationError("Return quantity must be positive")
    if quantity > line.quantity_returnable:
        raise ValidationError(
            f"Cannot return {quantity} of {line.product_name} (line #{line.id}). "
            f"Only {line.quantity_returnable} can still be returned."
        )


def verify_reservations(
    products: list[Product],
    transactions: list[SalesTransaction],
) -> list[ConsistencyViolation]:
    """Compare every product's reserved stock with what open sales lines hold.

    *transactions* must include every non-quotation transaction that still
    has uncollected units.
    """
    expected: dict[int, int] = {}
    for transaction in transactions:
        for product_id, qty in transaction.reserved_by_product().items():
            expected[product_id] = expected.get(product_id, 0) + qty

    violations: list[ConsistencyViolation] = []
    for product in products:
        want = expected.get(product.id, 0)
        if product.reserved_stock != want:
            violations.append(
                ConsistencyViolation(product.id, product.name, want, product.reserved_stock)
            )
    return violations
