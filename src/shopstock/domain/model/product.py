"""Product aggregate: owns physical and reserved stock for one product.

Physical stock is every unit the shop owns. Reserved stock is the part of
it that has been sold but not yet collected by the customer. Nothing outside
the stock ledger should assign either field directly; use the methods here.
"""

from __future__ import annotations

from dataclasses import dataclass

from shopstock.domain.exceptions import (
    InsufficientReservation,
    InsufficientStock,
    ValidationError,
)


@dataclass
class Product:
    """Aggregate root for stock tracking.

    Invariants:
    - ``0 <= reserved_stock <= physical_stock``
    - ``available_stock`` is always >= 0

    ``version`` is bumped by the repository on every save and used for a
    compare-and-swap update, so two writers can never both reserve against
    the same available units.
    """

    id: int | None
    name: str
    physical_stock: int = 0
    reserved_stock: int = 0
    reorder_level: int = 0
    unit: str = "PCS"
    is_active: bool = True
    version: int = 0

    # --- Read-only projections -------------------------------------------------

    @property
    def available_stock(self) -> int:
        return self.physical_stock - self.reserved_stock

    @property
    def is_out_of_stock(self) -> bool:
        return self.available_stock <= 0

    @property
    def is_low_stock(self) -> bool:
        return self.available_stock <= self.reorder_level

    # --- Stock primitives -----------------------------------------------------

    def reserve(self, quantity: int) -> None:
        """Promise *quantity* units to a sale without removing them."""
        _require_positive(quantity, "Reservation")
        if quantity > self.available_stock:
            raise InsufficientStock(self.id, self.name, quantity, self.available_stock)
        self.reserved_stock += quantity

    def release_and_consume(self, quantity: int) -> None:
        """Hand reserved units over to the customer.

        Both ``reserved_stock`` and ``physical_stock`` drop by the same
        amount. Releasing more than is reserved is an error, never a clamp.
        """
        _require_positive(quantity, "Delivery")
        if quantity > self.reserved_stock:
            raise InsufficientReservation(self.id, self.name, quantity, self.reserved_stock)
        self.reserved_stock -= quantity
        self.physical_stock -= quantity

    def release(self, quantity: int, strict: bool = False) -> int:
        """Drop a reservation without touching physical stock.

        Returns the number of units that could not be released because the
        reservation was already smaller than *quantity* (0 when consistent).
        With ``strict`` set, any shortfall raises instead of clamping.
        """
        _require_positive(quantity, "Release")
        shortfall = max(0, quantity - self.reserved_stock)
        if shortfall and strict:
            raise InsufficientReservation(self.id, self.name, quantity, self.reserved_stock)
        self.reserved_stock -= quantity - shortfall
        return shortfall

    def restock(self, quantity: int) -> None:
        """Return units to the shelf (e.g. a customer return in good condition)."""
        _require_positive(quantity, "Restock")
        self.physical_stock += quantity

    def adjust(self, delta: int) -> None:
        """Manual correction of physical stock (stock take, damage, theft)."""
        if isinstance(delta, bool) or not isinstance(delta, int) or delta == 0:
            raise ValidationError("Adjustment must be a non-zero whole number")
        new_physical = self.physical_stock + delta
        if new_physical < self.reserved_stock:
            raise ValidationError(
                f"Cannot adjust {self.name} by {delta}: physical stock would drop to "
                f"{new_physical}, below the {self.reserved_stock} units reserved"
            )
        self.physical_stock = new_physical


def _require_positive(quantity: int, what: str) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError(f"{what} quantity must be an integer")
    if quantity <= 0:
        raise ValidationError(f"{what} quantity must be positive")
