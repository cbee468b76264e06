"""Domain service: Stock Ledger.

The only code path allowed to change a product's physical or reserved
stock. Every primitive loads the product through the unit of work, applies
the change on the aggregate (which enforces the per-product invariants) and
saves it back with a version check, so a primitive is atomic against the
store and never races another writer.

Multi-line reservations use a two-phase approach (validate everything,
then mutate) so a shortage on one product never leaves another product
half-reserved, even before the unit of work rolls back.
"""

from __future__ import annotations

import logging

from shopstock.domain.exceptions import ProductNotFound
from shopstock.domain.model.ledger import AdjustmentReason, StockAdjustment
from shopstock.domain.model.product import Product
from shopstock.domain.repository.unit_of_work import UnitOfWork
from shopstock.domain.service import consistency_guard

logger = logging.getLogger(__name__)


class StockLedger:

    def __init__(self, uow: UnitOfWork, strict_reservations: bool = False) -> None:
        self._uow = uow
        self._strict = strict_reservations

    # --- Queries --------------------------------------------------------------

    def get(self, product_id: int) -> Product:
        product = self._uow.products.get_by_id(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        return product

    # --- Primitives -----------------------------------------------------------

    def reserve(self, product_id: int, quantity: int) -> None:
        self.reserve_many([(product_id, quantity)])

    def reserve_many(self, requests: list[tuple[int, int]]) -> None:
        """Reserve ``[(product_id, quantity), ...]`` all-or-nothing.

        Repeated products are summed before checking availability.
        """
        # Phase 1: load and validate
        wanted: dict[int, int] = {}
        for product_id, qty in requests:
            wanted[product_id] = wanted.get(product_id, 0) + qty

        products: list[tuple[Product, int]] = []
        for product_id, qty in wanted.items():
            product = self.get(product_id)
            consistency_guard.ensure_can_reserve(product, qty)
            products.append((product, qty))

        # Phase 2: mutate and persist
        for product, qty in products:
            product.reserve(qty)
            self._save(product)

    def release_and_consume(self, product_id: int, quantity: int) -> None:
        product = self.get(product_id)
        product.release_and_consume(quantity)
        self._save(product)

    def release_only(self, product_id: int, quantity: int) -> None:
        product = self.get(product_id)
        shortfall = product.release(quantity, strict=self._strict)
        if shortfall:
            logger.warning(
                "Reservation inconsistency on product #%s (%s): asked to release %s "
                "but only %s were reserved; clamped at zero",
                product.id, product.name, quantity, quantity - shortfall,
            )
        self._save(product)

    def restock(self, product_id: int, quantity: int) -> None:
        product = self.get(product_id)
        product.restock(quantity)
        self._save(product)

    def adjust_manually(
        self,
        product_id: int,
        delta: int,
        reason: AdjustmentReason = AdjustmentReason.MANUAL,
        notes: str | None = None,
        approved_by: str | None = None,
    ) -> Product:
        """Correct physical stock outside the sales flow and audit it."""
        product = self.get(product_id)
        product.adjust(delta)
        self._save(product)
        self._uow.ledger.add_adjustment(
            StockAdjustment(
                id=None,
                product_id=product.id,
                quantity=delta,
                reason=reason,
                notes=notes,
                approved_by=approved_by,
            )
        )
        return product

    # --- Internal helpers -----------------------------------------------------

    def _save(self, product: Product) -> None:
        consistency_guard.ensure_product_invariant(product)
        self._uow.products.save(product)
