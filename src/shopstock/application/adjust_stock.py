"""Application service: Adjust Stock use case (stock take, damage, theft)."""

from __future__ import annotations

import logging

from shopstock.domain.repository.unit_of_work import UnitOfWork
from shopstock.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


class AdjustStockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        product_id: int,
        delta: int,
        notes: str | None = None,
        approved_by: str | None = None,
    ) -> int:
        """Apply a signed correction to physical stock; returns the new physical count."""
        with self._uow:
            product = StockLedger(self._uow).adjust_manually(
                product_id, delta, notes=notes, approved_by=approved_by
            )
            self._uow.commit()

        logger.info(
            "Adjusted %s by %+d (physical now %s, reserved %s)",
            product.name, delta, product.physical_stock, product.reserved_stock,
        )
        return product.physical_stock
