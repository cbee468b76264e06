"""Application service: Add Product use case.

Opening stock goes through the stock ledger like any other change so it
shows up in the product's adjustment history.
"""

from __future__ import annotations

import logging

from shopstock.domain.exceptions import ValidationError
from shopstock.domain.model.ledger import AdjustmentReason
from shopstock.domain.model.product import Product
from shopstock.domain.repository.unit_of_work import UnitOfWork
from shopstock.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


class AddProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        name: str,
        opening_stock: int = 0,
        reorder_level: int = 0,
        unit: str = "PCS",
    ) -> int:
        name = name.strip()
        if not name:
            raise ValidationError("Product name is required")
        if opening_stock < 0 or reorder_level < 0:
            raise ValidationError("Opening stock and reorder level cannot be negative")

        with self._uow:
            if self._uow.products.get_by_name(name) is not None:
                raise ValidationError(f"Product '{name}' already exists")

            product = Product(id=None, name=name, reorder_level=reorder_level, unit=unit)
            product_id = self._uow.products.add(product)
            if opening_stock:
                StockLedger(self._uow).adjust_manually(
                    product_id,
                    opening_stock,
                    reason=AdjustmentReason.OPENING_STOCK,
                    notes="Initial stock on product creation",
                )
            self._uow.commit()

        logger.info("Added product #%s %s with %s %s", product_id, name, opening_stock, unit)
        return product_id
