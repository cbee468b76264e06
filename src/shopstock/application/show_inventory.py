"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from shopstock.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class InventoryLineDTO:
    product_id: int
    product_name: str
    unit: str
    physical: int
    reserved: int
    available: int
    low_stock: bool
    out_of_stock: bool


class ShowInventoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, low_stock_only: bool = False) -> list[InventoryLineDTO]:
        with self._uow:
            products = self._uow.products.list_all()
        return [
            InventoryLineDTO(
                product_id=p.id,  # type: ignore[arg-type]
                product_name=p.name,
                unit=p.unit,
                physical=p.physical_stock,
                reserved=p.reserved_stock,
                available=p.available_stock,
                low_stock=p.is_low_stock,
                out_of_stock=p.is_out_of_stock,
            )
            for p in products
            if p.is_active and (p.is_low_stock or not low_stock_only)
        ]
