"""Abstract repository for the Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (SQLite, in-memory)
live in the infrastructure layer and in the tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopstock.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: int) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_by_name(self, name: str) -> Product | None:
        """Return a product by its exact name (case-insensitive), or None."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product, ordered by name."""

    @abstractmethod
    def add(self, product: Product) -> int:
        """Persist a new product, assign its ID and return it."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist stock changes.

        Must only succeed if the stored ``version`` still equals
        ``product.version``; raises ConcurrencyConflict otherwise and bumps
        ``product.version`` on success.
        """
