"""SQLite-backed implementation of ProductRepository.

Saves are compare-and-swap on ``version``: the UPDATE only matches the row
if nobody else saved it since it was loaded.
"""

from __future__ import annotations

import sqlite3

from shopstock.domain.exceptions import ConcurrencyConflict
from shopstock.domain.model.product import Product
from shopstock.domain.repository.product_repository import ProductRepository

_COLUMNS = "id, name, unit, physical_stock, reserved_stock, reorder_level, is_active, version"


class SqliteProductRepository(ProductRepository):

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: int) -> Product | None:
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM products WHERE id = ?", (product_id,)
        ).fetchone()
        return self._to_domain(row) if row else None

    def get_by_name(self, name: str) -> Product | None:
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM products WHERE name = ? COLLATE NOCASE", (name,)
        ).fetchone()
        return self._to_domain(row) if row else None

    def list_all(self) -> list[Product]:
        rows = self._conn.execute(
            f"SELECT {_COLUMNS} FROM products ORDER BY name COLLATE NOCASE"
        ).fetchall()
        return [self._to_domain(r) for r in rows]

    def add(self, product: Product) -> int:
        cur = self._conn.execute(
            """
            INSERT INTO products
                (name, unit, physical_stock, reserved_stock, reorder_level, is_active, version)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                product.name,
                product.unit,
                product.physical_stock,
                product.reserved_stock,
                product.reorder_level,
                int(product.is_active),
                product.version,
            ),
        )
        product.id = cur.lastrowid
        return product.id

    def save(self, product: Product) -> None:
        cur = self._conn.execute(
            """
            UPDATE products
               SET physical_stock = ?, reserved_stock = ?, reorder_level = ?,
                   is_active = ?, version = version + 1
             WHERE id = ? AND version = ?
            """,
            (
                product.physical_stock,
                product.reserved_stock,
                product.reorder_level,
                int(product.is_active),
                product.id,
                product.version,
            ),
        )
        if cur.rowcount != 1:
            raise ConcurrencyConflict(
                f"{product.name} was changed by someone else; reload and try again"
            )
        product.version += 1

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_domain(row: sqlite3.Row) -> Product:
        return Product(
            id=row["id"],
            name=row["name"],
            unit=row["unit"],
            physical_stock=row["physical_stock"],
            reserved_stock=row["reserved_stock"],
            reorder_level=row["reorder_level"],
            is_active=bool(row["is_active"]),
            version=row["version"],
        )
