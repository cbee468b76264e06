"""SQLite-backed implementation of DeliveryRepository (append-only)."""

from __future__ import annotations

import sqlite3
from datetime import date, datetime
from decimal import Decimal

from shopstock.domain.model.delivery import DeliveryLine, DeliveryMetadata, DeliveryRecord
from shopstock.domain.model.value_objects import Money
from shopstock.domain.repository.delivery_repository import DeliveryRepository


class SqliteDeliveryRepository(DeliveryRepository):

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def add(self, record: DeliveryRecord) -> int:
        meta = record.metadata
        cur = self._conn.execute(
            """
            INSERT INTO delivery_records (
                number, transaction_id, transaction_number, delivery_date, currency, delivered_by,
                received_by, vehicle_number, notes, show_prices, show_totals, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.number,
                record.transaction_id,
                record.transaction_number,
                meta.delivery_date.isoformat(),
                record.total.currency,
                meta.delivered_by,
                meta.received_by,
                meta.vehicle_number,
                meta.notes,
                int(meta.show_prices),
                int(meta.show_totals),
                record.created_at.isoformat(),
            ),
        )
        delivery_id = cur.lastrowid
        self._conn.executemany(
            """
            INSERT INTO delivery_lines (
                delivery_id, line_id, product_id, product_name, quantity, unit_price, line_total
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    delivery_id,
                    line.line_id,
                    line.product_id,
                    line.product_name,
                    line.quantity,
                    str(line.unit_price.amount),
                    str(line.line_total.amount),
                )
                for line in record.lines
            ],
        )
        return delivery_id

    def list_for_transaction(self, transaction_id: int) -> list[DeliveryRecord]:
        rows = self._conn.execute(
            "SELECT * FROM delivery_records WHERE transaction_id = ? ORDER BY id",
            (transaction_id,),
        ).fetchall()
        return [self._to_domain(r) for r in rows]

    # --- Serialization --------------------------------------------------------

    def _to_domain(self, row: sqlite3.Row) -> DeliveryRecord:
        currency = row["currency"]
        lines = tuple(
            DeliveryLine(
                line_id=r["line_id"],
                product_id=r["product_id"],
                product_name=r["product_name"],
                quantity=r["quantity"],
                unit_price=Money(Decimal(r["unit_price"]), currency),
                line_total=Money(Decimal(r["line_total"]), currency),
            )
            for r in self._conn.execute(
                "SELECT * FROM delivery_lines WHERE delivery_id = ? ORDER BY id", (row["id"],)
            )
        )
        return DeliveryRecord(
            id=row["id"],
            number=row["number"],
            transaction_id=row["transaction_id"],
            transaction_number=row["transaction_number"],
            metadata=DeliveryMetadata(
                delivery_date=date.fromisoformat(row["delivery_date"]),
                delivered_by=row["delivered_by"],
                received_by=row["received_by"],
                vehicle_number=row["vehicle_number"],
                notes=row["notes"],
                show_prices=bool(row["show_prices"]),
                show_totals=bool(row["show_totals"]),
            ),
            lines=lines,
            created_at=datetime.fromisoformat(row["created_at"]),
        )
