"""SQLite-backed implementation of ReturnRepository."""

from __future__ import annotations

import sqlite3
from datetime import date, datetime
from decimal import Decimal

from shopstock.domain.model.returns import (
    RefundStatus,
    ReturnCondition,
    ReturnLine,
    ReturnRecord,
)
from shopstock.domain.model.value_objects import Money, Percentage
from shopstock.domain.repository.return_repository import ReturnRepository


class SqliteReturnRepository(ReturnRepository):

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    # --- ReturnRepository interface -------------------------------------------

    def get_by_id(self, return_id: int) -> ReturnRecord | None:
        row = self._conn.execute(
            "SELECT * FROM sales_returns WHERE id = ?", (return_id,)
        ).fetchone()
        return self._to_domain(row) if row else None

    def add(self, record: ReturnRecord) -> int:
        cur = self._conn.execute(
            """
            INSERT INTO sales_returns (
                number, transaction_id, customer_id, return_date, reason, notes,
                currency, exchange_rate, subtotal, tax_amount, total, total_base,
                base_currency, refund_method, refund_status, refund_date, refund_amount,
                created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.number,
                record.transaction_id,
                record.counterparty_id,
                record.return_date.isoformat(),
                record.reason,
                record.notes,
                record.currency,
                str(record.exchange_rate),
                str(record.subtotal.amount),
                str(record.tax_amount.amount),
                str(record.total.amount),
                str(record.total_base.amount),
                record.total_base.currency,
                record.refund_method,
                record.refund_status.value,
                record.refund_date.isoformat() if record.refund_date else None,
                str(record.refund_amount.amount) if record.refund_amount else None,
                record.created_at.isoformat(),
            ),
        )
        record.id = cur.lastrowid
        self._conn.executemany(
            """
            INSERT INTO sales_return_lines (
                return_id, line_id, product_id, product_name, quantity, unit_price,
                discount_percent, tax_percent, line_total, condition, restock
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    record.id,
                    line.line_id,
                    line.product_id,
                    line.product_name,
                    line.quantity,
                    str(line.unit_price.amount),
                    str(line.discount_percent.value),
                    str(line.tax_percent.value),
                    str(line.line_total.amount),
                    line.condition.value,
                    int(line.restock),
                )
                for line in record.lines
            ],
        )
        return record.id

    def save_refund(self, record: ReturnRecord) -> None:
        self._conn.execute(
            """
            UPDATE sales_returns
               SET refund_status = ?, refund_date = ?, refund_amount = ?
             WHERE id = ?
            """,
            (
                record.refund_status.value,
                record.refund_date.isoformat() if record.refund_date else None,
                str(record.refund_amount.amount) if record.refund_amount else None,
                record.id,
            ),
        )

    def exists_for_transaction(self, transaction_id: int) -> bool:
        row = self._conn.execute(
            "SELECT 1 FROM sales_returns WHERE transaction_id = ? LIMIT 1", (transaction_id,)
        ).fetchone()
        return row is not None

    # --- Serialization --------------------------------------------------------

    def _to_domain(self, row: sqlite3.Row) -> ReturnRecord:
        currency = row["currency"]
        lines = tuple(
            ReturnLine(
                line_id=r["line_id"],
                product_id=r["product_id"],
                product_name=r["product_name"],
                quantity=r["quantity"],
                unit_price=Money(Decimal(r["unit_price"]), currency),
                discount_percent=Percentage(Decimal(r["discount_percent"])),
                tax_percent=Percentage(Decimal(r["tax_percent"])),
                line_total=Money(Decimal(r["line_total"]), currency),
                condition=ReturnCondition(r["condition"]),
                restock=bool(r["restock"]),
            )
            for r in self._conn.execute(
                "SELECT * FROM sales_return_lines WHERE return_id = ? ORDER BY id", (row["id"],)
            )
        )
        return ReturnRecord(
            id=row["id"],
            number=row["number"],
            transaction_id=row["transaction_id"],
            counterparty_id=row["customer_id"],
            return_date=date.fromisoformat(row["return_date"]),
            reason=row["reason"],
            notes=row["notes"],
            currency=currency,
            exchange_rate=Decimal(row["exchange_rate"]),
            subtotal=Money(Decimal(row["subtotal"]), currency),
            tax_amount=Money(Decimal(row["tax_amount"]), currency),
            total=Money(Decimal(row["total"]), currency),
            total_base=Money(Decimal(row["total_base"]), row["base_currency"]),
            lines=lines,
            refund_method=row["refund_method"],
            refund_status=RefundStatus(row["refund_status"]),
            refund_date=date.fromisoformat(row["refund_date"]) if row["refund_date"] else None,
            refund_amount=(
                Money(Decimal(row["refund_amount"]), currency) if row["refund_amount"] else None
            ),
            created_at=datetime.fromisoformat(row["created_at"]),
        )
