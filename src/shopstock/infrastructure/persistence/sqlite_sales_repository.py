"""SQLite-backed implementation of SalesRepository."""

from __future__ import annotations

import sqlite3
from datetime import date, datetime
from decimal import Decimal

from shopstock.domain.model.sales import (
    DeliveryStatus,
    PaymentStatus,
    SalesLine,
    SalesTransaction,
)
from shopstock.domain.model.value_objects import Money, Percentage
from shopstock.domain.repository.sales_repository import SalesRepository


class SqliteSalesRepository(SalesRepository):

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    # --- SalesRepository interface --------------------------------------------

    def get_by_id(self, transaction_id: int) -> SalesTransaction | None:
        row = self._conn.execute(
            "SELECT * FROM sales_transactions WHERE id = ?", (transaction_id,)
        ).fetchone()
        return self._load(row) if row else None

    def add(self, transaction: SalesTransaction) -> None:
        cur = self._conn.execute(
            """
            INSERT INTO sales_transactions (
                number, customer_id, is_quotation, issue_date, currency, exchange_rate,
                subtotal, discount_amount, tax_amount, total, total_base, base_currency,
                payment_status, amount_paid, payment_method, delivery_status,
                expected_collection_date, collection_notes, quotation_id, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                transaction.number,
                transaction.counterparty_id,
                int(transaction.is_quotation),
                transaction.issue_date.isoformat(),
                transaction.currency,
                str(transaction.exchange_rate),
                str(transaction.subtotal.amount),
                str(transaction.discount_amount.amount),
                str(transaction.tax_amount.amount),
                str(transaction.total.amount),
                str(transaction.total_base.amount),
                transaction.total_base.currency,
                transaction.payment_status.value,
                str(transaction.amount_paid.amount if transaction.amount_paid else Decimal("0.00")),
                transaction.payment_method,
                transaction.delivery_status.value,
                _iso(transaction.expected_collection_date),
                transaction.collection_notes,
                transaction.quotation_id,
                transaction.created_at.isoformat(),
            ),
        )
        transaction.id = cur.lastrowid

        for line in transaction.lines:
            cur = self._conn.execute(
                """
                INSERT INTO sales_lines (
                    transaction_id, product_id, product_name, quantity, unit_price,
                    discount_percent, tax_percent, line_total, quantity_delivered,
                    quantity_returned, quantity_cancelled, delivery_status
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    transaction.id,
                    line.product_id,
                    line.product_name,
                    line.quantity,
                    str(line.unit_price.amount),
                    str(line.discount_percent.value),
                    str(line.tax_percent.value),
                    str(line.line_total.amount),
                    line.quantity_delivered,
                    line.quantity_returned,
                    line.quantity_cancelled,
                    line.delivery_status.value,
                ),
            )
            line.id = cur.lastrowid

    def save(self, transaction: SalesTransaction) -> None:
        self._conn.execute(
            "UPDATE sales_transactions SET delivery_status = ? WHERE id = ?",
            (transaction.delivery_status.value, transaction.id),
        )
        for line in transaction.lines:
            self._conn.execute(
                """
                UPDATE sales_lines
                   SET quantity_delivered = ?, quantity_returned = ?,
                       quantity_cancelled = ?, delivery_status = ?
                 WHERE id = ? AND transaction_id = ?
                """,
                (
                    line.quantity_delivered,
                    line.quantity_returned,
                    line.quantity_cancelled,
                    line.delivery_status.value,
                    line.id,
                    transaction.id,
                ),
            )

    def delete(self, transaction_id: int) -> None:
        self._conn.execute("DELETE FROM sales_lines WHERE transaction_id = ?", (transaction_id,))
        self._conn.execute("DELETE FROM sales_transactions WHERE id = ?", (transaction_id,))

    def list_by_delivery_status(
        self,
        statuses: tuple[DeliveryStatus, ...],
        counterparty_id: int | None = None,
    ) -> list[SalesTransaction]:
        if not statuses:
            return []
        where = [
            "is_quotation = 0",
            f"delivery_status IN ({', '.join('?' for _ in statuses)})",
        ]
        params: list = [s.value for s in statuses]
        if counterparty_id is not None:
            where.append("customer_id = ?")
            params.append(counterparty_id)

        rows = self._conn.execute(
            f"SELECT * FROM sales_transactions WHERE {' AND '.join(where)} "
            "ORDER BY issue_date ASC, id ASC",
            params,
        ).fetchall()
        return [self._load(r) for r in rows]

    # --- Serialization --------------------------------------------------------

    def _load(self, row: sqlite3.Row) -> SalesTransaction:
        currency = row["currency"]
        lines = [
            self._line_to_domain(r, currency)
            for r in self._conn.execute(
                "SELECT * FROM sales_lines WHERE transaction_id = ? ORDER BY id", (row["id"],)
            )
        ]
        return SalesTransaction(
            id=row["id"],
            number=row["number"],
            counterparty_id=row["customer_id"],
            issue_date=date.fromisoformat(row["issue_date"]),
            currency=currency,
            exchange_rate=Decimal(row["exchange_rate"]),
            lines=lines,
            subtotal=Money(Decimal(row["subtotal"]), currency),
            discount_amount=Money(Decimal(row["discount_amount"]), currency),
            tax_amount=Money(Decimal(row["tax_amount"]), currency),
            total=Money(Decimal(row["total"]), currency),
            total_base=Money(Decimal(row["total_base"]), row["base_currency"]),
            is_quotation=bool(row["is_quotation"]),
            payment_status=PaymentStatus(row["payment_status"]),
            amount_paid=Money(Decimal(row["amount_paid"]), currency),
            payment_method=row["payment_method"],
            delivery_status=DeliveryStatus(row["delivery_status"]),
            expected_collection_date=_date(row["expected_collection_date"]),
            collection_notes=row["collection_notes"],
            quotation_id=row["quotation_id"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    @staticmethod
    def _line_to_domain(row: sqlite3.Row, currency: str) -> SalesLine:
        return SalesLine(
            id=row["id"],
            product_id=row["product_id"],
            product_name=row["product_name"],
            quantity=row["quantity"],
            unit_price=Money(Decimal(row["unit_price"]), currency),
            discount_percent=Percentage(Decimal(row["discount_percent"])),
            tax_percent=Percentage(Decimal(row["tax_percent"])),
            line_total=Money(Decimal(row["line_total"]), currency),
            quantity_delivered=row["quantity_delivered"],
            quantity_returned=row["quantity_returned"],
            quantity_cancelled=row["quantity_cancelled"],
        )


def _iso(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


def _date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None
