"""SQLite-backed implementation of LedgerRepository."""

from __future__ import annotations

import sqlite3
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal

from shopstock.domain.model.ledger import AdjustmentReason, LedgerEntry, StockAdjustment
from shopstock.domain.model.value_objects import Money
from shopstock.domain.repository.ledger_repository import LedgerRepository


class SqliteLedgerRepository(LedgerRepository):

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    # --- Cash ledger ----------------------------------------------------------

    def add_entry(self, entry: LedgerEntry) -> LedgerEntry:
        cur = self._conn.execute(
            """
            INSERT INTO cash_transactions (
                entry_date, entry_type, currency, amount, description, reference, transaction_id
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                entry.entry_date.isoformat(),
                entry.entry_type,
                entry.amount.currency,
                str(entry.amount.amount),
                entry.description,
                entry.reference,
                entry.transaction_id,
            ),
        )
        return replace(entry, id=cur.lastrowid)

    def entries_for_transaction(self, transaction_id: int) -> list[LedgerEntry]:
        rows = self._conn.execute(
            "SELECT * FROM cash_transactions WHERE transaction_id = ? ORDER BY id",
            (transaction_id,),
        ).fetchall()
        return [
            LedgerEntry(
                id=r["id"],
                entry_date=date.fromisoformat(r["entry_date"]),
                entry_type=r["entry_type"],
                amount=Money(Decimal(r["amount"]), r["currency"]),
                description=r["description"],
                reference=r["reference"],
                transaction_id=r["transaction_id"],
            )
            for r in rows
        ]

    def delete_entries_for_transaction(self, transaction_id: int) -> int:
        cur = self._conn.execute(
            "DELETE FROM cash_transactions WHERE transaction_id = ?", (transaction_id,)
        )
        return cur.rowcount

    # --- Stock adjustments ----------------------------------------------------

    def add_adjustment(self, adjustment: StockAdjustment) -> StockAdjustment:
        cur = self._conn.execute(
            """
            INSERT INTO stock_adjustments
                (product_id, quantity, reason, notes, approved_by, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                adjustment.product_id,
                adjustment.quantity,
                adjustment.reason.value,
                adjustment.notes,
                adjustment.approved_by,
                adjustment.created_at.isoformat(),
            ),
        )
        return replace(adjustment, id=cur.lastrowid)

    def adjustments_for_product(self, product_id: int) -> list[StockAdjustment]:
        rows = self._conn.execute(
            "SELECT * FROM stock_adjustments WHERE product_id = ? ORDER BY id", (product_id,)
        ).fetchall()
        return [
            StockAdjustment(
                id=r["id"],
                product_id=r["product_id"],
                quantity=r["quantity"],
                reason=AdjustmentReason(r["reason"]),
                notes=r["notes"],
                approved_by=r["approved_by"],
                created_at=datetime.fromisoformat(r["created_at"]),
            )
            for r in rows
        ]
