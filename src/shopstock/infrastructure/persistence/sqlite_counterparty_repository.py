"""SQLite-backed implementation of CounterpartyRepository."""

from __future__ import annotations

import sqlite3
from decimal import Decimal

from shopstock.domain.model.counterparty import Counterparty
from shopstock.domain.repository.counterparty_repository import CounterpartyRepository


class SqliteCounterpartyRepository(CounterpartyRepository):

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get_by_id(self, counterparty_id: int) -> Counterparty | None:
        row = self._conn.execute(
            "SELECT id, name, phone FROM customers WHERE id = ?", (counterparty_id,)
        ).fetchone()
        if row is None:
            return None
        customer = Counterparty(id=row["id"], name=row["name"], phone=row["phone"])
        for b in self._conn.execute(
            "SELECT currency, balance, advance FROM customer_balances WHERE customer_id = ?",
            (counterparty_id,),
        ):
            customer.balances[b["currency"]] = Decimal(b["balance"])
            customer.advances[b["currency"]] = Decimal(b["advance"])
        return customer

    def add(self, counterparty: Counterparty) -> int:
        cur = self._conn.execute(
            "INSERT INTO customers (name, phone) VALUES (?, ?)",
            (counterparty.name, counterparty.phone),
        )
        counterparty.id = cur.lastrowid
        self.save(counterparty)
        return counterparty.id

    def save(self, counterparty: Counterparty) -> None:
        for currency in sorted(set(counterparty.balances) | set(counterparty.advances)):
            self._conn.execute(
                """
                INSERT INTO customer_balances (customer_id, currency, balance, advance)
                VALUES (?, ?, ?, ?)
                ON CONFLICT (customer_id, currency)
                DO UPDATE SET balance = excluded.balance, advance = excluded.advance
                """,
                (
                    counterparty.id,
                    currency,
                    str(counterparty.balance(currency)),
                    str(counterparty.advance(currency)),
                ),
            )
