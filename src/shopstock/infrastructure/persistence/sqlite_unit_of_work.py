"""SQLite unit of work: one connection, one ``BEGIN IMMEDIATE`` per use case.

``BEGIN IMMEDIATE`` takes the database write lock up front, so two
processes can never interleave their read-check-write sequences on the
same rows; the second waits (up to the connection timeout) instead.
"""

from __future__ import annotations

import logging
import sqlite3

from shopstock.domain.repository.unit_of_work import UnitOfWork
from shopstock.infrastructure.persistence.sqlite_counterparty_repository import (
    SqliteCounterpartyRepository,
)
from shopstock.infrastructure.persistence.sqlite_delivery_repository import (
    SqliteDeliveryRepository,
)
from shopstock.infrastructure.persistence.sqlite_ledger_repository import SqliteLedgerRepository
from shopstock.infrastructure.persistence.sqlite_product_repository import (
    SqliteProductRepository,
)
from shopstock.infrastructure.persistence.sqlite_return_repository import SqliteReturnRepository
from shopstock.infrastructure.persistence.sqlite_sales_repository import SqliteSalesRepository
from shopstock.infrastructure.persistence.sqlite_sequence_repository import (
    SqliteSequenceRepository,
)

logger = logging.getLogger(__name__)


class SqliteUnitOfWork(UnitOfWork):

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self.products = SqliteProductRepository(conn)
        self.counterparties = SqliteCounterpartyRepository(conn)
        self.sales = SqliteSalesRepository(conn)
        self.deliveries = SqliteDeliveryRepository(conn)
        self.returns = SqliteReturnRepository(conn)
        self.ledger = SqliteLedgerRepository(conn)
        self.sequences = SqliteSequenceRepository(conn)

    def _begin(self) -> None:
        self._conn.execute("BEGIN IMMEDIATE")
        logger.debug("Transaction started")

    def _commit(self) -> None:
        self._conn.execute("COMMIT")
        logger.debug("Transaction committed")

    def rollback(self) -> None:
        if self._conn.in_transaction:
            self._conn.execute("ROLLBACK")
            logger.debug("Transaction rolled back")

    def close(self) -> None:
        self.rollback()
        self._conn.close()
        logger.debug("Connection closed")

