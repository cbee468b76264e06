"""Abstract unit of work.

Every state-changing use case runs inside exactly one unit of work, handed
to its handler explicitly. Repositories reached through the same unit of
work share one store transaction, so either all of their writes land or
none do::

    with uow:
        ...
        uow.commit()

Leaving the block without ``commit()`` (including by an exception) rolls
everything back.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from shopstock.domain.repository.counterparty_repository import CounterpartyRepository
from shopstock.domain.repository.delivery_repository import DeliveryRepository
from shopstock.domain.repository.ledger_repository import LedgerRepository
from shopstock.domain.repository.product_repository import ProductRepository
from shopstock.domain.repository.return_repository import ReturnRepository
from shopstock.domain.repository.sales_repository import SalesRepository
from shopstock.domain.repository.sequence_repository import SequenceRepository

logger = logging.getLogger(__name__)


class UnitOfWork(ABC):

    products: ProductRepository
    counterparties: CounterpartyRepository
    sales: SalesRepository
    deliveries: DeliveryRepository
    returns: ReturnRepository
    ledger: LedgerRepository
    sequences: SequenceRepository

    def __enter__(self) -> UnitOfWork:
        self._committed = False
        self._begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._committed:
            self.rollback()
            if exc_type is not None:
                logger.warning("Rolled back after %s: %s", exc_type.__name__, exc)

    def commit(self) -> None:
        self._commit()
        self._committed = True

    @abstractmethod
    def _begin(self) -> None:
        """Open the store transaction."""

    @abstractmethod
    def _commit(self) -> None:
        """Make every write since ``_begin`` durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard every write since ``_begin``."""
