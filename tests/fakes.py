"""In-memory fake repositories for testing.

These implement the same abstract interfaces as the SQLite repositories
but keep everything in dicts. No file I/O, no side effects. Reads hand out
copies, like a real store would, so an aggregate changed in memory only
"lands" when it is saved. FakeUnitOfWork snapshots every store on begin
and restores the snapshot on rollback.
"""

from __future__ import annotations

import copy
from dataclasses import replace

from shopstock.domain.exceptions import ConcurrencyConflict
from shopstock.domain.model.counterparty import Counterparty
from shopstock.domain.model.delivery import DeliveryRecord
from shopstock.domain.model.ledger import LedgerEntry, StockAdjustment
from shopstock.domain.model.product import Product
from shopstock.domain.model.returns import ReturnRecord
from shopstock.domain.model.sales import DeliveryStatus, SalesTransaction
from shopstock.domain.repository.counterparty_repository import CounterpartyRepository
from shopstock.domain.repository.delivery_repository import DeliveryRepository
from shopstock.domain.repository.ledger_repository import LedgerRepository
from shopstock.domain.repository.product_repository import ProductRepository
from shopstock.domain.repository.return_repository import ReturnRepository
from shopstock.domain.repository.sales_repository import SalesRepository
from shopstock.domain.repository.sequence_repository import SequenceRepository
from shopstock.domain.repository.unit_of_work import UnitOfWork


class FakeProductRepository(ProductRepository):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._store: dict[int, Product] = {}
        self._next_id = 1
        for p in products or []:
            if p.id is None:
                p.id = self._next_id
            self._store[p.id] = copy.deepcopy(p)
            self._next_id = max(self._next_id, p.id + 1)

    def get_by_id(self, product_id: int) -> Product | None:
        return copy.deepcopy(self._store.get(product_id))

    def get_by_name(self, name: str) -> Product | None:
        for p in self._store.values():
            if p.name.lower() == name.lower():
                return copy.deepcopy(p)
        return None

    def list_all(self) -> list[Product]:
        return [copy.deepcopy(p) for p in sorted(self._store.values(), key=lambda p: p.name.lower())]

    def add(self, product: Product) -> int:
        product.id = self._next_id
        self._next_id += 1
        self._store[product.id] = copy.deepcopy(product)
        return product.id

    def save(self, product: Product) -> None:
        stored = self._store.get(product.id)
        if stored is None or stored.version != product.version:
            raise ConcurrencyConflict(f"{product.name} was changed by someone else")
        product.version += 1
        self._store[product.id] = copy.deepcopy(product)


class FakeCounterpartyRepository(CounterpartyRepository):

    def __init__(self, counterparties: list[Counterparty] | None = None) -> None:
        self._store: dict[int, Counterparty] = {}
        self._next_id = 1
        for c in counterparties or []:
            self.add(c)

    def get_by_id(self, counterparty_id: int) -> Counterparty | None:
        return copy.deepcopy(self._store.get(counterparty_id))

    def add(self, counterparty: Counterparty) -> int:
        if counterparty.id is None:
            counterparty.id = self._next_id
        self._next_id = max(self._next_id, counterparty.id) + 1
        self._store[counterparty.id] = copy.deepcopy(counterparty)
        return counterparty.id

    def save(self, counterparty: Counterparty) -> None:
        self._store[counterparty.id] = copy.deepcopy(counterparty)


class FakeSalesRepository(SalesRepository):

    def __init__(self) -> None:
        self._store: dict[int, SalesTransaction] = {}
        self._next_id = 1
        self._next_line_id = 1

    def get_by_id(self, transaction_id: int) -> SalesTransaction | None:
        return copy.deepcopy(self._store.get(transaction_id))

    def add(self, transaction: SalesTransaction) -> None:
        transaction.id = self._next_id
        self._next_id += 1
        for line in transaction.lines:
            line.id = self._next_line_id
            self._next_line_id += 1
        self._store[transaction.id] = copy.deepcopy(transaction)

    def save(self, transaction: SalesTransaction) -> None:
        self._store[transaction.id] = copy.deepcopy(transaction)

    def delete(self, transaction_id: int) -> None:
        self._store.pop(transaction_id, None)

    def list_by_delivery_status(
        self,
        statuses: tuple[DeliveryStatus, ...],
        counterparty_id: int | None = None,
    ) -> list[SalesTransaction]:
        found = [
            t for t in self._store.values()
            if not t.is_quotation
            and t.delivery_status in statuses
            and (counterparty_id is None or t.counterparty_id == counterparty_id)
        ]
        found.sort(key=lambda t: (t.issue_date, t.id))
        return [copy.deepcopy(t) for t in found]


class FakeDeliveryRepository(DeliveryRepository):

    def __init__(self) -> None:
        self._store: dict[int, DeliveryRecord] = {}
        self._next_id = 1

    def add(self, record: DeliveryRecord) -> int:
        delivery_id = self._next_id
        self._next_id += 1
        self._store[delivery_id] = replace(record, id=delivery_id)
        return delivery_id

    def list_for_transaction(self, transaction_id: int) -> list[DeliveryRecord]:
        return [r for r in self._store.values() if r.transaction_id == transaction_id]


class FakeReturnRepository(ReturnRepository):

    def __init__(self) -> None:
        self._store: dict[int, ReturnRecord] = {}
        self._next_id = 1

    def get_by_id(self, return_id: int) -> ReturnRecord | None:
        return copy.deepcopy(self._store.get(return_id))

    def add(self, record: ReturnRecord) -> int:
        record.id = self._next_id
        self._next_id += 1
        self._store[record.id] = copy.deepcopy(record)
        return record.id

    def save_refund(self, record: ReturnRecord) -> None:
        stored = self._store[record.id]
        stored.refund_status = record.refund_status
        stored.refund_date = record.refund_date
        stored.refund_amount = record.refund_amount

    def exists_for_transaction(self, transaction_id: int) -> bool:
        return any(r.transaction_id == transaction_id for r in self._store.values())


class FakeSequenceRepository(SequenceRepository):

    def __init__(self) -> None:
        self.last_values: dict[str, int] = {}

    def advance(self, key: str) -> int:
        self.last_values[key] = self.last_values.get(key, 0) + 1
        return self.last_values[key]


class FakeLedgerRepository(LedgerRepository):

    def __init__(self) -> None:
        self.entries: list[LedgerEntry] = []
        self.adjustments: list[StockAdjustment] = []

    def add_entry(self, entry: LedgerEntry) -> LedgerEntry:
        stored = replace(entry, id=len(self.entries) + 1)
        self.entries.append(stored)
        return stored

    def entries_for_transaction(self, transaction_id: int) -> list[LedgerEntry]:
        return [e for e in self.entries if e.transaction_id == transaction_id]

    def delete_entries_for_transaction(self, transaction_id: int) -> int:
        before = len(self.entries)
        self.entries = [e for e in self.entries if e.transaction_id != transaction_id]
        return before - len(self.entries)

    def add_adjustment(self, adjustment: StockAdjustment) -> StockAdjustment:
        stored = replace(adjustment, id=len(self.adjustments) + 1)
        self.adjustments.append(stored)
        return stored

    def adjustments_for_product(self, product_id: int) -> list[StockAdjustment]:
        return [a for a in self.adjustments if a.product_id == product_id]


class FakeUnitOfWork(UnitOfWork):

    def __init__(
        self,
        products: list[Product] | None = None,
        counterparties: list[Counterparty] | None = None,
    ) -> None:
        self.products = FakeProductRepository(products)
        self.counterparties = FakeCounterpartyRepository(counterparties)
        self.sales = FakeSalesRepository()
        self.deliveries = FakeDeliveryRepository()
        self.returns = FakeReturnRepository()
        self.ledger = FakeLedgerRepository()
        self.sequences = FakeSequenceRepository()
        self.commits = 0
        self.rollbacks = 0
        self._snapshot: dict | None = None

    def _repositories(self) -> dict:
        return {
            "products": self.products,
            "counterparties": self.counterparties,
            "sales": self.sales,
            "deliveries": self.deliveries,
            "returns": self.returns,
            "ledger": self.ledger,
            "sequences": self.sequences,
        }

    def _begin(self) -> None:
        self._snapshot = copy.deepcopy(self._repositories())

    def _commit(self) -> None:
        self.commits += 1
        self._snapshot = None

    def rollback(self) -> None:
        if self._snapshot is not None:
            for name, repo in self._snapshot.items():
                setattr(self, name, repo)
            self._snapshot = None
        self.rollbacks += 1
