"""Abstract repository for cash ledger entries and stock adjustment audit rows."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopstock.domain.model.ledger import LedgerEntry, StockAdjustment


class LedgerRepository(ABC):

    @abstractmethod
    def add_entry(self, entry: LedgerEntry) -> LedgerEntry:
        """Append a cash ledger entry; returns it with its ID assigned."""

    @abstractmethod
    def entries_for_transaction(self, transaction_id: int) -> list[LedgerEntry]:
        """Return the ledger entries tied to a sales transaction."""

    @abstractmethod
    def delete_entries_for_transaction(self, transaction_id: int) -> int:
        """Remove the ledger entries tied to a sales transaction; returns the count."""

    @abstractmethod
    def add_adjustment(self, adjustment: StockAdjustment) -> StockAdjustment:
        """Append a stock adjustment audit row; returns it with its ID assigned."""

    @abstractmethod
    def adjustments_for_product(self, product_id: int) -> list[StockAdjustment]:
        """Return the audit rows of a product, oldest first."""
