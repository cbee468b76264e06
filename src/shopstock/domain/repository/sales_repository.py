"""Abstract repository for the SalesTransaction aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopstock.domain.model.sales import DeliveryStatus, SalesTransaction


class SalesRepository(ABC):

    @abstractmethod
    def get_by_id(self, transaction_id: int) -> SalesTransaction | None:
        """Return a transaction with its lines, or None if not found."""

    @abstractmethod
    def add(self, transaction: SalesTransaction) -> None:
        """Persist a new transaction and assign IDs to it and its lines."""

    @abstractmethod
    def save(self, transaction: SalesTransaction) -> None:
        """Persist delivery progress (line counters and statuses)."""

    @abstractmethod
    def delete(self, transaction_id: int) -> None:
        """Remove a transaction and its lines."""

    @abstractmethod
    def list_by_delivery_status(
        self,
        statuses: tuple[DeliveryStatus, ...],
        counterparty_id: int | None = None,
    ) -> list[SalesTransaction]:
        """Return non-quotation transactions in any of *statuses*, oldest first."""
