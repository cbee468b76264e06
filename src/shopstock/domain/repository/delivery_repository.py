"""Abstract repository for DeliveryRecord (append-only)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopstock.domain.model.delivery import DeliveryRecord


class DeliveryRepository(ABC):

    @abstractmethod
    def add(self, record: DeliveryRecord) -> int:
        """Persist a new record and return its ID."""

    @abstractmethod
    def list_for_transaction(self, transaction_id: int) -> list[DeliveryRecord]:
        """Return every delivery made against a transaction, oldest first."""
