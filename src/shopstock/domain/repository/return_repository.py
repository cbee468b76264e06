"""Abstract repository for ReturnRecord."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopstock.domain.model.returns import ReturnRecord


class ReturnRepository(ABC):

    @abstractmethod
    def get_by_id(self, return_id: int) -> ReturnRecord | None:
        """Return a return with its lines, or None if not found."""

    @abstractmethod
    def add(self, record: ReturnRecord) -> int:
        """Persist a new return, assign its ID and return it."""

    @abstractmethod
    def save_refund(self, record: ReturnRecord) -> None:
        """Persist the refund fields only."""

    @abstractmethod
    def exists_for_transaction(self, transaction_id: int) -> bool:
        """True if any return references the transaction."""
