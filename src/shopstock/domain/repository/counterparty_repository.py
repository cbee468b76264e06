"""Abstract repository for the Counterparty aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopstock.domain.model.counterparty import Counterparty


class CounterpartyRepository(ABC):

    @abstractmethod
    def get_by_id(self, counterparty_id: int) -> Counterparty | None:
        """Return a customer by ID, or None if not found."""

    @abstractmethod
    def add(self, counterparty: Counterparty) -> int:
        """Persist a new customer, assign its ID and return it."""

    @abstractmethod
    def save(self, counterparty: Counterparty) -> None:
        """Persist balance and advance changes."""
