"""Counterparty (customer) aggregate.

Balances are kept per currency because invoices are issued in more than one
currency and never converted for the customer's account.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from shopstock.domain.exceptions import ValidationError


@dataclass
class Counterparty:
    """A customer the shop sells to.

    ``balances`` is what the customer owes, per currency.
    ``advances`` is store credit held for the customer, per currency.
    """

    id: int | None
    name: str
    phone: str | None = None
    balances: dict[str, Decimal] = field(default_factory=dict)
    advances: dict[str, Decimal] = field(default_factory=dict)

    @staticmethod
    def create(name: str, phone: str | None = None) -> Counterparty:
        if not name or not name.strip():
            raise ValidationError("Customer name is required")
        return Counterparty(id=None, name=name.strip(), phone=phone)

    def balance(self, currency: str) -> Decimal:
        return self.balances.get(currency, Decimal("0.00"))

    def advance(self, currency: str) -> Decimal:
        return self.advances.get(currency, Decimal("0.00"))

    def charge(self, currency: str, amount: Decimal) -> None:
        """Increase (or, with a negative amount, reverse) what is owed."""
        self.balances[currency] = self.balance(currency) + amount

    def credit_advance(self, currency: str, amount: Decimal) -> None:
        if amount < 0:
            raise ValidationError("Store credit cannot be negative")
        self.advances[currency] = self.advance(currency) + amount
