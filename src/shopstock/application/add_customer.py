"""Application service: Add / Show Customer use cases."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from shopstock.domain.exceptions import CounterpartyNotFound
from shopstock.domain.model.counterparty import Counterparty
from shopstock.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CustomerDTO:
    id: int
    name: str
    phone: str | None
    balances: dict[str, str]
    advances: dict[str, str]


class AddCustomerHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, name: str, phone: str | None = None) -> int:
        customer = Counterparty.create(name, phone)
        with self._uow:
            customer_id = self._uow.counterparties.add(customer)
            self._uow.commit()

        logger.info("Added customer #%s %s", customer_id, customer.name)
        return customer_id


class ShowCustomerHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, customer_id: int) -> CustomerDTO:
        with self._uow:
            customer = self._uow.counterparties.get_by_id(customer_id)
        if customer is None:
            raise CounterpartyNotFound(customer_id)
        return CustomerDTO(
            id=customer_id,
            name=customer.name,
            phone=customer.phone,
            balances={cur: f"{amt:,.2f}" for cur, amt in sorted(customer.balances.items())},
            advances={cur: f"{amt:,.2f}" for cur, amt in sorted(customer.advances.items())},
        )
