"""Application service: Show Invoice / Quotation use case (query)."""

from __future__ import annotations

from shopstock.application.dto import TransactionDTO, transaction_to_dto
from shopstock.domain.exceptions import TransactionNotFound
from shopstock.domain.repository.unit_of_work import UnitOfWork


class ShowTransactionHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, transaction_id: int) -> TransactionDTO:
        with self._uow:
            transaction = self._uow.sales.get_by_id(transaction_id)
            if transaction is None:
                raise TransactionNotFound(transaction_id)
            customer = self._uow.counterparties.get_by_id(transaction.counterparty_id)
        return transaction_to_dto(transaction, customer)
