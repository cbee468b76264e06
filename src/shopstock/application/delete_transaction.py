"""Application service: Delete Invoice / Quotation use case.

Voids a transaction and undoes every side effect of issuing it: the
uncollected reservation is released, goods that already left the shop are
put back on the shelf, and the customer's balance and the cash ledger are
reversed. Delivery records are kept as history.
"""

from __future__ import annotations

import logging

from shopstock.domain.exceptions import TransactionHasReturns, TransactionNotFound
from shopstock.domain.repository.unit_of_work import UnitOfWork
from shopstock.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


class DeleteTransactionHandler:

    def __init__(self, uow: UnitOfWork, strict_reservations: bool = False) -> None:
        self._uow = uow
        self._strict = strict_reservations

    def handle(self, transaction_id: int) -> None:
        with self._uow:
            transaction = self._uow.sales.get_by_id(transaction_id)
            if transaction is None:
                raise TransactionNotFound(transaction_id)
            if self._uow.returns.exists_for_transaction(transaction_id):
                raise TransactionHasReturns(transaction_id, transaction.number)

            if not transaction.is_quotation:
                stock = StockLedger(self._uow, self._strict)
                for line in transaction.lines:
                    if line.quantity_remaining > 0:
                        stock.release_only(line.product_id, line.quantity_remaining)
                    collected = line.quantity_delivered - line.quantity_returned
                    if collected > 0:
                        stock.restock(line.product_id, collected)

            customer = self._uow.counterparties.get_by_id(transaction.counterparty_id)
            if customer is not None:
                customer.charge(transaction.currency, -transaction.outstanding_amount)
                self._uow.counterparties.save(customer)

            removed = self._uow.ledger.delete_entries_for_transaction(transaction_id)
            self._uow.sales.delete(transaction_id)
            self._uow.commit()

        logger.info(
            "Deleted %s %s (%s ledger entr%s reversed)",
            transaction.document_type.lower(), transaction.number,
            removed, "y" if removed == 1 else "ies",
        )
