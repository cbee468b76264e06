"""Integration tests for deleting invoices and quotations."""

from datetime import date
from decimal import Decimal

import pytest

from shopstock.application.create_return import CreateReturnHandler
from shopstock.application.delete_transaction import DeleteTransactionHandler
from shopstock.application.dto import (
    DeliveryItemSpec,
    IssueTransactionSpec,
    LineSpec,
    ReturnLineSpec,
    ReturnSpec,
)
from shopstock.application.issue_transaction import IssueTransactionHandler
from shopstock.application.mark_as_taken import MarkAsTakenHandler
from shopstock.domain.exceptions import TransactionHasReturns, TransactionNotFound
from shopstock.domain.model.counterparty import Counterparty
from shopstock.domain.model.delivery import DeliveryMetadata
from shopstock.domain.model.product import Product
from tests.fakes import FakeUnitOfWork

DAY = date(2026, 10, 19)


def _setup(**kwargs) -> tuple[FakeUnitOfWork, int, int]:
    uow = FakeUnitOfWork(
        products=[Product(id=1, name="Cement 50kg", physical_stock=100)],
        counterparties=[Counterparty(id=1, name="Acme Hardware")],
    )
    dto = IssueTransactionHandler(uow).handle(
        IssueTransactionSpec(
            counterparty_id=1, lines=[LineSpec(1, 30, "1000")], issue_date=DAY, **kwargs
        )
    )
    return uow, dto.id, dto.lines[0].line_id


def _stock(uow) -> tuple[int, int]:
    product = uow.products.get_by_id(1)
    return product.physical_stock, product.reserved_stock


class TestDeleteTransaction:

    def test_uncollected_invoice_releases_reservation(self):
        uow, tx_id, _ = _setup()
        DeleteTransactionHandler(uow).handle(tx_id)

        assert _stock(uow) == (100, 0)
        assert uow.sales.get_by_id(tx_id) is None
        assert uow.counterparties.get_by_id(1).balance("UGX") == Decimal("0.00")

    def test_collected_units_are_restocked(self):
        uow, tx_id, line_id = _setup()
        MarkAsTakenHandler(uow).handle(
            tx_id, [DeliveryItemSpec(line_id, 10)], DeliveryMetadata(delivery_date=DAY)
        )
        assert _stock(uow) == (90, 20)

        DeleteTransactionHandler(uow).handle(tx_id)

        assert _stock(uow) == (100, 0)
        # delivery notes stay as history
        assert len(uow.deliveries.list_for_transaction(tx_id)) == 1

    def test_receipt_and_balance_are_reversed(self):
        uow, tx_id, _ = _setup(payment_status="Paid", amount_paid="30000")
        assert len(uow.ledger.entries) == 1

        DeleteTransactionHandler(uow).handle(tx_id)

        assert uow.ledger.entries == []
        assert uow.counterparties.get_by_id(1).balance("UGX") == Decimal("0.00")

    def test_quotation_touches_no_stock(self):
        uow, tx_id, _ = _setup(is_quotation=True)
        DeleteTransactionHandler(uow).handle(tx_id)
        assert _stock(uow) == (100, 0)
        assert uow.sales.get_by_id(tx_id) is None

    def test_quotation_charge_and_receipt_are_reversed(self):
        uow, tx_id, _ = _setup(is_quotation=True, payment_status="Paid", amount_paid="10000")
        assert uow.counterparties.get_by_id(1).balance("UGX") == Decimal("20000.00")
        assert len(uow.ledger.entries) == 1

        DeleteTransactionHandler(uow).handle(tx_id)

        assert uow.ledger.entries == []
        assert uow.counterparties.get_by_id(1).balance("UGX") == Decimal("0.00")

    def test_invoice_with_returns_is_kept(self):
        uow, tx_id, line_id = _setup()
        CreateReturnHandler(uow).handle(
            ReturnSpec(
                transaction_id=tx_id,
                counterparty_id=1,
                lines=[ReturnLineSpec(line_id, 2)],
                return_date=DAY,
            )
        )
        with pytest.raises(TransactionHasReturns):
            DeleteTransactionHandler(uow).handle(tx_id)
        assert uow.sales.get_by_id(tx_id) is not None

    def test_unknown_transaction(self):
        uow, _, _ = _setup()
        with pytest.raises(TransactionNotFound):
            DeleteTransactionHandler(uow).handle(99)
