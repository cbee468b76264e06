"""Integration tests for the Issue Invoice / Quotation use case."""

from datetime import date
from decimal import Decimal

import pytest

from shopstock.application.dto import IssueTransactionSpec, LineSpec
from shopstock.application.delete_transaction import DeleteTransactionHandler
from shopstock.application.issue_transaction import IssueTransactionHandler
from shopstock.domain.exceptions import (
    CounterpartyNotFound,
    InsufficientStock,
    ProductNotFound,
    ValidationError,
)
from shopstock.domain.model.counterparty import Counterparty
from shopstock.domain.model.product import Product
from tests.fakes import FakeUnitOfWork

DAY = date(2026, 10, 19)


def _setup() -> FakeUnitOfWork:
    return FakeUnitOfWork(
        products=[
            Product(id=1, name="Cement 50kg", physical_stock=100),
            Product(id=2, name="Iron Sheet", physical_stock=40),
        ],
        counterparties=[Counterparty(id=1, name="Acme Hardware")],
    )


def _spec(lines: list[tuple[int, int, str]], **kwargs) -> IssueTransactionSpec:
    return IssueTransactionSpec(
        counterparty_id=kwargs.pop("counterparty_id", 1),
        lines=[LineSpec(product_id=p, quantity=q, unit_price=price) for p, q, price in lines],
        issue_date=DAY,
        **kwargs,
    )


# ── Invoices ─────────────────────────────────────────────────────────────────


class TestIssueInvoice:

    def test_reserves_without_touching_physical(self):
        uow = _setup()
        dto = IssueTransactionHandler(uow).handle(_spec([(1, 30, "1000")]))

        cement = uow.products.get_by_id(1)
        assert cement.physical_stock == 100
        assert cement.reserved_stock == 30
        assert cement.available_stock == 70
        assert dto.number == "INV-20261019-0001"
        assert dto.document_type == "Invoice"
        assert dto.delivery_status == "Not Taken"
        assert dto.lines[0].remaining == 30
        assert uow.commits == 1

    def test_numbers_follow_on_the_same_day(self):
        uow = _setup()
        handler = IssueTransactionHandler(uow)
        handler.handle(_spec([(1, 1, "1000")]))
        dto = handler.handle(_spec([(1, 1, "1000")]))
        assert dto.number == "INV-20261019-0002"

    def test_deleted_number_is_not_reused(self):
        uow = _setup()
        handler = IssueTransactionHandler(uow)
        assert handler.handle(_spec([(1, 1, "1000")])).number == "INV-20261019-0001"
        second = handler.handle(_spec([(1, 1, "1000")]))
        assert second.number == "INV-20261019-0002"

        DeleteTransactionHandler(uow).handle(second.id)

        assert handler.handle(_spec([(1, 1, "1000")])).number == "INV-20261019-0003"

    def test_failed_issue_does_not_use_up_a_number(self):
        uow = _setup()
        handler = IssueTransactionHandler(uow)
        with pytest.raises(InsufficientStock):
            handler.handle(_spec([(2, 50, "25000")]))
        assert handler.handle(_spec([(1, 1, "1000")])).number == "INV-20261019-0001"

    def test_unpaid_invoice_charges_full_total(self):
        uow = _setup()
        IssueTransactionHandler(uow).handle(_spec([(1, 3, "1000")]))
        assert uow.counterparties.get_by_id(1).balance("UGX") == Decimal("3000.00")
        assert uow.ledger.entries == []

    def test_paid_invoice_records_receipt(self):
        uow = _setup()
        dto = IssueTransactionHandler(uow).handle(
            _spec([(1, 3, "1000")], payment_status="Paid", amount_paid="1000",
                  payment_method="Cash")
        )
        (entry,) = uow.ledger.entries_for_transaction(dto.id)
        assert entry.entry_type == "Receipt"
        assert entry.amount.amount == Decimal("1000")
        assert entry.reference == dto.number
        assert uow.counterparties.get_by_id(1).balance("UGX") == Decimal("2000.00")

    def test_partial_payment_status_records_nothing_up_front(self):
        uow = _setup()
        dto = IssueTransactionHandler(uow).handle(
            _spec([(1, 3, "1000")], payment_status="Partial", amount_paid="500")
        )
        assert dto.amount_paid == "UGX 0.00"
        assert uow.ledger.entries == []
        assert uow.counterparties.get_by_id(1).balance("UGX") == Decimal("3000.00")

    def test_discount_and_tax(self):
        uow = _setup()
        handler = IssueTransactionHandler(uow)
        spec = IssueTransactionSpec(
            counterparty_id=1,
            lines=[LineSpec(1, 10, "1000", discount_percent="10", tax_percent="18")],
            issue_date=DAY,
        )
        dto = handler.handle(spec)
        assert dto.subtotal == "UGX 10,000.00"
        assert dto.discount == "UGX 1,000.00"
        assert dto.tax == "UGX 1,620.00"
        assert dto.total == "UGX 10,620.00"

    def test_foreign_currency_keeps_balance_in_that_currency(self):
        uow = _setup()
        dto = IssueTransactionHandler(uow).handle(
            _spec([(1, 2, "10")], currency="usd", exchange_rate="3700")
        )
        assert dto.currency == "USD"
        assert dto.total == "USD 20.00"
        assert dto.total_base == "UGX 74,000.00"
        customer = uow.counterparties.get_by_id(1)
        assert customer.balance("USD") == Decimal("20.00")
        assert customer.balance("UGX") == Decimal("0.00")


# ── All-or-nothing ───────────────────────────────────────────────────────────


class TestIssueFailures:

    def test_more_than_available_persists_nothing(self):
        uow = _setup()
        with pytest.raises(InsufficientStock) as exc_info:
            IssueTransactionHandler(uow).handle(_spec([(2, 50, "25000")]))

        assert exc_info.value.available == 40
        sheet = uow.products.get_by_id(2)
        assert (sheet.physical_stock, sheet.reserved_stock) == (40, 0)
        assert uow.sales.get_by_id(1) is None
        assert uow.counterparties.get_by_id(1).balance("UGX") == Decimal("0.00")
        assert uow.commits == 0
        assert uow.rollbacks == 1

    def test_shortage_on_second_line_reserves_nothing(self):
        uow = _setup()
        with pytest.raises(InsufficientStock, match="Iron Sheet"):
            IssueTransactionHandler(uow).handle(_spec([(1, 10, "1000"), (2, 41, "25000")]))
        assert uow.products.get_by_id(1).reserved_stock == 0

    def test_repeated_product_quantities_are_summed(self):
        uow = _setup()
        with pytest.raises(InsufficientStock):
            IssueTransactionHandler(uow).handle(_spec([(2, 25, "1"), (2, 25, "1")]))

    def test_unknown_customer(self):
        with pytest.raises(CounterpartyNotFound):
            IssueTransactionHandler(_setup()).handle(_spec([(1, 1, "1")], counterparty_id=9))

    def test_unknown_product(self):
        with pytest.raises(ProductNotFound):
            IssueTransactionHandler(_setup()).handle(_spec([(9, 1, "1")]))

    def test_no_lines(self):
        with pytest.raises(ValidationError, match="at least one line"):
            IssueTransactionHandler(_setup()).handle(_spec([]))

    @pytest.mark.parametrize("price", ["NaN", "Infinity", "-inf", "abc"])
    def test_unusable_unit_price(self, price):
        uow = _setup()
        with pytest.raises(ValidationError, match="Invalid unit price"):
            IssueTransactionHandler(uow).handle(_spec([(1, 1, price)]))
        assert uow.products.get_by_id(1).reserved_stock == 0

    def test_unknown_payment_status(self):
        with pytest.raises(ValidationError, match="Unknown payment status"):
            IssueTransactionHandler(_setup()).handle(
                _spec([(1, 1, "1")], payment_status="Later")
            )


# ── Quotations ───────────────────────────────────────────────────────────────


class TestIssueQuotation:

    def test_quotation_reserves_nothing_and_is_taken(self):
        uow = _setup()
        dto = IssueTransactionHandler(uow).handle(_spec([(2, 500, "25000")], is_quotation=True))

        assert dto.number == "QT-20261019-0001"
        assert dto.document_type == "Quotation"
        assert dto.delivery_status == "Taken"
        assert uow.products.get_by_id(2).reserved_stock == 0

    def test_quotation_charges_the_balance(self):
        uow = _setup()
        IssueTransactionHandler(uow).handle(_spec([(1, 5, "1000")], is_quotation=True))
        assert uow.counterparties.get_by_id(1).balance("UGX") == Decimal("5000.00")
        assert uow.ledger.entries == []

    def test_paid_quotation_records_receipt(self):
        uow = _setup()
        dto = IssueTransactionHandler(uow).handle(
            _spec([(1, 5, "1000")], is_quotation=True, payment_status="Paid", amount_paid="2000")
        )
        (entry,) = uow.ledger.entries_for_transaction(dto.id)
        assert entry.entry_type == "Receipt"
        assert entry.description == f"Payment received for quotation {dto.number}"
        assert dto.amount_paid == "UGX 2,000.00"
        assert uow.counterparties.get_by_id(1).balance("UGX") == Decimal("3000.00")
