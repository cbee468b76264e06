"""Integration tests for the pending collections report."""

from datetime import date

from shopstock.application.dto import DeliveryItemSpec, IssueTransactionSpec, LineSpec
from shopstock.application.issue_transaction import IssueTransactionHandler
from shopstock.application.mark_as_taken import MarkAsTakenHandler
from shopstock.application.pending_collections import PendingCollectionsHandler
from shopstock.domain.model.counterparty import Counterparty
from shopstock.domain.model.delivery import DeliveryMetadata
from shopstock.domain.model.product import Product
from tests.fakes import FakeUnitOfWork

TODAY = date(2026, 10, 19)


def _setup() -> FakeUnitOfWork:
    return FakeUnitOfWork(
        products=[Product(id=1, name="Cement 50kg", physical_stock=500)],
        counterparties=[
            Counterparty(id=1, name="Acme Hardware"),
            Counterparty(id=2, name="Bwana Builders"),
        ],
    )


def _issue(uow, customer_id, quantity, issued, collect_by=None, **kwargs):
    return IssueTransactionHandler(uow).handle(
        IssueTransactionSpec(
            counterparty_id=customer_id,
            lines=[LineSpec(1, quantity, "1000")],
            issue_date=issued,
            expected_collection_date=collect_by,
            **kwargs,
        )
    )


class TestPendingCollections:

    def test_oldest_first_with_remaining_value(self):
        uow = _setup()
        newer = _issue(uow, 1, 10, date(2026, 10, 15))
        older = _issue(uow, 2, 20, date(2026, 10, 1))
        MarkAsTakenHandler(uow).handle(
            older.id,
            [DeliveryItemSpec(older.lines[0].line_id, 5)],
            DeliveryMetadata(delivery_date=date(2026, 10, 2)),
        )

        report = PendingCollectionsHandler(uow).handle(today=TODAY)

        assert [item.number for item in report.items] == [older.number, newer.number]
        first = report.items[0]
        assert first.days_pending == 18
        assert first.delivery_status == "Partially Taken"
        assert first.lines[0].remaining == 15
        assert first.value_pending == "UGX 15,000.00"
        assert report.total_value == "UGX 25,000.00"
        assert report.oldest_pending_days == 18
        assert report.total_lines == 2

    def test_taken_invoices_and_quotations_are_left_out(self):
        uow = _setup()
        taken = _issue(uow, 1, 10, date(2026, 10, 15))
        MarkAsTakenHandler(uow).handle(taken.id, metadata=DeliveryMetadata(delivery_date=TODAY))
        _issue(uow, 1, 10, date(2026, 10, 15), is_quotation=True)

        report = PendingCollectionsHandler(uow).handle(today=TODAY)

        assert report.items == []
        assert report.total_value == "UGX 0.00"
        assert report.oldest_pending_days == 0

    def test_filter_by_customer(self):
        uow = _setup()
        _issue(uow, 1, 10, date(2026, 10, 15))
        _issue(uow, 2, 10, date(2026, 10, 15))

        report = PendingCollectionsHandler(uow).handle(counterparty_id=2, today=TODAY)

        assert [item.customer_name for item in report.items] == ["Bwana Builders"]

    def test_overdue_only(self):
        uow = _setup()
        late = _issue(uow, 1, 10, date(2026, 10, 1), collect_by=date(2026, 10, 10))
        _issue(uow, 1, 10, date(2026, 10, 1), collect_by=date(2026, 10, 30))
        _issue(uow, 1, 10, date(2026, 10, 1))

        report = PendingCollectionsHandler(uow).handle(overdue_only=True, today=TODAY)

        assert [item.number for item in report.items] == [late.number]
        assert report.overdue_count == 1

    def test_foreign_invoice_value_in_base_currency(self):
        uow = _setup()
        _issue(uow, 1, 2, date(2026, 10, 15), currency="USD", exchange_rate="3700")

        report = PendingCollectionsHandler(uow).handle(today=TODAY)

        assert report.items[0].value_pending == "UGX 7,400,000.00"
