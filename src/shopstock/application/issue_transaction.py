"""Application service: Issue Invoice / Quotation use case.

Orchestrates counterparty lookup, pricing, numbering, the stock ledger
(reservation) and the cash ledger inside one unit of work. Nothing is
written unless every line can be reserved.
"""

from __future__ import annotations

import logging
from datetime import date

from shopstock.application.dto import IssueTransactionSpec, TransactionDTO, transaction_to_dto
from shopstock.domain.exceptions import CounterpartyNotFound, ValidationError
from shopstock.domain.model.counterparty import Counterparty
from shopstock.domain.model.ledger import LedgerEntry
from shopstock.domain.model.sales import (
    INVOICE_PREFIX,
    QUOTATION_PREFIX,
    PaymentStatus,
    SalesLine,
    SalesTransaction,
)
from shopstock.domain.model.value_objects import Money, Percentage, Quantity, to_decimal
from shopstock.domain.repository.unit_of_work import UnitOfWork
from shopstock.domain.service.numbering import next_document_number
from shopstock.domain.service.pricing import price_line, total_document
from shopstock.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)

RECEIPT = "Receipt"


class IssueTransactionHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        base_currency: str = "UGX",
        strict_reservations: bool = False,
    ) -> None:
        self._uow = uow
        self._base_currency = base_currency
        self._strict = strict_reservations

    def handle(self, spec: IssueTransactionSpec) -> TransactionDTO:
        with self._uow:
            transaction, customer = issue_transaction(
                self._uow, spec, self._base_currency, self._strict
            )
            self._uow.commit()

        logger.info(
            "Issued %s %s for customer #%s: %s line(s), total %s",
            transaction.document_type.lower(), transaction.number,
            customer.id, len(transaction.lines), transaction.total,
        )
        return transaction_to_dto(transaction, customer)


def issue_transaction(
    uow: UnitOfWork,
    spec: IssueTransactionSpec,
    base_currency: str,
    strict_reservations: bool = False,
    quotation_id: int | None = None,
) -> tuple[SalesTransaction, Counterparty]:
    """Issue a transaction inside the caller's (already open) unit of work.

    Steps:
    1. Resolve the customer and every product (fail if any is missing).
    2. Price each line with a *snapshot* of the given price and rates.
    3. Reserve stock for every line at once (invoices only).
    4. Persist, then record payment and charge the customer's balance.
       Quotations are charged too; deleting one reverses the charge.
    """
    customer = uow.counterparties.get_by_id(spec.counterparty_id)
    if customer is None:
        raise CounterpartyNotFound(spec.counterparty_id)
    if not spec.lines:
        raise ValidationError("A sales transaction must contain at least one line")

    currency = (spec.currency or base_currency).upper()
    exchange_rate = to_decimal(spec.exchange_rate, "exchange rate")
    issue_date = spec.issue_date or date.today()
    stock = StockLedger(uow, strict_reservations)

    lines: list[SalesLine] = []
    amounts = []
    for line_spec in spec.lines:
        product = stock.get(line_spec.product_id)
        quantity = Quantity(line_spec.quantity).value
        unit_price = Money(to_decimal(line_spec.unit_price, "unit price"), currency)
        discount = Percentage.parse(line_spec.discount_percent)
        tax = Percentage.parse(line_spec.tax_percent)
        line_amounts = price_line(quantity, unit_price, discount, tax)
        amounts.append(line_amounts)
        lines.append(
            SalesLine(
                id=None,
                product_id=line_spec.product_id,
                product_name=product.name,  # <-- name snapshot
                quantity=quantity,
                unit_price=unit_price,
                discount_percent=discount,
                tax_percent=tax,
                line_total=line_amounts.total,
            )
        )

    totals = total_document(amounts, currency, exchange_rate, base_currency)
    payment_status = _parse_payment_status(spec.payment_status)
    amount_paid = _amount_paid(spec, payment_status, currency)

    prefix = QUOTATION_PREFIX if spec.is_quotation else INVOICE_PREFIX
    number = next_document_number(uow.sequences, prefix, issue_date)

    transaction = SalesTransaction.create(
        number=number,
        counterparty_id=spec.counterparty_id,
        issue_date=issue_date,
        currency=currency,
        exchange_rate=exchange_rate,
        lines=lines,
        totals=totals,
        is_quotation=spec.is_quotation,
        payment_status=payment_status,
        amount_paid=amount_paid,
        payment_method=spec.payment_method,
        expected_collection_date=spec.expected_collection_date,
        collection_notes=spec.collection_notes,
        quotation_id=quotation_id,
    )

    # Reserve before anything is written so a shortage leaves no trace
    if not transaction.is_quotation:
        stock.reserve_many([(line.product_id, line.quantity) for line in transaction.lines])

    uow.sales.add(transaction)

    if amount_paid.amount > 0:
        uow.ledger.add_entry(
            LedgerEntry(
                id=None,
                entry_date=issue_date,
                entry_type=RECEIPT,
                amount=amount_paid,
                description=f"Payment received for {transaction.document_type.lower()} {number}",
                reference=number,
                transaction_id=transaction.id,
            )
        )
    customer.charge(currency, transaction.outstanding_amount)
    uow.counterparties.save(customer)
    return transaction, customer


def _parse_payment_status(raw: str) -> PaymentStatus:
    for status in PaymentStatus:
        if status.value.lower() == raw.strip().lower():
            return status
    raise ValidationError(
        f"Unknown payment status '{raw}'. "
        f"Expected one of: {', '.join(s.value for s in PaymentStatus)}"
    )


def _amount_paid(
    spec: IssueTransactionSpec,
    status: PaymentStatus,
    currency: str,
) -> Money:
    """Only a fully paid transaction records money received up front."""
    if status is not PaymentStatus.PAID or spec.amount_paid is None:
        return Money.zero(currency)
    return Money(to_decimal(spec.amount_paid, "amount paid"), currency)
