"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world. Amounts leave the
application layer already formatted.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from shopstock.domain.model.counterparty import Counterparty
from shopstock.domain.model.sales import SalesTransaction
from shopstock.domain.model.value_objects import Money

# --- Input --------------------------------------------------------------------


@dataclass(frozen=True)
class LineSpec:
    """Input: one product on a new invoice or quotation."""

    product_id: int
    quantity: int
    unit_price: str | Decimal
    discount_percent: str | Decimal | None = None
    tax_percent: str | Decimal | None = None


@dataclass(frozen=True)
class IssueTransactionSpec:
    """Input: everything needed to issue an invoice or a quotation."""

    counterparty_id: int
    lines: list[LineSpec]
    issue_date: date | None = None  # defaults to today
    currency: str | None = None  # defaults to the base currency
    exchange_rate: str | Decimal = Decimal("1")
    is_quotation: bool = False
    payment_status: str = "Unpaid"
    amount_paid: str | Decimal | None = None
    payment_method: str | None = None
    expected_collection_date: date | None = None
    collection_notes: str | None = None


@dataclass(frozen=True)
class DeliveryItemSpec:
    """Input: how many units of one line the customer is collecting."""

    line_id: int
    quantity: int


@dataclass(frozen=True)
class ReturnLineSpec:
    """Input: one line of a return.

    Price fields default to the snapshot on the sales line.
    """

    line_id: int
    quantity: int
    condition: str = "Good"
    restock: bool = True
    unit_price: str | Decimal | None = None
    discount_percent: str | Decimal | None = None
    tax_percent: str | Decimal | None = None


@dataclass(frozen=True)
class ReturnSpec:
    transaction_id: int
    counterparty_id: int
    lines: list[ReturnLineSpec]
    return_date: date | None = None
    reason: str = ""
    notes: str | None = None
    currency: str | None = None  # defaults to the transaction's currency
    exchange_rate: str | Decimal | None = None
    refund_method: str | None = None
    refund_status: str = "Pending"


# --- Output -------------------------------------------------------------------


@dataclass(frozen=True)
class TransactionLineDTO:
    line_id: int
    product_name: str
    quantity: int
    delivered: int
    returned: int
    cancelled: int
    remaining: int
    unit_price: str
    line_total: str
    delivery_status: str


@dataclass(frozen=True)
class TransactionDTO:
    """Output: an invoice or quotation as displayed to the user."""

    id: int
    number: str
    document_type: str
    customer_name: str
    issue_date: str
    currency: str
    delivery_status: str
    payment_status: str
    lines: list[TransactionLineDTO]
    subtotal: str
    discount: str
    tax: str
    total: str
    total_base: str
    amount_paid: str
    quotation_id: int | None = None


@dataclass(frozen=True)
class DeliveryLineDTO:
    product_name: str
    quantity: int
    line_total: str


@dataclass(frozen=True)
class DeliveryResultDTO:
    delivery_id: int
    delivery_number: str
    transaction_number: str
    new_status: str
    lines: list[DeliveryLineDTO]
    total: str


@dataclass(frozen=True)
class ReturnLineDTO:
    product_name: str
    quantity: int
    condition: str
    restocked: bool
    line_total: str


@dataclass(frozen=True)
class ReturnDTO:
    id: int
    number: str
    transaction_number: str
    lines: list[ReturnLineDTO]
    subtotal: str
    tax: str
    total: str
    refund_method: str | None
    refund_status: str
    transaction_status: str = ""


# --- Mapping ------------------------------------------------------------------


def transaction_to_dto(transaction: SalesTransaction, customer: Counterparty | None) -> TransactionDTO:
    return TransactionDTO(
        id=transaction.id,  # type: ignore[arg-type]
        number=transaction.number,
        document_type=transaction.document_type,
        customer_name=customer.name if customer is not None else f"#{transaction.counterparty_id}",
        issue_date=transaction.issue_date.isoformat(),
        currency=transaction.currency,
        delivery_status=transaction.delivery_status.value,
        payment_status=transaction.payment_status.value,
        lines=[
            TransactionLineDTO(
                line_id=line.id,  # type: ignore[arg-type]
                product_name=line.product_name,
                quantity=line.quantity,
                delivered=line.quantity_delivered,
                returned=line.quantity_returned,
                cancelled=line.quantity_cancelled,
                remaining=line.quantity_remaining,
                unit_price=str(line.unit_price),
                line_total=str(line.line_total),
                delivery_status=line.delivery_status.value,
            )
            for line in transaction.lines
        ],
        subtotal=str(transaction.subtotal),
        discount=str(transaction.discount_amount),
        tax=str(transaction.tax_amount),
        total=str(transaction.total),
        total_base=str(transaction.total_base),
        amount_paid=str(transaction.amount_paid or Money.zero(transaction.currency)),
        quotation_id=transaction.quotation_id,
    )
