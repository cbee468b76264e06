"""Sales transaction aggregate for invoices and quotations.

The SalesTransaction owns its lines. Delivery progress is tracked per line
(``quantity_delivered``) and the per-line and per-transaction delivery
statuses are always *derived* from those counters by the pure functions at
the bottom of this module, never stored as an independent source of truth.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum

from shopstock.domain.exceptions import LineNotFound, ValidationError
from shopstock.domain.model.value_objects import Money, Percentage
from shopstock.domain.service.pricing import DocumentTotals


class DeliveryStatus(Enum):
    NOT_TAKEN = "Not Taken"
    PARTIALLY_TAKEN = "Partially Taken"
    TAKEN = "Taken"


class PaymentStatus(Enum):
    PAID = "Paid"
    PARTIAL = "Partial"
    UNPAID = "Unpaid"


# Statuses only move forward. Every member must appear as a key.
_FORWARD: dict[DeliveryStatus, frozenset[DeliveryStatus]] = {
    DeliveryStatus.NOT_TAKEN: frozenset(DeliveryStatus),
    DeliveryStatus.PARTIALLY_TAKEN: frozenset(
        {DeliveryStatus.PARTIALLY_TAKEN, DeliveryStatus.TAKEN}
    ),
    DeliveryStatus.TAKEN: frozenset({DeliveryStatus.TAKEN}),
}

INVOICE_PREFIX = "INV"
QUOTATION_PREFIX = "QT"


@dataclass
class SalesLine:
    """One product on a sales transaction.

    ``quantity`` and the price fields are a snapshot taken at issue time and
    never change. The three counters only ever grow:

    - ``quantity_delivered``: units the customer has collected
    - ``quantity_returned``: collected units that came back in a return
    - ``quantity_cancelled``: uncollected units a return took off the sale
    """

    id: int | None
    product_id: int
    product_name: str
    quantity: int
    unit_price: Money
    discount_percent: Percentage
    tax_percent: Percentage
    line_total: Money
    quantity_delivered: int = 0
    quantity_returned: int = 0
    quantity_cancelled: int = 0

    @property
    def quantity_remaining(self) -> int:
        """Units still reserved on the shelf waiting for collection."""
        return self.quantity - self.quantity_delivered - self.quantity_cancelled

    @property
    def quantity_returnable(self) -> int:
        return (self.quantity_delivered - self.quantity_returned) + self.quantity_remaining

    @property
    def delivery_status(self) -> DeliveryStatus:
        return derive_line_status(self)

    def value_of(self, quantity: int) -> Money:
        """Pro-rate the line total (discount and tax included) to *quantity* units."""
        return self.line_total * (Decimal(quantity) / Decimal(self.quantity))

    def deliver(self, quantity: int) -> None:
        self.quantity_delivered += quantity

    def take_back(self, from_delivered: int, from_reservation: int) -> None:
        """Apply a return split between collected and uncollected units."""
        if from_delivered < 0 or from_reservation < 0:
            raise ValidationError("Return split cannot be negative")
        if from_delivered > self.quantity_delivered - self.quantity_returned:
            raise ValidationError(
                f"Cannot return {from_delivered} collected units of {self.product_name}"
            )
        if from_reservation > self.quantity_remaining:
            raise ValidationError(
                f"Cannot cancel {from_reservation} uncollected units of {self.product_name}"
            )
        self.quantity_returned += from_delivered
        self.quantity_cancelled += from_reservation


@dataclass
class SalesTransaction:
    """Aggregate root for invoices and quotations.

    Use ``SalesTransaction.create()`` for new transactions. The ``__init__``
    stays simple so repositories can reconstitute persisted rows without
    re-validating.
    """

    id: int | None
    number: str
    counterparty_id: int
    issue_date: date
    currency: str
    exchange_rate: Decimal
    lines: list[SalesLine]
    subtotal: Money
    discount_amount: Money
    tax_amount: Money
    total: Money
    total_base: Money
    is_quotation: bool = False
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    amount_paid: Money | None = None
    payment_method: str | None = None
    delivery_status: DeliveryStatus = DeliveryStatus.NOT_TAKEN
    expected_collection_date: date | None = None
    collection_notes: str | None = None
    quotation_id: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW transactions only) ------------------------------

    @staticmethod
    def create(
        number: str,
        counterparty_id: int,
        issue_date: date,
        currency: str,
        exchange_rate: Decimal,
        lines: list[SalesLine],
        totals: DocumentTotals,
        is_quotation: bool = False,
        payment_status: PaymentStatus = PaymentStatus.UNPAID,
        amount_paid: Money | None = None,
        payment_method: str | None = None,
        expected_collection_date: date | None = None,
        collection_notes: str | None = None,
        quotation_id: int | None = None,
    ) -> SalesTransaction:
        if not lines:
            raise ValidationError("A sales transaction must contain at least one line")
        if exchange_rate <= 0:
            raise ValidationError("Exchange rate must be positive")
        if amount_paid is not None and amount_paid > totals.total:
            raise ValidationError(
                f"Amount paid {amount_paid} exceeds the total {totals.total}"
            )

        transaction = SalesTransaction(
            id=None,
            number=number,
            counterparty_id=counterparty_id,
            issue_date=issue_date,
            currency=currency,
            exchange_rate=exchange_rate,
            lines=list(lines),
            subtotal=totals.subtotal,
            discount_amount=totals.discount,
            tax_amount=totals.tax,
            total=totals.total,
            total_base=totals.total_base,
            is_quotation=is_quotation,
            payment_status=payment_status,
            amount_paid=amount_paid if amount_paid is not None else Money.zero(currency),
            payment_method=payment_method,
            expected_collection_date=expected_collection_date,
            collection_notes=collection_notes,
            quotation_id=quotation_id,
        )
        transaction.delivery_status = derive_transaction_status(transaction)
        return transaction

    # --- Delivery -------------------------------------------------------------

    @property
    def is_open_for_delivery(self) -> bool:
        return self.delivery_status in (
            DeliveryStatus.NOT_TAKEN,
            DeliveryStatus.PARTIALLY_TAKEN,
        )

    def deliver(self, quantities: dict[int, int]) -> None:
        """Record collection of ``{line_id: quantity}``.

        Quantities must already have passed
        ``consistency_guard.ensure_within_remaining``. Every line is resolved
        before any counter moves, so an unknown line leaves the transaction
        untouched.
        """
        lines = [(self.find_line(line_id), qty) for line_id, qty in quantities.items()]
        for line, qty in lines:
            line.deliver(qty)
        self.refresh_delivery_status()

    def take_back(self, line_id: int, from_delivered: int, from_reservation: int) -> None:
        self.find_line(line_id).take_back(from_delivered, from_reservation)
        self.refresh_delivery_status()

    def refresh_delivery_status(self) -> DeliveryStatus:
        new_status = derive_transaction_status(self)
        if new_status not in _FORWARD[self.delivery_status]:
            raise ValidationError(
                f"{self.number}: delivery status cannot move from "
                f"{self.delivery_status.value} back to {new_status.value}"
            )
        self.delivery_status = new_status
        return new_status

    # --- Computed properties --------------------------------------------------

    @property
    def document_type(self) -> str:
        return "Quotation" if self.is_quotation else "Invoice"

    @property
    def outstanding_amount(self) -> Decimal:
        """What issuing this transaction added to the customer's balance."""
        paid = self.amount_paid.amount if self.amount_paid is not None else Decimal("0")
        return self.total.amount - paid

    def reserved_by_product(self) -> dict[int, int]:
        """Units this transaction currently holds in reserve, per product."""
        if self.is_quotation:
            return {}
        result: dict[int, int] = {}
        for line in self.lines:
            if line.quantity_remaining > 0:
                result[line.product_id] = result.get(line.product_id, 0) + line.quantity_remaining
        return result

    def pending_value(self) -> Money:
        """Value of the goods not yet collected, in the transaction currency."""
        result = Money.zero(self.currency)
        for line in self.lines:
            if line.quantity_remaining > 0:
                result = result + line.value_of(line.quantity_remaining)
        return result

    # --- Internal helpers -----------------------------------------------------

    def find_line(self, line_id: int) -> SalesLine:
        for line in self.lines:
            if line.id == line_id:
                return line
        raise LineNotFound(self.id, line_id)


# ---------------------------------------------------------------------------
# Pure status derivation
# ---------------------------------------------------------------------------


def derive_line_status(line: SalesLine) -> DeliveryStatus:
    if line.quantity_remaining == 0:
        return DeliveryStatus.TAKEN
    if line.quantity_delivered > 0:
        return DeliveryStatus.PARTIALLY_TAKEN
    return DeliveryStatus.NOT_TAKEN


def derive_transaction_status(transaction: SalesTransaction) -> DeliveryStatus:
    """Taken iff every line is taken; partially taken iff anything was collected."""
    if transaction.is_quotation:
        return DeliveryStatus.TAKEN
    statuses = [derive_line_status(line) for line in transaction.lines]
    if all(s is DeliveryStatus.TAKEN for s in statuses):
        return DeliveryStatus.TAKEN
    if any(line.quantity_delivered > 0 for line in transaction.lines):
        return DeliveryStatus.PARTIALLY_TAKEN
    return DeliveryStatus.NOT_TAKEN
