"""Application service: Create Sales Return use case.

A returned quantity is matched against the line in two parts:

1. Units the customer already collected and has not returned yet. These
   come back to the shop: restocked when in good condition, written off
   (audit only) otherwise.
2. Whatever is left is taken off the part of the sale still waiting on the
   shelf: the reservation is released and the units count as cancelled.

Either way each returned unit is accounted for exactly once, so physical
stock, reserved stock and the line counters stay consistent.
"""

from __future__ import annotations

import logging
from datetime import date

from shopstock.application.dto import ReturnDTO, ReturnLineDTO, ReturnSpec
from shopstock.domain.exceptions import CounterpartyNotFound, TransactionNotFound, ValidationError
from shopstock.domain.model.ledger import AdjustmentReason, StockAdjustment
from shopstock.domain.model.returns import (
    RETURN_PREFIX,
    RefundStatus,
    ReturnCondition,
    ReturnLine,
    ReturnRecord,
)
from shopstock.domain.model.value_objects import Money, Percentage, Quantity, to_decimal
from shopstock.domain.repository.unit_of_work import UnitOfWork
from shopstock.domain.service import consistency_guard
from shopstock.domain.service.numbering import next_document_number
from shopstock.domain.service.pricing import price_line, total_document
from shopstock.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


class CreateReturnHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        base_currency: str = "UGX",
        strict_reservations: bool = False,
    ) -> None:
        self._uow = uow
        self._base_currency = base_currency
        self._strict = strict_reservations

    def handle(self, spec: ReturnSpec) -> ReturnDTO:
        with self._uow:
            transaction = self._uow.sales.get_by_id(spec.transaction_id)
            if transaction is None:
                raise TransactionNotFound(spec.transaction_id)
            customer = self._uow.counterparties.get_by_id(spec.counterparty_id)
            if customer is None:
                raise CounterpartyNotFound(spec.counterparty_id)
            if customer.id != transaction.counterparty_id:
                raise ValidationError(
                    f"{transaction.number} was not sold to customer #{customer.id}"
                )
            if transaction.is_quotation:
                raise ValidationError(f"{transaction.number} is a quotation; nothing to return")
            if not spec.lines:
                raise ValidationError("A return must contain at least one line")

            currency = (spec.currency or transaction.currency).upper()
            exchange_rate = to_decimal(
                spec.exchange_rate if spec.exchange_rate is not None else transaction.exchange_rate,
                "exchange rate",
            )
            return_date = spec.return_date or date.today()

            # Phase 1: validate and price every line
            requested: dict[int, int] = {}
            return_lines: list[ReturnLine] = []
            amounts = []
            for line_spec in spec.lines:
                line_id = line_spec.line_id
                line = transaction.find_line(line_id)
                quantity = Quantity(line_spec.quantity).value
                requested[line_id] = requested.get(line_id, 0) + quantity
                consistency_guard.ensure_returnable(line, requested[line_id])

                unit_price = Money(
                    to_decimal(
                        line_spec.unit_price
                        if line_spec.unit_price is not None
                        else line.unit_price.amount,
                        "unit price",
                    ),
                    currency,
                )
                discount = (
                    Percentage.parse(line_spec.discount_percent)
                    if line_spec.discount_percent is not None
                    else line.discount_percent
                )
                tax = (
                    Percentage.parse(line_spec.tax_percent)
                    if line_spec.tax_percent is not None
                    else line.tax_percent
                )
                line_amounts = price_line(quantity, unit_price, discount, tax)
                amounts.append(line_amounts)
                return_lines.append(
                    ReturnLine(
                        line_id=line_id,
                        product_id=line.product_id,
                        product_name=line.product_name,
                        quantity=quantity,
                        unit_price=unit_price,
                        discount_percent=discount,
                        tax_percent=tax,
                        line_total=line_amounts.total,
                        condition=_parse_condition(line_spec.condition),
                        restock=line_spec.restock,
                    )
                )

            totals = total_document(amounts, currency, exchange_rate, self._base_currency)
            number = next_document_number(self._uow.sequences, RETURN_PREFIX, return_date)
            record = ReturnRecord(
                id=None,
                number=number,
                transaction_id=spec.transaction_id,
                counterparty_id=spec.counterparty_id,
                return_date=return_date,
                reason=spec.reason,
                notes=spec.notes,
                currency=currency,
                exchange_rate=exchange_rate,
                subtotal=totals.net,
                tax_amount=totals.tax,
                total=totals.total,
                total_base=totals.total_base,
                lines=tuple(return_lines),
                refund_method=spec.refund_method,
                refund_status=parse_refund_status(spec.refund_status),
            )
            return_id = self._uow.returns.add(record)

            # Phase 2: move stock and counters
            stock = StockLedger(self._uow, self._strict)
            for return_line in record.lines:
                line = transaction.find_line(return_line.line_id)
                from_delivered = min(
                    return_line.quantity, line.quantity_delivered - line.quantity_returned
                )
                from_reservation = return_line.quantity - from_delivered

                if from_delivered:
                    self._take_back_collected(stock, record, return_line, from_delivered)
                if from_reservation:
                    stock.release_only(return_line.product_id, from_reservation)
                    self._audit(
                        return_line.product_id,
                        0,
                        AdjustmentReason.RESERVATION_RELEASE,
                        f"Return #{number}: {from_reservation} uncollected unit(s) cancelled",
                    )
                transaction.take_back(return_line.line_id, from_delivered, from_reservation)

            self._uow.sales.save(transaction)

            if record.is_credit_note:
                customer.credit_advance(currency, record.total.amount)
                self._uow.counterparties.save(customer)

            self._uow.commit()

        logger.info(
            "Return %s against %s: %s line(s), total %s, refund %s",
            record.number, transaction.number, len(record.lines), record.total,
            record.refund_method or "not set",
        )
        return ReturnDTO(
            id=return_id,
            number=record.number,
            transaction_number=transaction.number,
            lines=[
                ReturnLineDTO(
                    product_name=line.product_name,
                    quantity=line.quantity,
                    condition=line.condition.value,
                    restocked=line.restock,
                    line_total=str(line.line_total),
                )
                for line in record.lines
            ],
            subtotal=str(record.subtotal),
            tax=str(record.tax_amount),
            total=str(record.total),
            refund_method=record.refund_method,
            refund_status=record.refund_status.value,
            transaction_status=transaction.delivery_status.value,
        )

    # --- Internal helpers -----------------------------------------------------

    def _take_back_collected(
        self,
        stock: StockLedger,
        record: ReturnRecord,
        return_line: ReturnLine,
        quantity: int,
    ) -> None:
        note = f"Return #{record.number} - {return_line.condition.value} condition"
        if return_line.restock:
            stock.restock(return_line.product_id, quantity)
            self._audit(return_line.product_id, quantity, AdjustmentReason.SALES_RETURN, note)
        else:
            self._audit(
                return_line.product_id, -quantity, AdjustmentReason.RETURN_WRITE_OFF, note
            )

    def _audit(self, product_id: int, quantity: int, reason: AdjustmentReason, notes: str) -> None:
        self._uow.ledger.add_adjustment(
            StockAdjustment(
                id=None,
                product_id=product_id,
                quantity=quantity,
                reason=reason,
                notes=notes,
            )
        )


def _parse_condition(raw: str) -> ReturnCondition:
    for condition in ReturnCondition:
        if condition.value.lower() == raw.strip().lower():
            return condition
    raise ValidationError(
        f"Unknown condition '{raw}'. "
        f"Expected one of: {', '.join(c.value for c in ReturnCondition)}"
    )


def parse_refund_status(raw: str) -> RefundStatus:
    for status in RefundStatus:
        if status.value.lower() == raw.strip().lower():
            return status
    raise ValidationError(
        f"Unknown refund status '{raw}'. "
        f"Expected one of: {', '.join(s.value for s in RefundStatus)}"
    )
