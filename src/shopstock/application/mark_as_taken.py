"""Application service: Mark As Taken (delivery fulfillment) use case.

Orchestrates the SalesTransaction aggregate (delivery counters and status)
and the stock ledger (release + consume) for goods the customer collects,
and writes one delivery note per call. Either every requested line is
delivered or nothing is.
"""

from __future__ import annotations

import logging
from datetime import date

from shopstock.application.dto import DeliveryItemSpec, DeliveryLineDTO, DeliveryResultDTO
from shopstock.domain.exceptions import TransactionNotFound, ValidationError
from shopstock.domain.model.delivery import (
    DELIVERY_NOTE_PREFIX,
    DeliveryLine,
    DeliveryMetadata,
    DeliveryRecord,
)
from shopstock.domain.model.sales import SalesTransaction
from shopstock.domain.model.value_objects import Quantity
from shopstock.domain.repository.unit_of_work import UnitOfWork
from shopstock.domain.service import consistency_guard
from shopstock.domain.service.numbering import next_document_number
from shopstock.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


class MarkAsTakenHandler:

    def __init__(self, uow: UnitOfWork, strict_reservations: bool = False) -> None:
        self._uow = uow
        self._strict = strict_reservations

    def handle(
        self,
        transaction_id: int,
        items: list[DeliveryItemSpec] | None = None,
        metadata: DeliveryMetadata | None = None,
    ) -> DeliveryResultDTO:
        """Deliver goods against an invoice.

        Args:
            transaction_id: The invoice the goods were sold on.
            items: Lines and quantities being collected. If None, every
                remaining unit on every line is delivered.
            metadata: Who delivered and who received. Defaults to today
                with no names.
        """
        metadata = metadata or DeliveryMetadata(delivery_date=date.today())

        with self._uow:
            transaction = self._uow.sales.get_by_id(transaction_id)
            if transaction is None:
                raise TransactionNotFound(transaction_id)
            consistency_guard.ensure_open_for_delivery(transaction)

            quantities = self._quantities(transaction, items)
            for line_id, qty in quantities.items():
                consistency_guard.ensure_within_remaining(transaction.find_line(line_id), qty)

            transaction.deliver(quantities)

            stock = StockLedger(self._uow, self._strict)
            delivery_lines: list[DeliveryLine] = []
            for line_id, qty in quantities.items():
                line = transaction.find_line(line_id)
                stock.release_and_consume(line.product_id, qty)
                delivery_lines.append(
                    DeliveryLine(
                        line_id=line_id,
                        product_id=line.product_id,
                        product_name=line.product_name,
                        quantity=qty,
                        unit_price=line.unit_price,
                        line_total=line.value_of(qty),
                    )
                )

            record = DeliveryRecord(
                id=None,
                number=next_document_number(
                    self._uow.sequences, DELIVERY_NOTE_PREFIX, metadata.delivery_date
                ),
                transaction_id=transaction_id,
                transaction_number=transaction.number,
                metadata=metadata,
                lines=tuple(delivery_lines),
            )
            delivery_id = self._uow.deliveries.add(record)
            self._uow.sales.save(transaction)
            self._uow.commit()

        logger.info(
            "Delivery %s against %s: %s unit(s), status now %s",
            record.number, transaction.number, record.total_quantity,
            transaction.delivery_status.value,
        )
        return DeliveryResultDTO(
            delivery_id=delivery_id,
            delivery_number=record.number,
            transaction_number=transaction.number,
            new_status=transaction.delivery_status.value,
            lines=[
                DeliveryLineDTO(
                    product_name=line.product_name,
                    quantity=line.quantity,
                    line_total=str(line.line_total),
                )
                for line in record.lines
            ],
            total=str(record.total),
        )

    @staticmethod
    def _quantities(
        transaction: SalesTransaction,
        items: list[DeliveryItemSpec] | None,
    ) -> dict[int, int]:
        """Map ``line_id -> quantity``, summing lines requested twice."""
        if items is None:
            return {
                line.id: line.quantity_remaining
                for line in transaction.lines
                if line.id is not None and line.quantity_remaining > 0
            }
        if not items:
            raise ValidationError("Must specify at least one line to deliver")

        result: dict[int, int] = {}
        for item in items:
            quantity = Quantity(item.quantity).value
            result[item.line_id] = result.get(item.line_id, 0) + quantity
        return result
