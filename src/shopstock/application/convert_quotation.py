"""Application service: Convert Quotation to Invoice use case.

Issues a brand-new invoice (dated today, unpaid) from the quotation's lines
and prices, reserving stock exactly like a direct sale. The quotation is
left in place and the invoice points back at it.
"""

from __future__ import annotations

import logging
from datetime import date

from shopstock.application.dto import (
    IssueTransactionSpec,
    LineSpec,
    TransactionDTO,
    transaction_to_dto,
)
from shopstock.application.issue_transaction import issue_transaction
from shopstock.domain.exceptions import TransactionNotFound, ValidationError
from shopstock.domain.model.sales import PaymentStatus
from shopstock.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class ConvertQuotationHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        base_currency: str = "UGX",
        strict_reservations: bool = False,
    ) -> None:
        self._uow = uow
        self._base_currency = base_currency
        self._strict = strict_reservations

    def handle(self, quotation_id: int, issue_date: date | None = None) -> TransactionDTO:
        with self._uow:
            quotation = self._uow.sales.get_by_id(quotation_id)
            if quotation is None:
                raise TransactionNotFound(quotation_id)
            if not quotation.is_quotation:
                raise ValidationError(f"{quotation.number} is not a quotation")

            spec = IssueTransactionSpec(
                counterparty_id=quotation.counterparty_id,
                lines=[
                    LineSpec(
                        product_id=line.product_id,
                        quantity=line.quantity,
                        unit_price=line.unit_price.amount,
                        discount_percent=line.discount_percent.value,
                        tax_percent=line.tax_percent.value,
                    )
                    for line in quotation.lines
                ],
                issue_date=issue_date or date.today(),
                currency=quotation.currency,
                exchange_rate=quotation.exchange_rate,
                payment_status=PaymentStatus.UNPAID.value,
                expected_collection_date=quotation.expected_collection_date,
                collection_notes=quotation.collection_notes,
            )
            invoice, customer = issue_transaction(
                self._uow, spec, self._base_currency, self._strict, quotation_id=quotation.id
            )
            self._uow.commit()

        logger.info("Converted quotation %s into invoice %s", quotation.number, invoice.number)
        return transaction_to_dto(invoice, customer)
