"""Application service: Update Refund Status use case.

Only the refund fields of a return change. Stock and balances are never
touched here; the return itself already settled them.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from shopstock.application.create_return import parse_refund_status
from shopstock.domain.exceptions import ReturnNotFound
from shopstock.domain.model.value_objects import Money, to_decimal
from shopstock.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class UpdateRefundHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        return_id: int,
        status: str,
        refund_date: date | None = None,
        refund_amount: str | Decimal | None = None,
    ) -> str:
        with self._uow:
            record = self._uow.returns.get_by_id(return_id)
            if record is None:
                raise ReturnNotFound(return_id)

            amount = (
                Money(to_decimal(refund_amount, "refund amount"), record.currency)
                if refund_amount is not None
                else None
            )
            record.update_refund(parse_refund_status(status), refund_date, amount)
            self._uow.returns.save_refund(record)
            self._uow.commit()

        logger.info("Return %s refund status set to %s", record.number, record.refund_status.value)
        return record.refund_status.value
