"""Application service: Verify Stock Consistency use case (query).

Cross-checks every product's reserved stock against the uncollected
quantities of open invoices.
"""

from __future__ import annotations

import logging

from shopstock.domain.model.sales import DeliveryStatus
from shopstock.domain.repository.unit_of_work import UnitOfWork
from shopstock.domain.service.consistency_guard import ConsistencyViolation, verify_reservations

logger = logging.getLogger(__name__)


class VerifyConsistencyHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> list[ConsistencyViolation]:
        with self._uow:
            products = self._uow.products.list_all()
            open_transactions = self._uow.sales.list_by_delivery_status(
                (DeliveryStatus.NOT_TAKEN, DeliveryStatus.PARTIALLY_TAKEN)
            )
        violations = verify_reservations(products, open_transactions)
        for violation in violations:
            logger.warning("Reservation mismatch: %s", violation)
        return violations
