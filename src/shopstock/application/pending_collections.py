"""Application service: Pending Collections use case (query).

Lists invoices whose goods have not been fully collected yet, oldest
first, with what is still waiting on the shelf and its value in the base
currency.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from shopstock.domain.model.sales import DeliveryStatus
from shopstock.domain.model.value_objects import Money
from shopstock.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class PendingLineDTO:
    line_id: int
    product_name: str
    quantity: int
    delivered: int
    remaining: int


@dataclass(frozen=True)
class PendingCollectionDTO:
    transaction_id: int
    number: str
    customer_name: str
    issue_date: str
    days_pending: int
    expected_collection_date: str | None
    is_overdue: bool
    delivery_status: str
    lines: list[PendingLineDTO]
    value_pending: str


@dataclass(frozen=True)
class PendingSummaryDTO:
    items: list[PendingCollectionDTO]
    total_invoices: int
    total_lines: int
    total_value: str
    oldest_pending_days: int
    overdue_count: int


class PendingCollectionsHandler:

    def __init__(self, uow: UnitOfWork, base_currency: str = "UGX") -> None:
        self._uow = uow
        self._base_currency = base_currency

    def handle(
        self,
        counterparty_id: int | None = None,
        overdue_only: bool = False,
        today: date | None = None,
    ) -> PendingSummaryDTO:
        today = today or date.today()
        items: list[PendingCollectionDTO] = []
        total_value = Money.zero(self._base_currency)

        with self._uow:
            transactions = self._uow.sales.list_by_delivery_status(
                (DeliveryStatus.NOT_TAKEN, DeliveryStatus.PARTIALLY_TAKEN),
                counterparty_id=counterparty_id,
            )
            for tx in transactions:
                is_overdue = (
                    tx.expected_collection_date is not None
                    and tx.expected_collection_date < today
                )
                if overdue_only and not is_overdue:
                    continue

                customer = self._uow.counterparties.get_by_id(tx.counterparty_id)
                value = tx.pending_value().convert(tx.exchange_rate, self._base_currency)
                total_value = total_value + value
                items.append(
                    PendingCollectionDTO(
                        transaction_id=tx.id,  # type: ignore[arg-type]
                        number=tx.number,
                        customer_name=customer.name if customer else f"#{tx.counterparty_id}",
                        issue_date=tx.issue_date.isoformat(),
                        days_pending=(today - tx.issue_date).days,
                        expected_collection_date=(
                            tx.expected_collection_date.isoformat()
                            if tx.expected_collection_date
                            else None
                        ),
                        is_overdue=is_overdue,
                        delivery_status=tx.delivery_status.value,
                        lines=[
                            PendingLineDTO(
                                line_id=line.id,  # type: ignore[arg-type]
                                product_name=line.product_name,
                                quantity=line.quantity,
                                delivered=line.quantity_delivered,
                                remaining=line.quantity_remaining,
                            )
                            for line in tx.lines
                            if line.quantity_remaining > 0
                        ],
                        value_pending=str(value),
                    )
                )

        return PendingSummaryDTO(
            items=items,
            total_invoices=len(items),
            total_lines=sum(len(item.lines) for item in items),
            total_value=str(total_value),
            oldest_pending_days=max((item.days_pending for item in items), default=0),
            overdue_count=sum(1 for item in items if item.is_overdue),
        )
