"""Delivery records (delivery notes).

A delivery record is written once per "mark as taken" action and never
changed afterwards. Together the records explain how every line's
``quantity_delivered`` reached its current value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from shopstock.domain.exceptions import ValidationError
from shopstock.domain.model.value_objects import Money

DELIVERY_NOTE_PREFIX = "DN"


@dataclass(frozen=True)
class DeliveryLine:
    line_id: int
    product_id: int
    product_name: str
    quantity: int
    unit_price: Money
    line_total: Money  # pro-rated from the sales line, discount and tax included


@dataclass(frozen=True)
class DeliveryMetadata:
    """Who handed the goods over, who collected them and how."""

    delivery_date: date
    delivered_by: str | None = None
    received_by: str | None = None
    vehicle_number: str | None = None
    notes: str | None = None
    show_prices: bool = True
    show_totals: bool = True


@dataclass(frozen=True)
class DeliveryRecord:
    id: int | None
    number: str
    transaction_id: int
    transaction_number: str
    metadata: DeliveryMetadata
    lines: tuple[DeliveryLine, ...]
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if not self.lines:
            raise ValidationError("A delivery record must contain at least one line")

    @property
    def total(self) -> Money:
        result = Money.zero(self.lines[0].line_total.currency)
        for line in self.lines:
            result = result + line.line_total
        return result

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.lines)
