"""Sales returns.

A return reverses part of a sale. Header and lines are immutable once
written; only the refund fields may be updated afterwards, which has no
effect on stock.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum

from shopstock.domain.exceptions import ValidationError
from shopstock.domain.model.value_objects import Money, Percentage

RETURN_PREFIX = "RET"
CREDIT_NOTE = "Credit Note"


class ReturnCondition(Enum):
    GOOD = "Good"
    DAMAGED = "Damaged"
    DEFECTIVE = "Defective"


class RefundStatus(Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    CREDIT_NOTE = "Credit Note"


@dataclass(frozen=True)
class ReturnLine:
    line_id: int
    product_id: int
    product_name: str
    quantity: int
    unit_price: Money
    discount_percent: Percentage
    tax_percent: Percentage
    line_total: Money
    condition: ReturnCondition
    restock: bool

    def __post_init__(self) -> None:
        if self.restock and self.condition is not ReturnCondition.GOOD:
            raise ValidationError(
                f"Only goods in Good condition can be restocked "
                f"({self.product_name} is {self.condition.value})"
            )


@dataclass
class ReturnRecord:
    id: int | None
    number: str
    transaction_id: int
    counterparty_id: int
    return_date: date
    reason: str
    currency: str
    exchange_rate: Decimal
    subtotal: Money
    tax_amount: Money
    total: Money
    total_base: Money
    lines: tuple[ReturnLine, ...]
    notes: str | None = None
    refund_method: str | None = None
    refund_status: RefundStatus = RefundStatus.PENDING
    refund_date: date | None = None
    refund_amount: Money | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_credit_note(self) -> bool:
        return self.refund_method == CREDIT_NOTE

    def update_refund(
        self,
        status: RefundStatus,
        refund_date: date | None = None,
        refund_amount: Money | None = None,
    ) -> None:
        if refund_amount is not None and refund_amount > self.total:
            raise ValidationError(
                f"Refund {refund_amount} exceeds the return total {self.total}"
            )
        self.refund_status = status
        self.refund_date = refund_date
        self.refund_amount = refund_amount
