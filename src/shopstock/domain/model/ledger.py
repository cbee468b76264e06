"""Append-only records kept alongside the stock and balance counters."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum

from shopstock.domain.model.value_objects import Money


class AdjustmentReason(Enum):
    OPENING_STOCK = "Opening Stock"
    MANUAL = "Manual Adjustment"
    SALES_RETURN = "Sales Return"
    RETURN_WRITE_OFF = "Sales Return Write-off"
    RESERVATION_RELEASE = "Reservation Released"


@dataclass(frozen=True)
class LedgerEntry:
    """A cash movement tied to a sales transaction (e.g. an upfront payment)."""

    id: int | None
    entry_date: date
    entry_type: str
    amount: Money
    description: str
    reference: str
    transaction_id: int | None = None


@dataclass(frozen=True)
class StockAdjustment:
    """Audit row for a stock change.

    ``quantity`` is signed: positive when units entered physical stock,
    negative when they were written off, zero for a marker that only
    records a reservation change.
    """

    id: int | None
    product_id: int
    quantity: int
    reason: AdjustmentReason
    notes: str | None = None
    approved_by: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
