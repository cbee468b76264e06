"""Line and document totals.

Per line: subtotal -> discount -> taxable -> tax -> total, each rounded to
the cent. Document totals are plain sums of the rounded line figures, then
converted into the base (reporting) currency.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from shopstock.domain.exceptions import ValidationError
from shopstock.domain.model.value_objects import Money, Percentage


@dataclass(frozen=True)
class LineAmounts:
    subtotal: Money
    discount: Money
    taxable: Money
    tax: Money
    total: Money


@dataclass(frozen=True)
class DocumentTotals:
    subtotal: Money
    discount: Money
    tax: Money
    total: Money
    total_base: Money

    @property
    def net(self) -> Money:
        """Subtotal after discounts, before tax."""
        return self.subtotal - self.discount


def price_line(
    quantity: int,
    unit_price: Money,
    discount: Percentage,
    tax: Percentage,
) -> LineAmounts:
    subtotal = unit_price * quantity
    discount_amount = Money(discount.of(subtotal.amount), unit_price.currency)
    taxable = subtotal - discount_amount
    tax_amount = Money(tax.of(taxable.amount), unit_price.currency)
    return LineAmounts(
        subtotal=subtotal,
        discount=discount_amount,
        taxable=taxable,
        tax=tax_amount,
        total=taxable + tax_amount,
    )


def total_document(
    lines: list[LineAmounts],
    currency: str,
    exchange_rate: Decimal,
    base_currency: str,
) -> DocumentTotals:
    if exchange_rate <= 0:
        raise ValidationError("Exchange rate must be positive")

    subtotal = Money.zero(currency)
    discount = Money.zero(currency)
    tax = Money.zero(currency)
    total = Money.zero(currency)
    for line in lines:
        subtotal = subtotal + line.subtotal
        discount = discount + line.discount
        tax = tax + line.tax
        total = total + line.total

    return DocumentTotals(
        subtotal=subtotal,
        discount=discount,
        tax=tax,
        total=total,
        total_base=total.convert(exchange_rate, base_currency),
    )
