"""Unit tests for line and document pricing."""

from decimal import Decimal

import pytest

from shopstock.domain.exceptions import ValidationError
from shopstock.domain.model.value_objects import Money, Percentage
from shopstock.domain.service.pricing import price_line, total_document


class TestPriceLine:

    def test_discount_then_tax(self):
        amounts = price_line(
            10, Money.of("1000"), Percentage.parse("10"), Percentage.parse("18")
        )
        assert amounts.subtotal == Money.of("10000")
        assert amounts.discount == Money.of("1000")
        assert amounts.taxable == Money.of("9000")
        assert amounts.tax == Money.of("1620")
        assert amounts.total == Money.of("10620")

    def test_each_step_rounded_half_up(self):
        amounts = price_line(
            3, Money.of("3.33"), Percentage.parse("5"), Percentage.parse("18")
        )
        # 9.99 -> discount 0.4995 -> 0.50 -> taxable 9.49 -> tax 1.7082 -> 1.71
        assert amounts.discount.amount == Decimal("0.50")
        assert amounts.tax.amount == Decimal("1.71")
        assert amounts.total.amount == Decimal("11.20")


class TestTotalDocument:

    def test_sums_lines(self):
        none = Percentage.parse(None)
        lines = [
            price_line(2, Money.of("100"), none, none),
            price_line(1, Money.of("50"), Percentage.parse("10"), none),
        ]
        totals = total_document(lines, "UGX", Decimal("1"), "UGX")
        assert totals.subtotal == Money.of("250")
        assert totals.discount == Money.of("5")
        assert totals.net == Money.of("245")
        assert totals.total == Money.of("245")
        assert totals.total_base == Money.of("245")

    def test_foreign_currency_converted_to_base(self):
        none = Percentage.parse(None)
        lines = [price_line(1, Money.of("10", "USD"), none, none)]
        totals = total_document(lines, "USD", Decimal("3750"), "UGX")
        assert totals.total == Money.of("10", "USD")
        assert totals.total_base == Money.of("37500", "UGX")

    def test_non_positive_rate_rejected(self):
        with pytest.raises(ValidationError, match="Exchange rate"):
            total_document([], "USD", Decimal("0"), "UGX")
