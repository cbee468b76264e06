"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from shopstock.domain.exceptions import ValidationError
from shopstock.domain.model.value_objects import Money, Percentage, Quantity, to_decimal


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation_defaults_to_base_currency(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")
        assert m.currency == "UGX"

    def test_of_factory_from_string(self):
        assert Money.of("25.99").amount == Decimal("25.99")

    def test_of_factory_from_float_goes_through_str(self):
        assert Money.of(0.1).amount == Decimal("0.1")

    def test_of_factory_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("abc")

    def test_non_decimal_amount_rejected(self):
        with pytest.raises(ValidationError, match="must be a Decimal"):
            Money(10)  # type: ignore[arg-type]

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_addition(self):
        assert Money.of("10") + Money.of("5.50") == Money.of("15.50")

    def test_subtraction_going_negative_rejected(self):
        with pytest.raises(ValidationError, match="negative amount"):
            Money.of("5") - Money.of("10")

    def test_multiplication_rounds_half_up_to_cents(self):
        assert (Money.of("0.125") * 1).amount == Decimal("0.13")
        assert (Money.of("10.00") * Decimal("0.3333")).amount == Decimal("3.33")

    def test_multiplication_by_float_rejected(self):
        with pytest.raises(TypeError):
            Money.of("1") * 1.5  # type: ignore[operator]

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money.of("10", "USD") + Money.of("5", "UGX")

    def test_convert_into_other_currency(self):
        converted = Money.of("100", "USD").convert(Decimal("3700"), "UGX")
        assert converted == Money.of("370000", "UGX")

    def test_convert_into_same_currency_ignores_rate(self):
        m = Money.of("100", "UGX")
        assert m.convert(Decimal("3700"), "UGX") is m

    def test_str_formatting(self):
        assert str(Money.of("1234.5")) == "UGX 1,234.50"
        assert str(Money.of("9", "USD")) == "USD 9.00"

    def test_comparison_operators(self):
        assert Money.of("5") < Money.of("10")
        assert Money.of("10") >= Money.of("10")


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_valid_quantity(self):
        assert Quantity(5).value == 5

    @pytest.mark.parametrize("bad", [0, -3])
    def test_non_positive_rejected(self, bad):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(bad)

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(True)


# ── Percentage ───────────────────────────────────────────────────────────────


class TestPercentage:

    def test_parse_none_is_zero(self):
        assert Percentage.parse(None).value == Decimal("0")

    def test_of_rounds_to_cents(self):
        assert Percentage.parse("18").of(Decimal("333.33")) == Decimal("60.00")

    @pytest.mark.parametrize("bad", ["-1", "100.01"])
    def test_out_of_range_rejected(self, bad):
        with pytest.raises(ValidationError, match="between 0 and 100"):
            Percentage.parse(bad)

    def test_str(self):
        assert str(Percentage.parse("12.50")) == "12.5%"


# ── Decimal input ────────────────────────────────────────────────────────────


class TestToDecimal:

    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")

    @pytest.mark.parametrize("bad", ["NaN", "sNaN", "Infinity", "-inf", Decimal("NaN"), float("inf")])
    def test_non_finite_rejected(self, bad):
        with pytest.raises(ValidationError, match="Invalid unit price"):
            to_decimal(bad, "unit price")

    def test_garbage_rejected(self):
        with pytest.raises(ValidationError, match="Invalid amount: 'ten'"):
            to_decimal("ten")

    def test_nan_percentage_rejected(self):
        with pytest.raises(ValidationError, match="Invalid percentage"):
            Percentage.parse("nan")
