"""Unit tests for the Product aggregate's stock primitives."""

import pytest

from shopstock.domain.exceptions import (
    InsufficientReservation,
    InsufficientStock,
    ValidationError,
)
from shopstock.domain.model.product import Product


def _product(physical: int = 100, reserved: int = 0, reorder_level: int = 0) -> Product:
    return Product(
        id=1, name="Cement 50kg", physical_stock=physical,
        reserved_stock=reserved, reorder_level=reorder_level,
    )


# ── Reserve ──────────────────────────────────────────────────────────────────


class TestReserve:

    def test_reserve_leaves_physical_untouched(self):
        p = _product(physical=100)
        p.reserve(30)
        assert p.physical_stock == 100
        assert p.reserved_stock == 30
        assert p.available_stock == 70

    def test_reserve_exactly_available(self):
        p = _product(physical=10, reserved=4)
        p.reserve(6)
        assert p.available_stock == 0
        assert p.is_out_of_stock

    def test_reserve_more_than_available_rejected(self):
        p = _product(physical=40, reserved=0)
        with pytest.raises(InsufficientStock) as exc_info:
            p.reserve(50)
        assert exc_info.value.requested == 50
        assert exc_info.value.available == 40
        assert "Insufficient stock for Cement 50kg" in str(exc_info.value)
        assert p.reserved_stock == 0

    @pytest.mark.parametrize("bad", [0, -1])
    def test_non_positive_rejected(self, bad):
        with pytest.raises(ValidationError, match="must be positive"):
            _product().reserve(bad)


# ── Release ──────────────────────────────────────────────────────────────────


class TestReleaseAndConsume:

    def test_drops_reserved_and_physical_together(self):
        p = _product(physical=100, reserved=30)
        p.release_and_consume(10)
        assert p.physical_stock == 90
        assert p.reserved_stock == 20
        assert p.available_stock == 70

    def test_more_than_reserved_raises_instead_of_clamping(self):
        p = _product(physical=100, reserved=5)
        with pytest.raises(InsufficientReservation):
            p.release_and_consume(6)
        assert p.reserved_stock == 5
        assert p.physical_stock == 100


class TestReleaseOnly:

    def test_release_keeps_physical(self):
        p = _product(physical=100, reserved=30)
        assert p.release(30) == 0
        assert p.reserved_stock == 0
        assert p.physical_stock == 100

    def test_release_clamps_at_zero_and_reports_shortfall(self):
        p = _product(physical=100, reserved=3)
        assert p.release(5) == 2
        assert p.reserved_stock == 0

    def test_strict_release_raises_on_shortfall(self):
        p = _product(physical=100, reserved=3)
        with pytest.raises(InsufficientReservation):
            p.release(5, strict=True)
        assert p.reserved_stock == 3


# ── Restock / adjust ─────────────────────────────────────────────────────────


class TestRestockAndAdjust:

    def test_restock_adds_to_physical_only(self):
        p = _product(physical=10, reserved=4)
        p.restock(3)
        assert p.physical_stock == 13
        assert p.reserved_stock == 4

    def test_adjust_down(self):
        p = _product(physical=10, reserved=4)
        p.adjust(-6)
        assert p.physical_stock == 4
        assert p.available_stock == 0

    def test_adjust_below_reserved_rejected(self):
        p = _product(physical=10, reserved=4)
        with pytest.raises(ValidationError, match="below the 4 units reserved"):
            p.adjust(-7)
        assert p.physical_stock == 10

    def test_zero_adjustment_rejected(self):
        with pytest.raises(ValidationError, match="non-zero"):
            _product().adjust(0)


# ── Flags ────────────────────────────────────────────────────────────────────


class TestStockFlags:

    def test_low_stock_at_reorder_level(self):
        assert _product(physical=12, reserved=2, reorder_level=10).is_low_stock

    def test_not_low_above_reorder_level(self):
        assert not _product(physical=12, reserved=1, reorder_level=10).is_low_stock
