"""Tests for currency helpers."""

from decimal import Decimal

import pytest

from blytz.money import from_minor_units, quantize, to_decimal, to_minor_units


class TestToDecimal:
    def test_float_goes_through_string_form(self):
        assert to_decimal(149.99) == Decimal("149.99")

    def test_none_is_zero(self):
        assert to_decimal(None) == Decimal("0.00")

    def test_bool_rejected(self):
        with pytest.raises(ValueError):
            to_decimal(True)


class TestRounding:
    def test_sum_of_floats_is_exact(self):
        total = sum((to_decimal(p) for p in (0.1, 0.2)), Decimal("0"))
        assert total == Decimal("0.3")

    def test_quantize_rounds_half_up(self):
        assert quantize("2.675") == Decimal("2.68")
        assert quantize("2.665") == Decimal("2.67")

    def test_minor_units(self):
        assert to_minor_units("149.99") == 14999
        assert to_minor_units(598.98) == 59898
        assert to_minor_units("0.005") == 1

    def test_from_minor_units(self):
        assert from_minor_units(29998) == Decimal("299.98")
