"""Tests for exact-cent money helpers."""

from decimal import Decimal

import pytest

from splitnest.money import (
    coerce_minor_units,
    from_minor_units,
    round2,
    sum_minor_units,
    to_minor_units,
)


class TestToMinorUnits:
    """Decimal amounts to integer cents."""

    def test_plain_values(self):
        assert to_minor_units(10.01) == 1001
        assert to_minor_units(72) == 7200
        assert to_minor_units("2.50") == 250
        assert to_minor_units(Decimal("3.34")) == 334

    def test_half_up_survives_binary_representation(self):
        """1.005 is stored as 1.00499999... but must still round up."""
        assert to_minor_units(1.005) == 101
        assert to_minor_units(2.675) == 268
        assert to_minor_units(Decimal("3.335")) == 334

    def test_negative_rounds_away_from_zero(self):
        assert to_minor_units(-1.005) == -101

    def test_sub_cent_amount_rounds_to_zero(self):
        assert to_minor_units(0.004) == 0

    def test_decimal_and_string_input_is_exact(self):
        """Values beyond float precision keep every cent."""
        assert to_minor_units(Decimal("12345678901234567.89")) == 1234567890123456789
        assert to_minor_units("98765432109876543.21") == 9876543210987654321
        assert to_minor_units(Decimal("1.005")) == 101
        assert to_minor_units(Decimal("-2.675")) == -268

    @pytest.mark.parametrize("value", [Decimal("Infinity"), Decimal("NaN"), "-inf", ""])
    def test_rejects_non_finite_decimal(self, value):
        with pytest.raises(ValueError):
            to_minor_units(value)

    def test_rejects_non_numeric(self):
        with pytest.raises(ValueError):
            to_minor_units("abc")
        with pytest.raises(ValueError):
            to_minor_units(float("nan"))
        with pytest.raises(ValueError):
            to_minor_units(True)


class TestRound2:
    """Two-decimal rounding."""

    def test_removes_float_drift(self):
        assert round2(0.1 + 0.2) == 0.3

    def test_round_trip_through_cents(self):
        assert from_minor_units(334) == 3.34
        assert round2(10.009) == 10.01


class TestCoercion:
    """Lenient conversion used by the read-only view."""

    def test_missing_or_garbage_is_zero(self):
        assert coerce_minor_units(None) == 0
        assert coerce_minor_units("garbage") == 0
        assert coerce_minor_units({}) == 0

    def test_numbers_pass_through(self):
        assert coerce_minor_units(1500) == 1500
        assert coerce_minor_units("1500") == 1500
        assert coerce_minor_units(1500.0) == 1500

    def test_sum_skips_bad_entries(self):
        items = [{"amount": 100}, {"amount": None}, {}, {"amount": "oops"}, {"amount": 250}]
        assert sum_minor_units(items) == 350
        assert sum_minor_units([{"autoSettled": 5}], "autoSettled") == 5
