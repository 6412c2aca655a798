"""Unit tests for domain value objects."""

from datetime import date

import pytest

from menaje.domain.exceptions import ValidationError
from menaje.domain.model.value_objects import DateRange, Quantity


# ── DateRange ────────────────────────────────────────────────────────────────


class TestDateRange:

    def test_single_day(self):
        r = DateRange.of("2024-01-10")
        assert r.start == r.end == date(2024, 1, 10)
        assert r.days == 1

    def test_of_factory_from_strings(self):
        r = DateRange.of("2024-01-10", "2024-01-12")
        assert r == DateRange(date(2024, 1, 10), date(2024, 1, 12))
        assert r.days == 3

    def test_start_after_end_rejected(self):
        with pytest.raises(ValidationError, match="after end"):
            DateRange(date(2024, 1, 5), date(2024, 1, 4))

    def test_bad_iso_string_rejected(self):
        with pytest.raises(ValidationError, match="Invalid date"):
            DateRange.of("10/01/2024")

    def test_shared_boundary_day_overlaps(self):
        a = DateRange.of("2024-01-01", "2024-01-03")
        b = DateRange.of("2024-01-03", "2024-01-05")
        assert a.overlaps(b)
        assert b.overlaps(a)

    def test_adjacent_windows_do_not_overlap(self):
        a = DateRange.of("2024-01-01", "2024-01-02")
        b = DateRange.of("2024-01-03", "2024-01-05")
        assert not a.overlaps(b)
        assert not b.overlaps(a)

    def test_containing_window_overlaps(self):
        outer = DateRange.of("2024-01-01", "2024-01-31")
        inner = DateRange.of("2024-01-10", "2024-01-12")
        assert outer.overlaps(inner)
        assert inner.within(outer)
        assert not outer.within(inner)

    def test_str(self):
        assert str(DateRange.of("2024-01-10")) == "2024-01-10"
        assert str(DateRange.of("2024-01-10", "2024-01-12")) == "2024-01-10 .. 2024-01-12"


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_valid_quantity(self):
        assert Quantity(5).value == 5

    def test_zero_allowed(self):
        assert Quantity(0).is_zero

    def test_negative_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Quantity(-3)

    def test_non_integer_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(2.5)

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(True)
