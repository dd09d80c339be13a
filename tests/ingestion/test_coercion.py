"""Tests for value coercion (pure functions, plus property-based checks)."""

from datetime import date, datetime
from decimal import Decimal

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from praxis_ingestion.domain import FieldCategory
from praxis_ingestion.mapping import (
    TRUE_TOKENS,
    coerce_boolean,
    coerce_date,
    coerce_float,
    coerce_integer,
    coerce_string,
    coerce_value,
    is_date,
    is_number,
)
from praxis_ingestion.mapping.coercion import parse_decimal


class TestBoolean:
    @pytest.mark.parametrize("raw", ["Yes", "yes", "1", "x", "X", "TRUE", "true", "Y", " yes "])
    def test_affirmative_tokens(self, raw):
        assert coerce_boolean(raw) is True

    @pytest.mark.parametrize("raw", ["", "No", "no", "0", "false", "maybe", "N/A", None])
    def test_everything_else_is_false(self, raw):
        assert coerce_boolean(raw) is False

    def test_bool_passthrough(self):
        assert coerce_boolean(True) is True
        assert coerce_boolean(False) is False


class TestNumbers:
    def test_integer_rounds_half_up(self):
        assert coerce_integer("2.5") == 3
        assert coerce_integer("2.4") == 2
        assert coerce_integer("-2.5") == -3
        assert coerce_integer("65") == 65

    def test_integer_invalid_or_empty_is_none(self):
        assert coerce_integer("abc") is None
        assert coerce_integer("") is None
        assert coerce_integer("   ") is None

    def test_float_is_exact_decimal(self):
        assert coerce_float("85303.59") == Decimal("85303.59")
        assert coerce_float(" 0.500 ") == Decimal("0.500")
        assert coerce_float("1e3") == Decimal("1000")

    def test_non_finite_rejected(self):
        assert coerce_float("NaN") is None
        assert coerce_float("Infinity") is None
        assert not is_number("-inf")

    def test_locale_separators_rejected(self):
        assert coerce_float("0,500") is None
        assert not is_number("1,000")

    def test_bool_is_not_a_number(self):
        assert parse_decimal(True) is None

    @pytest.mark.parametrize("raw", ["1e1000000", "1e31", "-1E+40", "1e-40", 10**40])
    def test_out_of_range_exponent_rejected(self, raw):
        assert parse_decimal(raw) is None
        assert coerce_integer(raw) is None
        assert not is_number(raw)

    def test_exponent_within_range_accepted(self):
        assert coerce_integer("1e30") == 10**30
        assert coerce_float("1.5e-30") == Decimal("1.5e-30")


class TestDates:
    @pytest.mark.parametrize(
        "raw",
        [
            "2025-05-08",
            "2025/05/08",
            "05/08/2025",
            "5/8/2025",
            "05/08/25",
            "05-08-2025",
            "08-May-2025",
            "May 8, 2025",
            "May 8 2025",
            "2025-05-08T10:15:00",
            "2025-05-08T10:15:00Z",
            "5/8/2025 0:00:00",
            "05/08/2025 10:30",
            "5/8/2025 10:30 AM",
            "5/8/2025 11:59:59 PM",
            "2025/05/08 00:00",
            "2025/05/08 00:00:00",
        ],
    )
    def test_accepted_spellings(self, raw):
        assert coerce_date(raw) == date(2025, 5, 8)

    @pytest.mark.parametrize("raw", ["not a date", "13/45/2025", "2025-02-30", ""])
    def test_rejected(self, raw):
        assert coerce_date(raw) is None
        assert not is_date(raw)

    def test_datetime_input_drops_time(self):
        assert coerce_date(datetime(2025, 5, 8, 23, 59)) == date(2025, 5, 8)


class TestDispatch:
    def test_string_trims_and_empties_to_none(self):
        assert coerce_string("  PMSI ") == "PMSI"
        assert coerce_string("   ") is None

    def test_lookup_categories_are_strings(self):
        assert coerce_value(" NW ", FieldCategory.LOOKUP_FACTORY) == "NW"
        assert coerce_value("", FieldCategory.LOOKUP_DEALER) is None

    def test_each_category(self):
        assert coerce_value("x", FieldCategory.BOOLEAN) is True
        assert coerce_value("11", FieldCategory.INTEGER) == 11
        assert coerce_value("1.25", FieldCategory.FLOAT) == Decimal("1.25")
        assert coerce_value("2025-06-01", FieldCategory.DATE) == date(2025, 6, 1)


class TestCoercionProperties:
    @given(st.integers(min_value=-(10**12), max_value=10**12))
    def test_integer_text_round_trips(self, n):
        assert coerce_integer(str(n)) == n

    @given(st.decimals(allow_nan=False, allow_infinity=False, places=2, min_value=-(10**9), max_value=10**9))
    def test_two_place_amounts_are_exact(self, amount):
        assert coerce_float(str(amount)) == amount

    @given(st.text(max_size=30))
    @settings(max_examples=200)
    def test_arbitrary_text_never_raises(self, raw):
        assert isinstance(coerce_boolean(raw), bool)
        assert coerce_boolean(raw) == (raw.strip().lower() in TRUE_TOKENS)
        parse_decimal(raw)
        coerce_date(raw)
        coerce_string(raw)
