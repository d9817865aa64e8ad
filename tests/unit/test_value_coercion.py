"""Tests for clause value coercion."""

import pytest

from compliance_engine.policy import (
    NumericComparable,
    StringSetComparable,
    Unparseable,
    coerce_allowed_values,
    coerce_number,
)
from compliance_engine.policy.value_coercion import coerce_string


class TestCoerceNumber:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (30, 30.0),
            (12.5, 12.5),
            ("45", 45.0),
            ("30 days", 30.0),
            ({"value": 10}, 10.0),
            ({"amount": "1.000,50"}, 1000.5),
            ({"paymentDays": 60}, 60.0),
            ({"noticeDays": "15"}, 15.0),
            ({"notice_days": 90}, 90.0),
        ],
    )
    def test_numeric_shapes(self, value, expected):
        assert coerce_number(value) == NumericComparable(expected)

    def test_field_order(self):
        """'value' wins over the other fields."""
        assert coerce_number({"amount": 5, "value": 7}) == NumericComparable(7.0)

    def test_skips_unparseable_field(self):
        assert coerce_number({"value": "n/a", "amount": 3}) == NumericComparable(3.0)

    @pytest.mark.parametrize("value", [True, False, None, "abc", [1, 2], {"capAmount": 5}])
    def test_unparseable(self, value):
        assert isinstance(coerce_number(value), Unparseable)


class TestCoerceAllowedValues:
    def test_list_is_case_folded(self):
        assert coerce_allowed_values(["IT", " Eu "]) == StringSetComparable(
            frozenset({"it", "eu"})
        )

    def test_single_string(self):
        assert coerce_allowed_values("UK") == StringSetComparable(frozenset({"uk"}))

    def test_none_is_empty_set(self):
        assert coerce_allowed_values(None) == StringSetComparable(frozenset())

    def test_mapping_is_unparseable(self):
        assert isinstance(coerce_allowed_values({"a": 1}), Unparseable)


class TestCoerceString:
    def test_mapping_uses_common_fields(self):
        assert coerce_string({"lawCountry": "x", "jurisdiction": "England"}) == "england"

    def test_blank_is_none(self):
        assert coerce_string("   ") is None

    @pytest.mark.parametrize("value,expected", [(30.0, "30"), (30, "30"), (2.5, "2.5")])
    def test_numbers_render_like_their_literal(self, value, expected):
        assert coerce_string(value) == expected

    def test_integral_float_in_allowed_set(self):
        assert coerce_allowed_values([60.0, "EU"]) == StringSetComparable(frozenset({"60", "eu"}))
