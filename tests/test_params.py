"""
Tests for query-string coercion and entity keys
"""

import pytest

from congress_api.lib.keys import ByCode, ByNumber, ByOpaqueId, parse_congress_key, parse_document_key
from congress_api.lib.params import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    Page,
    is_wildcard,
    parse_direction,
    parse_flag,
    to_int,
)


class TestPage:
    def test_defaults(self):
        assert Page.from_query() == Page(limit=DEFAULT_LIMIT, offset=0)

    def test_limit_is_clamped_to_max(self):
        assert Page.from_query("500").limit == MAX_LIMIT
        assert Page.from_query("500") == Page.from_query("100")

    def test_limit_is_at_least_one(self):
        assert Page.from_query("0").limit == 1
        assert Page.from_query("-3").limit == 1

    def test_negative_offset_becomes_zero(self):
        assert Page.from_query(None, "-10").offset == 0

    def test_offset_has_no_upper_bound(self):
        assert Page.from_query("10", "100000").offset == 100000

    def test_blank_values_use_defaults(self):
        assert Page.from_query(" ", "") == Page()

    def test_non_numeric_limit_names_the_parameter(self):
        with pytest.raises(ValueError, match="limit"):
            Page.from_query("ten")


class TestCoercion:
    def test_to_int(self):
        assert to_int(" 2022 ", "year") == 2022
        assert to_int(19, "congress") == 19

    def test_to_int_rejects_floats_as_text(self):
        with pytest.raises(ValueError, match="year"):
            to_int("2022.5", "year")

    def test_to_int_rejects_booleans(self):
        with pytest.raises(ValueError):
            to_int(True, "limit")

    def test_parse_direction(self):
        assert parse_direction("asc") == "ASC"
        assert parse_direction("Desc", "ASC") == "DESC"
        assert parse_direction("up", "ASC") == "ASC"
        assert parse_direction(None) == "DESC"

    def test_wildcards(self):
        for value in (None, "", "all", "ANY", " all "):
            assert is_wildcard(value)
        assert not is_wildcard("19")

    def test_parse_flag(self):
        assert parse_flag("true")
        assert parse_flag("1")
        assert not parse_flag("false")
        assert not parse_flag(None)


class TestKeys:
    def test_numeric_congress_key(self):
        assert parse_congress_key("19") == ByNumber(19)

    def test_opaque_congress_key(self):
        assert parse_congress_key("01H8ZXR5KB") == ByOpaqueId("01H8ZXR5KB")

    def test_house_bill_code(self):
        assert parse_document_key("HB00001") == ByCode(code="HB00001", subtype="HB", number=1)

    def test_senate_bill_code_with_separator(self):
        assert parse_document_key("sbn-0042") == ByCode(code="SBN-0042", subtype="SB", number=42)

    def test_code_without_digits(self):
        assert parse_document_key("HBN").number is None

    def test_other_document_keys_are_opaque(self):
        assert parse_document_key("bill-19-hb-1") == ByOpaqueId("bill-19-hb-1")
