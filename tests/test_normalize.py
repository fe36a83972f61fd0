"""
Tests for row normalization at the graph boundary
"""

from unittest.mock import Mock

from neo4j.graph import Node, Relationship
from neo4j.time import Date, DateTime

from congress_api.lib.normalize import (
    is_split_integer,
    join_split_integer,
    normalize_row,
    normalize_value,
)


def make_node(properties):
    node = Mock(spec=Node)
    node.items.return_value = list(properties.items())
    return node


class TestSplitIntegers:
    def test_recognises_low_high_pair(self):
        assert is_split_integer({"low": 19, "high": 0})

    def test_rejects_extra_keys(self):
        assert not is_split_integer({"low": 19, "high": 0, "unit": "x"})

    def test_rejects_non_integer_words(self):
        assert not is_split_integer({"low": "19", "high": 0})
        assert not is_split_integer({"low": True, "high": False})

    def test_small_value_is_the_low_word(self):
        assert join_split_integer({"low": 42, "high": 0}) == 42

    def test_large_value_uses_both_words(self):
        assert join_split_integer({"low": 0, "high": 1}) == 2 ** 32

    def test_negative_low_word_is_unsigned(self):
        assert join_split_integer({"low": -1, "high": 0}) == 2 ** 32 - 1


class TestNormalizeValue:
    def test_scalars_pass_through(self):
        for value in ("HB00001", True, None, 3, 2.5):
            assert normalize_value(value) == value

    def test_node_becomes_property_bag(self):
        node = make_node({"id": "person-reyes", "last_name": "Reyes"})
        assert normalize_value(node) == {"id": "person-reyes", "last_name": "Reyes"}

    def test_relationship_becomes_property_bag(self):
        relationship = Mock(spec=Relationship)
        relationship.items.return_value = [("type", "member")]
        assert normalize_value(relationship) == {"type": "member"}

    def test_temporal_values_become_iso_strings(self):
        assert normalize_value(Date(2022, 7, 25)) == "2022-07-25"
        assert normalize_value(DateTime(2022, 7, 25, 10, 30, 0)).startswith("2022-07-25T10:30:00")

    def test_lists_are_normalized_elementwise(self):
        value = [{"low": 1, "high": 0}, make_node({"id": "a"}), "x"]
        assert normalize_value(value) == [1, {"id": "a"}, "x"]

    def test_nested_objects_are_normalized(self):
        value = {"congress": {"low": 19, "high": 0}, "authors": [{"count": {"low": 2, "high": 0}}]}
        assert normalize_value(value) == {"congress": 19, "authors": [{"count": 2}]}


class TestNormalizeRow:
    def test_row_values_are_normalized(self):
        row = {"total": {"low": 45, "high": 0}, "authors": [make_node({"id": "p1"})]}
        assert normalize_row(row) == {"total": 45, "authors": [{"id": "p1"}]}

    def test_idempotent(self):
        row = {"congress": {"low": 19, "high": 0}, "subjects": ["Tax"], "title": None}
        once = normalize_row(row)
        assert normalize_row(once) == once

    def test_does_not_mutate_input(self):
        row = {"congress": {"low": 19, "high": 0}}
        normalize_row(row)
        assert row == {"congress": {"low": 19, "high": 0}}
