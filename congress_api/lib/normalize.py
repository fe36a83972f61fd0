"""
Row normalization at the graph boundary.

Turns whatever the driver hands back (nodes, relationships, temporal values, split 64-bit
integers coming from JSON-encoded payloads) into plain Python values that serialize as JSON.
"""

from collections.abc import Mapping
from typing import Any, Dict

from neo4j.graph import Node, Relationship

_WORD = 1 << 32


def is_split_integer(value: Any) -> bool:
    """True for a two-word integer wrapper: exactly the keys ``low`` and ``high``, both ints."""
    if not isinstance(value, Mapping) or set(value.keys()) != {"low", "high"}:
        return False
    low, high = value["low"], value["high"]
    return isinstance(low, int) and isinstance(high, int) and not isinstance(low, bool) and not isinstance(high, bool)


def join_split_integer(value: Mapping) -> int:
    # words are signed 32-bit; the low word is reinterpreted as unsigned
    return value["high"] * _WORD + (value["low"] % _WORD)


def normalize_value(value: Any) -> Any:
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, (Node, Relationship)):
        return {key: normalize_value(item) for key, item in value.items()}
    if hasattr(value, "iso_format"):
        return value.iso_format()
    if is_split_integer(value):
        return join_split_integer(value)
    if isinstance(value, Mapping):
        return {key: normalize_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize_value(item) for item in value]
    return value


def normalize_row(row: Mapping) -> Dict[str, Any]:
    """Normalize one result row (column alias -> value). Pure and idempotent."""
    return {key: normalize_value(value) for key, value in row.items() if isinstance(key, str)}
