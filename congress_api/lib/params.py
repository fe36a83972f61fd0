"""
Query-string coercion shared by the handlers
"""

from dataclasses import dataclass
from typing import Any, Optional

DEFAULT_LIMIT = 20
MAX_LIMIT = 100

WILDCARDS = ("all", "any")


def to_int(value: Any, name: str) -> int:
    """Integer for binding as a graph Integer; raises ValueError naming the parameter"""
    if isinstance(value, bool):
        raise ValueError(f"Invalid integer for '{name}': {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValueError(f"Invalid integer for '{name}': {value!r}") from None


def is_set(value: Optional[str]) -> bool:
    return value is not None and str(value).strip() != ""


def is_wildcard(value: Optional[str]) -> bool:
    """Blank, 'all' and 'any' all mean "no filter" on the search endpoints"""
    return not is_set(value) or str(value).strip().lower() in WILDCARDS


def parse_direction(value: Optional[str], default: str = "DESC") -> str:
    if is_set(value) and value.strip().lower() in ("asc", "desc"):
        return value.strip().upper()
    return default


def parse_flag(value: Optional[str]) -> bool:
    return is_set(value) and value.strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Page:
    limit: int = DEFAULT_LIMIT
    offset: int = 0

    @classmethod
    def from_query(cls, limit: Optional[str] = None, offset: Optional[str] = None) -> "Page":
        """Default limit 20 clamped to [1, 100]; offset defaults to 0 and has no upper bound"""
        parsed_limit = to_int(limit, "limit") if is_set(limit) else DEFAULT_LIMIT
        parsed_offset = to_int(offset, "offset") if is_set(offset) else 0
        return cls(limit=max(1, min(parsed_limit, MAX_LIMIT)), offset=max(0, parsed_offset))
