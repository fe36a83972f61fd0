"""
Lookup keys.

Path segments like ``20``, ``01H8ZXR5KB...`` or ``HB00001`` are parsed exactly once, at the
handler, into one of the key types below. Query construction only ever sees the typed key.
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

_NUMBER = re.compile(r"^\d+$")
_BILL_CODE = re.compile(r"^(HBN|SBN|HB|SB)", re.IGNORECASE)
_DIGITS = re.compile(r"\d+")


@dataclass(frozen=True)
class ByNumber:
    value: int


@dataclass(frozen=True)
class ByOpaqueId:
    value: str


@dataclass(frozen=True)
class ByCode:
    """Human-readable bill code such as ``HB00001`` or ``SBN-0042``"""

    code: str
    subtype: str
    number: Optional[int] = None


CongressKey = Union[ByNumber, ByOpaqueId]
DocumentKey = Union[ByCode, ByOpaqueId]


def parse_congress_key(raw: str) -> CongressKey:
    raw = raw.strip()
    if _NUMBER.match(raw):
        return ByNumber(int(raw))
    return ByOpaqueId(raw)


def parse_document_key(raw: str) -> DocumentKey:
    raw = raw.strip()
    prefix = _BILL_CODE.match(raw)
    if not prefix:
        return ByOpaqueId(raw)

    digits = _DIGITS.search(raw)
    return ByCode(
        code=raw.upper(),
        subtype=prefix.group(1).upper()[:2],
        number=int(digits.group(0)) if digits else None,
    )
