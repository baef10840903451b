"""
Value classification: embedded JSON text and DynamoDB AttributeValues.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Union

from .coerce import trim
from .rules import ATTRIBUTE_VALUE_TAGS, QUOTE

Value = Union[None, bool, int, float, str, List["Value"], Dict[str, "Value"]]


class AttributeTag(str, Enum):
    S = "S"
    N = "N"
    BOOL = "BOOL"
    NULL = "NULL"
    M = "M"
    L = "L"
    SS = "SS"
    NS = "NS"
    BS = "BS"
    B = "B"


def looks_like_embedded_structure(value: Any) -> bool:
    """True for strings that read like a JSON object/array, possibly double-encoded."""
    if not isinstance(value, str):
        return False
    t = trim(value)
    if not t:
        return False
    if t[0] in "{[":
        return True
    return t[0] == QUOTE and len(t) > 1 and t[1] in "{["


def is_attribute_value(obj: Any) -> bool:
    if not isinstance(obj, dict) or len(obj) != 1:
        return False
    (key,) = obj
    return key in ATTRIBUTE_VALUE_TAGS


def is_map_of_attribute_values(obj: Any) -> bool:
    if not isinstance(obj, dict) or not obj:
        return False
    return all(is_attribute_value(v) for v in obj.values())


def attribute_tag(av: Dict[str, Any]) -> AttributeTag:
    (key,) = av
    return AttributeTag(key)
