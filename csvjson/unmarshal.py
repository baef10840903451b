"""
DynamoDB AttributeValue unmarshalling.

Turns ``{"M": {"zip": {"N": "32301"}}}`` into ``{"zip": 32301}``. Exports
do not always wrap a top-level item in ``M``, so an object whose every
value is an AttributeValue is decoded as an implicit map too.

B and BS payloads are opaque and returned untouched.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping

from .classify import (
    AttributeTag,
    Value,
    attribute_tag,
    is_attribute_value,
    is_map_of_attribute_values,
)
from .coerce import is_truthy, to_number, to_text


def _decode_s(payload: Any) -> Value:
    return to_text(payload)


def _decode_n(payload: Any) -> Value:
    return to_number(payload)


def _decode_bool(payload: Any) -> Value:
    return is_truthy(payload)


def _decode_null(payload: Any) -> Value:
    return None


def _decode_ss(payload: Any) -> Value:
    return [to_text(x) for x in payload] if isinstance(payload, list) else []


def _decode_ns(payload: Any) -> Value:
    return [to_number(x) for x in payload] if isinstance(payload, list) else []


def _decode_l(payload: Any) -> Value:
    return [unmarshal(x) for x in payload] if isinstance(payload, list) else []


def _decode_m(payload: Any) -> Value:
    if isinstance(payload, dict):
        items = payload.items()
    elif isinstance(payload, (list, str)):
        # a list or string payload is keyed by position
        items = ((str(i), v) for i, v in enumerate(payload))
    else:
        return {}
    return {k: unmarshal(v) for k, v in items}


def _passthrough(payload: Any) -> Value:
    return payload


DECODERS: Mapping[AttributeTag, Callable[[Any], Value]] = MappingProxyType({
    AttributeTag.S: _decode_s,
    AttributeTag.N: _decode_n,
    AttributeTag.BOOL: _decode_bool,
    AttributeTag.NULL: _decode_null,
    AttributeTag.SS: _decode_ss,
    AttributeTag.NS: _decode_ns,
    AttributeTag.L: _decode_l,
    AttributeTag.M: _decode_m,
    AttributeTag.B: _passthrough,
    AttributeTag.BS: _passthrough,
})

def unmarshal_attribute_value(av: Dict[str, Any]) -> Value:
    tag = attribute_tag(av)
    return DECODERS[tag](av[tag.value])


def unmarshal(value: Any) -> Value:
    if is_attribute_value(value):
        return unmarshal_attribute_value(value)

    if isinstance(value, list):
        return [unmarshal(x) for x in value]

    if isinstance(value, dict):
        # an "M" key next to other keys still marks the object as a wrapped map
        if is_truthy(value.get(AttributeTag.M.value)):
            return unmarshal_attribute_value({AttributeTag.M.value: value[AttributeTag.M.value]})
        if is_map_of_attribute_values(value):
            return {k: unmarshal_attribute_value(v) for k, v in value.items()}
        return {k: unmarshal(v) for k, v in value.items()}

    return value
