"""
Scalar type inference for plain CSV text.

Only strings are touched, and only when the trimmed text is unambiguously
null, a boolean, or a finite decimal number. Everything else, including the
empty string, is returned exactly as given.
"""

from __future__ import annotations

import math
import re
from typing import Any

from .classify import Value
from .coerce import normalize_number, trim

_NUMBER = re.compile(r"-?[0-9]+(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")

_LITERALS = {"null": None, "true": True, "false": False}


def infer_scalar(value: Any) -> Value:
    if not isinstance(value, str):
        return value
    t = trim(value)
    if not t:
        return value

    lower = t.lower()
    if lower in _LITERALS:
        return _LITERALS[lower]

    if _NUMBER.fullmatch(t):
        n = float(t)
        if math.isfinite(n):
            return normalize_number(n)

    return value


def infer(value: Any) -> Value:
    if isinstance(value, list):
        return [infer(x) for x in value]
    if isinstance(value, dict):
        return {k: infer(v) for k, v in value.items()}
    return infer_scalar(value)
