"""
Loose scalar coercions used when decoding AttributeValue payloads.

Payloads in the wild are not always the type their tag promises
(``{"N": 5}``, ``{"S": 12}``, ``{"BOOL": "yes"}``), so every coercion here
is total and never raises.
"""

from __future__ import annotations

import json
import math
import re
from decimal import Decimal
from typing import Any, Union

from .rules import MAX_EXACT_INT

Number = Union[int, float]

_NUMERIC_TEXT = re.compile(r"[+-]?(?:Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)")
_RADIX_TEXT = (
    (re.compile(r"0[xX][0-9a-fA-F]+"), 16),
    (re.compile(r"0[oO][0-7]+"), 8),
    (re.compile(r"0[bB][01]+"), 2),
)

# whitespace plus the byte order mark, which str.strip() leaves in place
_EDGE_SPACE = re.compile(r"^[\s\ufeff]+|[\s\ufeff]+\Z")


def trim(text: str) -> str:
    return _EDGE_SPACE.sub("", text)


def normalize_number(n: Number) -> Number:
    """Integral doubles come back as int so 32301 does not render as 32301.0."""
    if isinstance(n, float) and math.isfinite(n) and n.is_integer() and abs(n) < MAX_EXACT_INT:
        return int(n)
    return n


def format_float(f: float) -> str:
    """
    Shortest round-trip digits laid out the way JavaScript prints numbers:
    plain notation for decimal exponents -7 < e < 21, else ``1e-7``/``1.5e+21``.
    """
    sign = "-" if f < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(f))).normalize().as_tuple()
    digits = "".join(map(str, digit_tuple))
    k = len(digits)
    n = exponent + k

    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return sign + "0." + "0" * -n + digits

    e = n - 1
    mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
    return f"{sign}{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"


def to_number(value: Any) -> Number:
    if isinstance(value, bool):
        return int(value)
    if value is None:
        return 0
    if isinstance(value, (int, float)):
        return normalize_number(value)
    if isinstance(value, str):
        text = trim(value)
        if not text:
            return 0
        for pattern, base in _RADIX_TEXT:
            if pattern.fullmatch(text):
                return int(text[2:], base)
        if _NUMERIC_TEXT.fullmatch(text):
            return normalize_number(float(text))
    return math.nan


def to_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        value = normalize_number(value)
        return str(value) if isinstance(value, int) else format_float(value)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def is_truthy(value: Any) -> bool:
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True
