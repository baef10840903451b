"""
Rows → records.

Row 0 names the columns; every later row with any non-blank cell becomes
one record. Per cell, in order: embedded JSON parsing, AttributeValue
unmarshalling, scalar type inference, each switched by ConvertOptions.

Duplicate header names are allowed. Both columns are written under the
same key, so the later column's value wins while the key keeps the
position of its first appearance.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from .classify import Value, looks_like_embedded_structure
from .coerce import trim
from .infer import infer
from .models import ConvertOptions
from .rules import BLANK_HEADER_PREFIX
from .unmarshal import unmarshal

logger = logging.getLogger(__name__)

Record = Dict[str, Value]


@dataclass(frozen=True)
class EmbeddedParse:
    value: Value
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def parse_embedded(text: str) -> EmbeddedParse:
    try:
        return EmbeddedParse(json.loads(text, parse_constant=_reject_constant))
    except (ValueError, RecursionError) as exc:
        return EmbeddedParse(text, exc)


def header_names(header: Sequence[str]) -> List[str]:
    names = []
    for idx, cell in enumerate(header):
        name = trim(cell or "")
        names.append(name or f"{BLANK_HEADER_PREFIX}{idx + 1}")
    return names


def is_blank_row(row: Sequence[str]) -> bool:
    return not any(trim(cell or "") for cell in row)


def convert_cell(raw: str, options: ConvertOptions) -> Value:
    value: Value = raw

    if options.parse_embedded and looks_like_embedded_structure(raw):
        parsed = parse_embedded(raw)
        if parsed.ok:
            value = parsed.value
        else:
            # malformed embedded text stays a plain string
            logger.debug("kept unparsable embedded value %.40r: %s", raw, parsed.error)

    if options.unmarshal and isinstance(value, (dict, list)):
        value = unmarshal(value)

    if options.infer:
        value = infer(value)

    return value


def convert_row(row: Sequence[str], names: Sequence[str], options: ConvertOptions) -> Record:
    record: Record = {}
    for idx, name in enumerate(names):
        raw = row[idx] if idx < len(row) else ""
        record[name] = convert_cell(raw, options)
    return record


def convert_rows(rows: Sequence[Sequence[str]], options: ConvertOptions) -> List[Record]:
    if not rows:
        return []

    names = header_names(rows[0])
    return [convert_row(row, names, options) for row in rows[1:] if not is_blank_row(row)]
