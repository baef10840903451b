"""
Text → records entry points.

``convert_text_to_records`` is the plain pipeline call. ``convert_text`` is
the top-level orchestrator used by the API: it never raises, and reports
any unexpected failure as an unsuccessful outcome with a status message.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .convert import Record, convert_rows
from .detect import detect_delimiter
from .models import ConvertOptions
from .rules import DETECT_SAMPLE_CHARS
from .serialize import render_json, sha256_hex
from .tokenizer import tokenize

logger = logging.getLogger(__name__)

NO_ROWS_STATUS = "No rows detected. Make sure there's a header row."


@dataclass
class ConversionOutcome:
    ok: bool
    status: str
    delimiter: Optional[str] = None
    records: List[Record] = field(default_factory=list)
    rows: int = 0
    columns: int = 0
    content: Optional[str] = None
    sha256: Optional[str] = None

    @property
    def dropped_rows(self) -> int:
        return max(self.rows - 1 - len(self.records), 0)


def describe_delimiter(delimiter: str) -> str:
    return delimiter.replace("\t", "\\t")


def resolve_delimiter(text: str, options: ConvertOptions) -> str:
    if options.auto_detect:
        return detect_delimiter(text[:DETECT_SAMPLE_CHARS])
    return options.delimiter


def convert_text_to_records(text: str, options: ConvertOptions) -> List[Record]:
    rows = tokenize(text, resolve_delimiter(text, options))
    return convert_rows(rows, options)


def convert_text(text: str, options: ConvertOptions, indent: int = 2) -> ConversionOutcome:
    # rendering stays inside the try: converted values can still fail to encode
    try:
        delimiter = resolve_delimiter(text, options)
        rows = tokenize(text, delimiter)
        records = convert_rows(rows, options)
        content = render_json(records, indent)
        digest = sha256_hex(content)
    except Exception as exc:
        logger.exception("conversion failed")
        return ConversionOutcome(ok=False, status=f"Error: {exc}")

    if not rows:
        status = NO_ROWS_STATUS
    else:
        status = f'Parsed {len(records)} row(s) with delimiter "{describe_delimiter(delimiter)}".'
        logger.info(
            "converted %d row(s) into %d record(s) with delimiter %r",
            len(rows), len(records), delimiter,
        )

    return ConversionOutcome(
        ok=True,
        status=status,
        delimiter=delimiter,
        records=records,
        rows=len(rows),
        columns=len(rows[0]) if rows else 0,
        content=content,
        sha256=digest,
    )
