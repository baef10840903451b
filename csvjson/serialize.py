"""
JSON output for converted records.

Record key order is kept as-is. JSON has no NaN or Infinity, so
non-finite numbers (possible from loose ``N`` payloads) are written as null.
"""

from __future__ import annotations

import hashlib
import json
import math
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .models import ConvertOptions, EncodingReport

if TYPE_CHECKING:
    from .pipeline import ConversionOutcome


def sha256_hex(content: str) -> str:
    """Digest of the UTF-8 text; raises UnicodeEncodeError on lone surrogates."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def jsonable(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, list):
        return [jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: jsonable(v) for k, v in value.items()}
    return value


def render_json(records: List[Dict[str, Any]], indent: int = 2) -> str:
    return json.dumps(jsonable(records), indent=indent, ensure_ascii=False, allow_nan=False)


def conversion_payload(
    outcome: ConversionOutcome,
    options: ConvertOptions,
    encoding: Optional[EncodingReport] = None,
) -> Dict[str, Any]:
    """Returns a dict matching the API's ConvertResponse envelope."""
    output = None
    records: List[Dict[str, Any]] = []
    if outcome.ok:
        records = jsonable(outcome.records)
        output = {
            "sha256": outcome.sha256,
            "encoding": "utf-8",
            "content": outcome.content,
        }

    return {
        "ok": outcome.ok,
        "records": records,
        "output": output,
        "report": {
            "status": outcome.status,
            "delimiter": outcome.delimiter,
            "auto_detected": bool(options.auto_detect),
            "summary": {
                "rows": outcome.rows,
                "columns": outcome.columns,
                "records": len(outcome.records),
                "dropped_rows": outcome.dropped_rows,
            },
            "options": options,
            "encoding": encoding,
        },
    }
