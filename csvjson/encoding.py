"""
Upload decoding.

Uploaded files arrive as bytes in whatever encoding the exporting tool
used. Rules:
- Detect encoding best-effort via charset-normalizer.
- A UTF-8 BOM is stripped, never carried into the first header name.
- If decoding with the best guess fails, retry UTF-8, then decode with
  replacement characters so conversion can still run, and report it.
"""

from __future__ import annotations

import logging
from typing import Tuple

from charset_normalizer import from_bytes

from .models import EncodingReport

logger = logging.getLogger(__name__)

UTF8_BOM = b"\xef\xbb\xbf"


def _is_utf8(name: str) -> bool:
    return name.lower().replace("-", "_") in ("utf_8", "utf8")


def decode_upload(raw: bytes) -> Tuple[str, EncodingReport]:
    detected = None
    match = from_bytes(raw).best()
    if match is not None:
        detected = match.encoding

    decode_used = detected or "utf-8"
    if raw.startswith(UTF8_BOM) and _is_utf8(decode_used):
        decode_used = "utf-8-sig"

    decode_fallback = False
    try:
        text = raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        decode_fallback = True
        try:
            text = raw.decode("utf-8-sig")
            decode_used = "utf-8-sig"
        except UnicodeDecodeError:
            text = raw.decode("utf-8-sig", errors="replace")
            decode_used = "utf-8-sig"
        logger.warning("upload did not decode as %s, fell back to %s", detected, decode_used)

    return text, EncodingReport(detected=detected, decode_used=decode_used, decode_fallback=decode_fallback)
