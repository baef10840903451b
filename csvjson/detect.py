"""
Structure-based delimiter detection.

Each candidate delimiter tokenizes the head of the sample; the one whose
rows line up best with the header width wins.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from .coerce import trim
from .rules import CANDIDATE_DELIMITERS, DEFAULT_DELIMITER, DETECT_SAMPLE_LINES
from .tokenizer import Row, tokenize

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r?\n")


def _head(sample: str, lines: int = DETECT_SAMPLE_LINES) -> str:
    return "\n".join(_LINE_BREAK.split(sample)[:lines])


def score_rows(rows: List[Row]) -> Optional[float]:
    """
    Score one candidate's tokenization.

    Returns None when the candidate cannot be judged: fewer than two rows
    (no header + data) or a header of a single column, which looks the
    same as a missing delimiter.
    """
    if len(rows) < 2:
        return None

    lens = [len(r) for r in rows]
    header_cols = lens[0]
    if header_cols <= 1:
        return None

    non_empty = [r for r in rows[1:] if any(trim(cell) for cell in r)]
    matching = sum(1 for r in non_empty if len(r) == header_cols)
    unique_lens = len(set(lens))

    mean = sum(lens) / len(lens)
    variance = sum((x - mean) ** 2 for x in lens) / len(lens)

    return matching * 100 - variance * 10 - (unique_lens - 1) * 5


def detect_delimiter(sample: str) -> str:
    text = _head(sample)

    best = DEFAULT_DELIMITER
    best_score = float("-inf")

    for candidate in CANDIDATE_DELIMITERS:
        score = score_rows(tokenize(text, candidate))
        logger.debug("delimiter candidate %r scored %s", candidate, score)
        if score is None:
            continue
        # strictly greater: ties keep the earlier candidate
        if score > best_score:
            best_score = score
            best = candidate

    return best
