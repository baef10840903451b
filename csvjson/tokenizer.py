"""
Delimited-text tokenizer.

Quoting follows RFC 4180 loosely: a quote opens and closes a quoted span,
a doubled quote inside one is a literal quote, CR is dropped so CRLF reads
like LF. Malformed quoting never raises; an unterminated span simply runs
to the end of the input.
"""

from __future__ import annotations

from typing import List

from .rules import DEFAULT_DELIMITER, QUOTE

Row = List[str]


def tokenize(text: str, delimiter: str = DEFAULT_DELIMITER) -> List[Row]:
    rows: List[Row] = []
    row: Row = []
    field: List[str] = []
    in_quotes = False

    i = 0
    n = len(text)
    while i < n:
        char = text[i]

        if in_quotes:
            if char == QUOTE and i + 1 < n and text[i + 1] == QUOTE:
                field.append(QUOTE)
                i += 1
            elif char == QUOTE:
                in_quotes = False
            else:
                field.append(char)
        elif char == QUOTE:
            in_quotes = True
        elif char == delimiter:
            row.append("".join(field))
            field = []
        elif char == "\n":
            row.append("".join(field))
            rows.append(row)
            row = []
            field = []
        elif char != "\r":
            field.append(char)

        i += 1

    # flush trailing content, but a final newline must not add an empty row
    if field or in_quotes or row:
        row.append("".join(field))
        rows.append(row)

    return rows
