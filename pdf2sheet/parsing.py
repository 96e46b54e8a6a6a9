"""Positional row heuristic for OCR text.

Each OCR line becomes one row: tokens split on runs of whitespace or commas
are mapped by index to name, address, time in and time out. Nothing is
validated; blank lines give blank rows and short lines are zero-filled.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Sequence

logger = logging.getLogger(__name__)

TOKEN_SPLIT_RE = re.compile(r"[\s,]+")
FIELD_COUNT = 4


@dataclass(frozen=True)
class ExtractedRow:
    name: str = ""
    address: str = ""
    time_in: str = ""
    time_out: str = ""

    def display(self) -> str:
        return f"{self.name}, {self.address}, {self.time_in}, {self.time_out}"


def split_line(line: str) -> List[str]:
    # a leading or trailing separator yields an empty token at that end
    return TOKEN_SPLIT_RE.split(line)


def row_from_tokens(tokens: Sequence[str]) -> ExtractedRow:
    padded = [(t or "") for t in list(tokens)[:FIELD_COUNT]]
    padded += [""] * (FIELD_COUNT - len(padded))
    return ExtractedRow(*padded)


def parse_rows(raw_text: str) -> List[ExtractedRow]:
    """One row per ``\\n``-separated segment of ``raw_text``, in order."""
    rows: List[ExtractedRow] = []
    for line in raw_text.split("\n"):
        tokens = split_line(line)
        logger.debug("Columns after split: %s", tokens)
        rows.append(row_from_tokens(tokens))
    return rows
