"""Vertical-space weights for single lines of lightweight markup.

Every line gets a weight in units of one rendered text row. Weights are
approximate by nature: no font metrics are consulted, only the syntactic
role of the line and its character count.
"""

from __future__ import annotations

import re
from enum import Enum
from math import ceil

from md_paginator.constants import CHARS_PER_LINE, LINE_WEIGHTS

CODE_FENCE = "```"

_HEADING_MARKERS = ("####", "###", "##", "#")
_TABLE_SEPARATOR = re.compile(r"^\|(\s*:?-+:?\s*\|)+\s*$")


class LineKind(str, Enum):
    BLANK = "blank"
    HEADING = "heading"
    TABLE_ROW = "table_row"
    CODE_FENCE = "code_fence"
    TEXT = "text"


def is_blank(line: str) -> bool:
    return not line.strip()


def is_heading(line: str) -> bool:
    return line.startswith("#")


def is_table_row(line: str) -> bool:
    return line.startswith("|")


def is_code_fence(line: str) -> bool:
    return line.startswith(CODE_FENCE)


def is_table_separator(line: str) -> bool:
    """Return True for header/body separator rows such as ``|---|:--:|``."""
    return bool(_TABLE_SEPARATOR.match(line.strip()))


def line_kind(line: str) -> LineKind:
    """Return the syntactic role of ``line``; checks run in weight order."""
    if is_blank(line):
        return LineKind.BLANK
    if is_heading(line):
        return LineKind.HEADING
    if is_table_row(line):
        return LineKind.TABLE_ROW
    if is_code_fence(line):
        return LineKind.CODE_FENCE
    return LineKind.TEXT


def wrap(line: str, chars_per_line: int = CHARS_PER_LINE["portrait"]) -> int:
    """Number of visual rows a regular line occupies when wrapped."""
    return max(1, ceil(len(line) / chars_per_line))


def classify(line: str, chars_per_line: int = CHARS_PER_LINE["portrait"]) -> float:
    """Return the vertical-space weight of ``line``."""
    kind = line_kind(line)
    if kind is LineKind.TEXT:
        return float(wrap(line, chars_per_line))
    return LINE_WEIGHTS[kind.value]


def heading_level(line: str) -> int | None:
    """Return 1-4 for ``#``..``####`` headings, most specific marker first.

    The marker has to be followed by a space, so ``#hashtag`` and ``#####``
    headings are not reported.
    """
    stripped = line.strip()
    return next(
        (len(marker) for marker in _HEADING_MARKERS if stripped.startswith(marker + " ")),
        None,
    )


def heading_title(line: str) -> str:
    """Return the heading text with its marker removed."""
    return re.sub(r"^#{1,4}\s+", "", line.strip())


__all__ = [
    "CODE_FENCE",
    "LineKind",
    "classify",
    "heading_level",
    "heading_title",
    "is_blank",
    "is_code_fence",
    "is_heading",
    "is_table_row",
    "is_table_separator",
    "line_kind",
    "wrap",
]
