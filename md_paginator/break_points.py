"""Locate structurally safe split points in page content.

The finder walks classified lines, accumulating their weights, and stops at
the first line that pushes the running total past ``line_limit *
threshold_ratio``. From there it picks a break index by priority:

1. Inside a table: large tables, or tables that dominate the page, are split
   between body rows and the header is repeated on the continuation page.
   Small tables move to the next page whole.
2. Inside a fenced code block: the whole block moves.
3. Otherwise a blank line or heading within the last few lines is preferred.
4. Failing all of the above, the current line starts the overflow.

The function is total. ``None`` means there is nothing safe to move.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Sequence

from md_paginator.constants import BREAK_THRESHOLDS
from md_paginator.line_classifier import (
    classify,
    is_blank,
    is_code_fence,
    is_heading,
    is_table_row,
    is_table_separator,
)
from md_paginator.models import BreakPoint, BreakRule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Spans:
    """Open table/code spans seen so far while walking lines."""

    table_start: int | None = None
    table_rows: int = 0
    code_start: int | None = None
    closing_fence: bool = False
    code_ranges: tuple[tuple[int, int], ...] = ()

    @property
    def in_table(self) -> bool:
        return self.table_start is not None

    @property
    def in_code(self) -> bool:
        return self.code_start is not None


def _advance(spans: _Spans, index: int, line: str) -> _Spans:
    """Return span state after consuming ``line`` at ``index``.

    A closing fence still belongs to its block, so the block is only closed
    when the following line is consumed.
    """
    if spans.closing_fence:
        spans = replace(spans, code_start=None, closing_fence=False)

    if spans.in_code:
        if is_code_fence(line):
            start = spans.code_start if spans.code_start is not None else index
            return replace(
                spans,
                closing_fence=True,
                code_ranges=(*spans.code_ranges, (start, index)),
            )
        return spans

    if is_code_fence(line):
        return replace(spans, table_start=None, table_rows=0, code_start=index)

    if is_table_row(line):
        if spans.in_table:
            return replace(spans, table_rows=spans.table_rows + 1)
        return replace(spans, table_start=index, table_rows=1)

    return replace(spans, table_start=None, table_rows=0)


def _header_rows(lines: Sequence[str], table_start: int) -> tuple[str, ...]:
    """Return the header row plus the separator row when one follows it."""
    following = table_start + 1
    if following < len(lines) and is_table_separator(lines[following]):
        return lines[table_start], lines[following]
    return (lines[table_start],)


def _table_break(
    lines: Sequence[str], index: int, spans: _Spans
) -> tuple[int, BreakRule, tuple[str, ...]]:
    start = spans.table_start if spans.table_start is not None else index
    dominates = (
        spans.table_rows > BREAK_THRESHOLDS["table_rows"]
        or start < BREAK_THRESHOLDS["table_near_top"]
    )
    if dominates:
        header = _header_rows(lines, start)
        # keep at least one body row so the continuation page is strictly shorter
        first_body = start + len(header)
        candidate = next(
            (
                j
                for j in range(index, first_body, -1)
                if is_table_row(lines[j]) and not is_table_separator(lines[j])
            ),
            None,
        )
        if candidate is not None:
            return candidate, "table_inside", header
    return start, "table_before", ()


def _inside_code(index: int, ranges: Sequence[tuple[int, int]]) -> bool:
    return any(start < index <= end for start, end in ranges)


def _clean_break(lines: Sequence[str], index: int, spans: _Spans) -> int | None:
    window = BREAK_THRESHOLDS["clean_search"]
    return next(
        (
            j
            for j in range(index, max(0, index - window), -1)
            if (is_blank(lines[j]) or is_heading(lines[j]))
            and not _inside_code(j, spans.code_ranges)
        ),
        None,
    )


def _choose(
    lines: Sequence[str], index: int, spans: _Spans
) -> tuple[int, BreakRule, tuple[str, ...]]:
    if spans.in_table:
        return _table_break(lines, index, spans)
    if spans.in_code and spans.code_start is not None:
        return spans.code_start, "code_block", ()
    clean = _clean_break(lines, index, spans)
    if clean is not None:
        return clean, "clean_boundary", ()
    return index, "forced", ()


def _partition(
    lines: Sequence[str], index: int, rule: BreakRule, carried: Sequence[str]
) -> BreakPoint | None:
    if index <= 0:
        return None
    keep = "\n".join(lines[:index]).rstrip()
    overflow = "\n".join((*carried, *lines[index:])).lstrip()
    if not overflow.strip() or not keep.strip():
        return None
    return BreakPoint(keep_content=keep, overflow_content=overflow, index=index, rule=rule)


def find_break_point(
    content: str,
    line_limit: float,
    chars_per_line: int,
    threshold_ratio: float,
) -> BreakPoint | None:
    """Return where ``content`` should split, or ``None`` if it should not.

    ``threshold_ratio`` is the share of ``line_limit`` that may be consumed
    before a break is searched for: callers pass a lower ratio for a purely
    heuristic limit and a higher one for a calibrated limit.
    """
    lines = content.split("\n")
    threshold = line_limit * threshold_ratio
    spans = _Spans()
    total = 0.0
    for index, line in enumerate(lines):
        spans = _advance(spans, index, line)
        total += classify(line, chars_per_line)
        if total > threshold:
            break_index, rule, carried = _choose(lines, index, spans)
            logger.debug(
                "break at line %d of %d (%s, total=%.1f, threshold=%.1f)",
                break_index,
                len(lines),
                rule,
                total,
                threshold,
            )
            return _partition(lines, break_index, rule, carried)
    return None


__all__ = ["find_break_point"]
