"""Resolve every overflowing page of a document in one pass.

Bulk repagination never has measured heights, so every page is judged by the
heuristic capacity and split at the conservative threshold. A split inserts
the overflow right after its source, and that new page is examined next, so
one long page can cascade into several.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, Sequence

from md_paginator.break_points import find_break_point
from md_paginator.capacity import chars_per_line, estimate_capacity_lines, estimate_content_extent
from md_paginator.constants import HEURISTIC_THRESHOLD
from md_paginator.models import BreakPoint, Page
from md_paginator.page_splitter import insert_split

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepaginationResult:
    """Pages after repagination plus what happened along the way.

    Unpacks as ``(pages, split_count)``.
    """

    pages: tuple[Page, ...]
    split_count: int = 0
    unsplittable: tuple[str, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[object]:
        return iter((self.pages, self.split_count))


def page_overflows(page: Page) -> bool:
    """Heuristic overflow test used when no rendered height is known."""
    settings = page.settings
    extent = estimate_content_extent(page.content, chars_per_line(settings))
    return extent > estimate_capacity_lines(settings)


def _try_split(page: Page) -> BreakPoint | None:
    settings = page.settings
    return find_break_point(
        page.content,
        estimate_capacity_lines(settings),
        chars_per_line(settings),
        HEURISTIC_THRESHOLD,
    )


def process_overflows(pages: Sequence[Page]) -> RepaginationResult:
    """Split overflowing pages until none overflow or none can be split.

    Table-of-contents pages are left alone. Pages that overflow but have no
    safe break point are kept as they are and reported in ``unsplittable``.
    """
    current = tuple(pages)
    splits = 0
    stuck: list[str] = []
    index = 0
    while index < len(current):
        page = current[index]
        if page.is_table_of_contents or not page_overflows(page):
            index += 1
            continue
        break_point = _try_split(page)
        if break_point is None:
            logger.debug("page %d overflows but has no safe break point", index + 1)
            stuck.append(page.id)
            index += 1
            continue
        current = insert_split(current, index, break_point)
        splits += 1
        logger.debug(
            "split page %d at line %d (%s)", index + 1, break_point.index, break_point.rule
        )
        # the overflow page is evaluated on the next iteration
        index += 1

    if splits or stuck:
        logger.info(
            "repaginate: %d split(s), %d unsplittable page(s), %d page(s) total",
            splits,
            len(stuck),
            len(current),
        )
    return RepaginationResult(pages=current, split_count=splits, unsplittable=tuple(stuck))


__all__ = ["RepaginationResult", "page_overflows", "process_overflows"]
