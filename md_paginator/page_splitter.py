from __future__ import annotations

from typing import Sequence

from md_paginator.models import BreakPoint, Page


def split_page(page: Page, break_point: BreakPoint) -> tuple[Page, Page]:
    """Return ``page`` truncated to the kept part and a fresh overflow page.

    The overflow page inherits a copy of the source settings and is never a
    table of contents, whatever the source was.
    """
    updated = page.with_content(break_point.keep_content)
    overflow = Page.new(
        break_point.overflow_content,
        page.settings.model_copy(deep=True),
    )
    return updated, overflow


def insert_split(
    pages: Sequence[Page], index: int, break_point: BreakPoint
) -> tuple[Page, ...]:
    """Apply ``break_point`` to ``pages[index]``; the new page follows it."""
    updated, overflow = split_page(pages[index], break_point)
    return (*pages[:index], updated, overflow, *pages[index + 1 :])


__all__ = ["insert_split", "split_page"]
