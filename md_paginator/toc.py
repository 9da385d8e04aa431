"""Synthesize a table-of-contents page from document headings.

The ToC page is inserted right after the cover page, so a heading on the
page at index ``i`` ends up on printed page ``i + 2`` (the cover is page 1,
the ToC itself page 2).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

from md_paginator.constants import TOC_INDENT, TOC_LINE_WIDTH, TOC_MIN_DOTS
from md_paginator.errors import TableOfContentsExists
from md_paginator.line_classifier import heading_level, heading_title
from md_paginator.models import Page, PageSettings

TOC_TITLE = "# **Contents**"
# a thematic break that cannot collide with the page separator
TOC_RULE = "***"
TOC_PLACEHOLDER = (
    "*No headings found in the document.*",
    "*Add headings using # for H1, ## for H2, ### for H3, etc.*",
)
_PAGE_OFFSET = 2


@dataclass(frozen=True)
class TocEntry:
    title: str
    page_number: int
    level: int


def _page_headings(page_index: int, page: Page) -> Iterator[TocEntry]:
    # the first line is the page's banner and never listed
    for line in page.content.split("\n")[1:]:
        level = heading_level(line)
        if level is not None:
            yield TocEntry(heading_title(line), page_index + _PAGE_OFFSET, level)


def collect_headings(pages: Sequence[Page]) -> list[TocEntry]:
    return [
        entry
        for index, page in enumerate(pages)
        if not page.is_table_of_contents
        for entry in _page_headings(index, page)
    ]


def format_toc_line(title: str, page_number: int, level: int) -> str:
    """Render one entry with a dot leader padded to the ToC line width."""
    indent = " " * ((level - 1) * TOC_INDENT)
    page = str(page_number)
    available = TOC_LINE_WIDTH - len(indent + title) - len(page) - 2
    dots = "." * max(TOC_MIN_DOTS, available)
    if level == 1:
        return f"**{title}** {dots} {page}"
    return f"{indent}{title} {dots} {page}"


def render_toc(entries: Iterable[TocEntry]) -> str:
    lines = [format_toc_line(e.title, e.page_number, e.level) for e in entries]
    body = lines or list(TOC_PLACEHOLDER)
    return "".join(
        (
            f"{TOC_TITLE}\n\n",
            f"{TOC_RULE}\n\n",
            *(f"{line}\n\n" for line in body),
            f"{TOC_RULE}\n",
        )
    )


def has_table_of_contents(pages: Iterable[Page]) -> bool:
    return any(page.is_table_of_contents for page in pages)


def build_toc(pages: Sequence[Page], settings: PageSettings | None = None) -> Page:
    """Return a new ToC page listing every heading in ``pages``.

    Raises ``TableOfContentsExists`` when ``pages`` already holds one.
    """
    if has_table_of_contents(pages):
        raise TableOfContentsExists()
    return Page(
        content=render_toc(collect_headings(pages)),
        settings=settings or PageSettings(),
        is_table_of_contents=True,
    )


def insert_toc(pages: Sequence[Page], settings: PageSettings | None = None) -> tuple[Page, ...]:
    """Return ``pages`` with a freshly built ToC placed after the cover page."""
    toc = build_toc(pages, settings)
    return (*pages[:1], toc, *pages[1:])


__all__ = [
    "TocEntry",
    "build_toc",
    "collect_headings",
    "format_toc_line",
    "has_table_of_contents",
    "insert_toc",
    "render_toc",
]
