"""Ordered page sequence with the user-facing page operations.

A ``Document`` is immutable: every operation returns a new document, and a
declined operation hands back the previous one untouched alongside the reason
the host should show the user.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Mapping

from md_paginator.constants import DEFAULT_NEW_PAGE, PAGE_SEPARATOR
from md_paginator.errors import DeclinedAction, LastPageDeletion, PageIndexError
from md_paginator.models import BreakPoint, Page, PageSettings
from md_paginator.page_splitter import insert_split
from md_paginator.repaginate import RepaginationResult, process_overflows
from md_paginator.toc import TOC_TITLE, has_table_of_contents, insert_toc

logger = logging.getLogger(__name__)


def split_document(text: str) -> list[str]:
    """Split serialized ``text`` into page contents on the page separator."""
    return text.split(PAGE_SEPARATOR)


def join_document(contents: Iterable[str]) -> str:
    """Inverse of ``split_document``."""
    return PAGE_SEPARATOR.join(contents)


def _is_toc_text(content: str) -> bool:
    return content.lstrip().split("\n", 1)[0].rstrip() == TOC_TITLE


@dataclass(frozen=True)
class ActionResult:
    """Outcome of a document action; ``document`` is unchanged when declined."""

    document: Document
    accepted: bool = True
    reason: str | None = None

    @property
    def declined(self) -> bool:
        return not self.accepted


@dataclass(frozen=True)
class Document:
    pages: tuple[Page, ...]

    def __post_init__(self) -> None:
        if not self.pages:
            raise ValueError("a document needs at least one page")

    @classmethod
    def of(cls, pages: Iterable[Page]) -> Document:
        return cls(tuple(pages))

    @classmethod
    def from_text(cls, text: str, settings: PageSettings | None = None) -> Document:
        """Parse serialized ``text``; a page titled like a ToC is flagged as one."""
        base = settings or PageSettings()
        return cls.of(
            Page(content, base, is_table_of_contents=_is_toc_text(content))
            for content in split_document(text)
        )

    def to_text(self) -> str:
        return join_document(page.content for page in self.pages)

    def __len__(self) -> int:
        return len(self.pages)

    def __iter__(self) -> Iterator[Page]:
        return iter(self.pages)

    def __getitem__(self, index: int) -> Page:
        return self.pages[index]

    @property
    def has_table_of_contents(self) -> bool:
        return has_table_of_contents(self.pages)

    def index_of(self, page_id: str) -> int | None:
        return next((i for i, p in enumerate(self.pages) if p.id == page_id), None)

    def find(self, page_id: str) -> Page | None:
        index = self.index_of(page_id)
        return None if index is None else self.pages[index]

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.pages):
            raise PageIndexError(index, len(self.pages))

    def _replace(self, index: int, page: Page) -> Document:
        self._check_index(index)
        return Document((*self.pages[:index], page, *self.pages[index + 1 :]))

    def _attempt(self, action: str, build: Callable[[], Document]) -> ActionResult:
        try:
            return ActionResult(build())
        except DeclinedAction as exc:
            logger.info("%s declined: %s", action, exc.reason)
            return ActionResult(self, accepted=False, reason=exc.reason)

    def add_page(
        self,
        after_index: int,
        content: str = DEFAULT_NEW_PAGE,
        settings: PageSettings | None = None,
    ) -> ActionResult:
        def build() -> Document:
            self._check_index(after_index)
            page = Page.new(content, settings or PageSettings())
            pos = after_index + 1
            return Document((*self.pages[:pos], page, *self.pages[pos:]))

        return self._attempt("add_page", build)

    def delete_page(self, index: int) -> ActionResult:
        def build() -> Document:
            if len(self.pages) <= 1:
                raise LastPageDeletion()
            self._check_index(index)
            return Document((*self.pages[:index], *self.pages[index + 1 :]))

        return self._attempt("delete_page", build)

    def move_page(self, from_index: int, to_index: int) -> ActionResult:
        def build() -> Document:
            self._check_index(from_index)
            self._check_index(to_index)
            pages = list(self.pages)
            pages.insert(to_index, pages.pop(from_index))
            return Document(tuple(pages))

        return self._attempt("move_page", build)

    def update_content(self, index: int, content: str) -> Document:
        self._check_index(index)
        return self._replace(index, self.pages[index].with_content(content))

    def update_settings(
        self, index: int, settings: PageSettings | Mapping[str, Any]
    ) -> Document:
        """Return a document with validated ``settings`` on page ``index``.

        Raises ``InvalidSettings`` for unknown orientations or bad margins.
        """
        self._check_index(index)
        validated = PageSettings.parse(settings)
        return self._replace(index, self.pages[index].with_settings(validated))

    def apply_split(self, index: int, break_point: BreakPoint) -> Document:
        self._check_index(index)
        return Document(insert_split(self.pages, index, break_point))

    def repaginate(self) -> tuple[Document, RepaginationResult]:
        result = process_overflows(self.pages)
        return Document(result.pages), result

    def add_table_of_contents(self, settings: PageSettings | None = None) -> ActionResult:
        return self._attempt(
            "add_table_of_contents", lambda: Document(insert_toc(self.pages, settings))
        )


__all__ = [
    "ActionResult",
    "Document",
    "join_document",
    "split_document",
]
