"""Page data model shared by the estimator, splitter and document layer."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Literal, Mapping
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from md_paginator.constants import DEFAULT_MARGIN_MM
from md_paginator.errors import InvalidSettings


class Orientation(str, Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class Margins(BaseModel):
    """Page margins in millimetres."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    top: float = Field(default=DEFAULT_MARGIN_MM, ge=0)
    right: float = Field(default=DEFAULT_MARGIN_MM, ge=0)
    bottom: float = Field(default=DEFAULT_MARGIN_MM, ge=0)
    left: float = Field(default=DEFAULT_MARGIN_MM, ge=0)


class PageSettings(BaseModel):
    """Validated per-page layout settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    orientation: Orientation = Orientation.PORTRAIT
    margins: Margins = Field(default_factory=Margins)

    @classmethod
    def default(cls) -> PageSettings:
        return cls()

    @classmethod
    def parse(cls, value: PageSettings | Mapping[str, Any] | None) -> PageSettings:
        """Return validated settings, raising ``InvalidSettings`` on bad input."""
        if value is None:
            return cls()
        if isinstance(value, PageSettings):
            return value
        try:
            return cls.model_validate(dict(value))
        except ValidationError as exc:
            raise InvalidSettings(str(exc)) from exc

    @property
    def is_landscape(self) -> bool:
        return self.orientation is Orientation.LANDSCAPE


def new_page_id() -> str:
    """Return a process-unique page identifier."""
    return uuid4().hex


@dataclass(frozen=True)
class Page:
    """A fixed-size rendering unit holding a slice of document content."""

    content: str
    settings: PageSettings = field(default_factory=PageSettings)
    is_table_of_contents: bool = False
    id: str = field(default_factory=new_page_id)

    @classmethod
    def new(cls, content: str, settings: PageSettings | None = None) -> Page:
        return cls(content=content, settings=settings or PageSettings())

    def with_content(self, content: str) -> Page:
        return replace(self, content=content)

    def with_settings(self, settings: PageSettings) -> Page:
        return replace(self, settings=settings)


BreakRule = Literal["table_inside", "table_before", "code_block", "clean_boundary", "forced"]


@dataclass(frozen=True)
class BreakPoint:
    """Partition of one page's content into a kept part and an overflow part.

    ``index`` is the line index (in the original content) where the overflow
    starts and ``rule`` names the priority rule that chose it.
    """

    keep_content: str
    overflow_content: str
    index: int = 0
    rule: BreakRule = "forced"


__all__ = [
    "BreakPoint",
    "BreakRule",
    "Margins",
    "Orientation",
    "Page",
    "PageSettings",
    "new_page_id",
]
