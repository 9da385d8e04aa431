"""Line-budget estimation for fixed-size pages.

Two modes coexist. The heuristic mode derives a budget from page geometry
alone and is what bulk repagination uses. The calibrated mode rescales the
heuristic's own unit system once the host has measured the real rendered
height of a page, which absorbs font metrics the heuristic cannot know.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import floor

from md_paginator.constants import (
    CALIBRATED_THRESHOLD,
    CHARS_PER_LINE,
    DPI,
    FOOTER_RESERVATION_PX,
    HEURISTIC_THRESHOLD,
    LINE_HEIGHT_PX,
    MM_PER_INCH,
    OVERFLOW_TOLERANCE_PX,
    PAGE_HEIGHT_MM,
    PAGE_WIDTH_MM,
)
from md_paginator.line_classifier import classify
from md_paginator.models import Page, PageSettings


def mm_to_px(mm: float) -> float:
    return mm * DPI / MM_PER_INCH


def page_dimensions_mm(settings: PageSettings) -> tuple[float, float]:
    """Return ``(width, height)`` in millimetres for ``settings``."""
    if settings.is_landscape:
        return float(PAGE_HEIGHT_MM), float(PAGE_WIDTH_MM)
    return float(PAGE_WIDTH_MM), float(PAGE_HEIGHT_MM)


def page_height_px(settings: PageSettings) -> float:
    return mm_to_px(page_dimensions_mm(settings)[1])


def available_height_px(settings: PageSettings) -> float:
    """Page height minus top/bottom margins and the footer reservation."""
    margins = settings.margins
    return (
        page_height_px(settings)
        - mm_to_px(margins.top)
        - mm_to_px(margins.bottom)
        - FOOTER_RESERVATION_PX
    )


def chars_per_line(settings: PageSettings) -> int:
    return CHARS_PER_LINE[settings.orientation.value]


def estimate_capacity_lines(settings: PageSettings) -> int:
    """Return how many weighted lines fit on a page with ``settings``."""
    return floor(available_height_px(settings) / LINE_HEIGHT_PX)


def estimate_content_extent(content: str, chars_per_line: int) -> float:
    """Sum of line weights over every line of ``content``."""
    return sum(classify(line, chars_per_line) for line in content.split("\n"))


def calibrate_capacity(
    estimated_extent: float, measured_height_px: float, page_height_px: float
) -> float:
    """Rescale ``estimated_extent`` to the share that actually fit on the page.

    The result is only a correction when the measured height exceeds the page;
    otherwise ``estimated_extent`` comes back unchanged.
    """
    if measured_height_px <= 0 or measured_height_px <= page_height_px:
        return estimated_extent
    return estimated_extent * (page_height_px / measured_height_px)


def is_measured_overflow(measured_height_px: float, settings: PageSettings) -> bool:
    return measured_height_px > page_height_px(settings) + OVERFLOW_TOLERANCE_PX


@dataclass(frozen=True)
class CapacityReport:
    """Overflow assessment of one page, heuristic or calibrated."""

    page_id: str
    estimated_lines: float
    capacity: int
    limit: float
    threshold: float
    overflowing: bool
    calibrated: bool = False

    @property
    def summary(self) -> str:
        return f"~{round(self.estimated_lines)} lines / {self.capacity} max"

    def as_dict(self) -> dict[str, object]:
        return {
            "page_id": self.page_id,
            "estimated_lines": round(self.estimated_lines, 2),
            "capacity": self.capacity,
            "limit": round(self.limit, 2),
            "threshold": self.threshold,
            "overflowing": self.overflowing,
            "calibrated": self.calibrated,
        }


def assess_page(page: Page, measured_height_px: float | None = None) -> CapacityReport:
    """Return the overflow assessment for ``page``.

    Without a measurement the heuristic capacity decides overflow and the
    break threshold is the conservative one. With a measurement, overflow is
    whatever the host observed and the limit is the calibrated extent.
    """
    settings = page.settings
    extent = estimate_content_extent(page.content, chars_per_line(settings))
    capacity = estimate_capacity_lines(settings)
    if measured_height_px is None:
        return CapacityReport(
            page_id=page.id,
            estimated_lines=extent,
            capacity=capacity,
            limit=float(capacity),
            threshold=HEURISTIC_THRESHOLD,
            overflowing=extent > capacity,
        )
    overflowing = is_measured_overflow(measured_height_px, settings)
    calibrated = overflowing and extent > 0
    limit = (
        calibrate_capacity(extent, measured_height_px, page_height_px(settings))
        if calibrated
        else float(capacity)
    )
    return CapacityReport(
        page_id=page.id,
        estimated_lines=extent,
        capacity=capacity,
        limit=limit,
        threshold=CALIBRATED_THRESHOLD if calibrated else HEURISTIC_THRESHOLD,
        overflowing=overflowing,
        calibrated=calibrated,
    )


__all__ = [
    "CapacityReport",
    "assess_page",
    "available_height_px",
    "calibrate_capacity",
    "chars_per_line",
    "estimate_capacity_lines",
    "estimate_content_extent",
    "is_measured_overflow",
    "mm_to_px",
    "page_dimensions_mm",
    "page_height_px",
]
