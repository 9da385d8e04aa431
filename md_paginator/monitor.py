"""Continuous overflow handling driven by measured page heights.

The host reports the rendered height of a page whenever it changes. A page
that overflows is flagged at once, but splitting waits until the page has
been stable for the debounce delay so it does not fight active typing. Each
new observation restarts that page's timer; a timer whose page was deleted,
re-observed or resolved in the meantime does nothing when it fires.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Protocol

from md_paginator.break_points import find_break_point
from md_paginator.capacity import CapacityReport, assess_page, chars_per_line
from md_paginator.constants import AUTO_SPLIT_DEBOUNCE_S
from md_paginator.models import BreakPoint, Page

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], TimerHandle]
PageLookup = Callable[[str], "Page | None"]
SplitCallback = Callable[[str, BreakPoint], None]


def thread_scheduler(delay: float, callback: Callable[[], None]) -> TimerHandle:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


def split_once(page: Page, measured_height_px: float | None = None) -> BreakPoint | None:
    """Single break-point attempt for ``page``, calibrated when measured.

    A table of contents is never split, however far it overflows.
    """
    if page.is_table_of_contents:
        return None
    report = assess_page(page, measured_height_px)
    if not report.overflowing:
        return None
    return find_break_point(
        page.content, report.limit, chars_per_line(page.settings), report.threshold
    )


@dataclass(frozen=True)
class OverflowStatus:
    report: CapacityReport
    can_split: bool

    @property
    def overflowing(self) -> bool:
        return self.report.overflowing


class OverflowMonitor:
    """Per-page debounced auto-split.

    ``lookup`` returns the current version of a page (``None`` once deleted)
    and ``on_split`` receives the page id and break point to apply.
    """

    def __init__(
        self,
        lookup: PageLookup,
        on_split: SplitCallback,
        *,
        delay: float = AUTO_SPLIT_DEBOUNCE_S,
        scheduler: Scheduler = thread_scheduler,
    ) -> None:
        self._lookup = lookup
        self._on_split = on_split
        self._delay = delay
        self._scheduler = scheduler
        self._lock = threading.Lock()
        self._timers: dict[str, TimerHandle] = {}
        self._generations: dict[str, int] = {}
        self._generation = 0
        self._measurements: dict[str, float] = {}
        self._overflowing: set[str] = set()

    @property
    def overflowing(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._overflowing)

    @property
    def pending(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._timers)

    def observe(self, page: Page, measured_height_px: float) -> OverflowStatus:
        """Record a measurement and (re)schedule an auto-split if one is possible."""
        report = assess_page(page, measured_height_px)
        if not report.overflowing:
            self.forget(page.id)
            return OverflowStatus(report, False)

        can_split = split_once(page, measured_height_px) is not None
        with self._lock:
            self._overflowing.add(page.id)
            self._measurements[page.id] = measured_height_px
            self._cancel_locked(page.id)
            if can_split:
                self._generation += 1
                generation = self._generation
                self._generations[page.id] = generation
                self._timers[page.id] = self._scheduler(
                    self._delay, lambda: self._fire(page.id, generation)
                )
        if not can_split:
            logger.debug("page %s overflows with no safe break point", page.id)
        return OverflowStatus(report, can_split)

    def forget(self, page_id: str) -> None:
        """Drop all state for ``page_id``, cancelling its pending timer."""
        with self._lock:
            self._cancel_locked(page_id)
            self._overflowing.discard(page_id)
            self._measurements.pop(page_id, None)

    def cancel_all(self) -> None:
        with self._lock:
            for page_id in list(self._timers):
                self._cancel_locked(page_id)

    def _cancel_locked(self, page_id: str) -> None:
        timer = self._timers.pop(page_id, None)
        if timer is not None:
            timer.cancel()
        # invalidates callbacks that already started
        self._generations.pop(page_id, None)

    def _fire(self, page_id: str, generation: int) -> None:
        with self._lock:
            if self._generations.get(page_id) != generation:
                return
            self._timers.pop(page_id, None)
            self._generations.pop(page_id, None)
            measured = self._measurements.get(page_id)

        page = self._lookup(page_id)
        if page is None or measured is None:
            self.forget(page_id)
            return
        break_point = split_once(page, measured)
        if break_point is None:
            logger.debug("auto-split skipped for page %s: nothing safe to move", page_id)
            return
        self.forget(page_id)
        logger.info(
            "auto-split page %s at line %d (%s)", page_id, break_point.index, break_point.rule
        )
        self._on_split(page_id, break_point)


__all__ = [
    "OverflowMonitor",
    "OverflowStatus",
    "Scheduler",
    "TimerHandle",
    "split_once",
    "thread_scheduler",
]
