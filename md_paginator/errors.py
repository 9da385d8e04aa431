"""Declined actions and validation failures raised at orchestration seams.

Pure layout functions never raise; they signal "nothing to do" with ``None``.
Only policy violations the host has to relay to the user end up here.
"""

from __future__ import annotations


class DeclinedAction(Exception):
    """A user-requested document action that was rejected."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class LastPageDeletion(DeclinedAction):
    def __init__(self) -> None:
        super().__init__("Cannot delete the last page")


class TableOfContentsExists(DeclinedAction):
    def __init__(self) -> None:
        super().__init__("Table of Contents already exists")


class PageIndexError(DeclinedAction):
    def __init__(self, index: int, total: int) -> None:
        super().__init__(f"Page index {index} out of range for {total} pages")
        self.index = index
        self.total = total


class InvalidSettings(ValueError):
    """Page settings rejected before they reach the capacity estimator."""
