from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from md_paginator.models import Page  # noqa: E402


def _notes(count: int) -> str:
    return "\n".join(
        f"Note {i}: receivables are stated at amortised cost less impairment." for i in range(count)
    )


@pytest.fixture
def sample_text() -> str:
    """A three-page serialized document whose middle page overflows."""
    return "\n\n---\n\n".join(
        (
            "# Acme Holdings\n\nAnnual Financial Statements",
            "Directors' Report\n# Accounting Policies\n\n" + _notes(90),
            "Closing\n## Approval\n\nApproved by the board.",
        )
    )


@pytest.fixture
def overflowing_page() -> Page:
    return Page.new(_notes(90))
