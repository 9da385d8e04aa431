"""Layout constants shared by every document that uses the page separator.

These values are part of the persisted-document contract: two engines that
exchange documents must agree on them or they will paginate differently.
"""

from __future__ import annotations

from typing import Final

# Screen geometry
DPI: Final = 96
MM_PER_INCH: Final = 25.4

# A4 in millimetres (portrait); landscape swaps the pair.
PAGE_WIDTH_MM: Final = 210
PAGE_HEIGHT_MM: Final = 297

LINE_HEIGHT_PX: Final = 24
FOOTER_RESERVATION_PX: Final = 40
DEFAULT_MARGIN_MM: Final = 20

CHARS_PER_LINE = {
    "portrait": 80,
    "landscape": 110,
}

# Measured overflow must exceed the page by this much before it counts.
OVERFLOW_TOLERANCE_PX: Final = 5

# Fraction of the limit consumed before a break is searched for.
HEURISTIC_THRESHOLD: Final = 0.75
CALIBRATED_THRESHOLD: Final = 0.95

BREAK_THRESHOLDS = {
    "table_rows": 15,  # tables longer than this may be split internally
    "table_near_top": 3,  # tables starting before this line dominate the page
    "clean_search": 10,  # lines scanned backward for a blank/heading
}

# Line weights in units of LINE_HEIGHT_PX
LINE_WEIGHTS = {
    "blank": 0.5,
    "heading": 2.0,
    "table_row": 1.2,
    "code_fence": 1.0,
}

TOC_LINE_WIDTH: Final = 70
TOC_MIN_DOTS: Final = 3
TOC_INDENT: Final = 4

AUTO_SPLIT_DEBOUNCE_S: Final = 1.0

PAGE_SEPARATOR: Final = "\n\n---\n\n"
DEFAULT_NEW_PAGE: Final = "# New Page\n\nStart writing here..."
