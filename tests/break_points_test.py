import pytest

from md_paginator.break_points import find_break_point
from md_paginator.capacity import estimate_content_extent

HEADER = "| Item | Amount |"
SEPARATOR = "| --- | --- |"


def _table(body_rows: int) -> list[str]:
    return [HEADER, SEPARATOR, *(f"| row {i} | {i * 100} |" for i in range(body_rows))]


def _code_block(lines: list[str]) -> tuple[int, int] | None:
    fences = [i for i, line in enumerate(lines) if line.startswith("```")]
    return (fences[0], fences[1]) if len(fences) >= 2 else None


def test_short_paragraph_returns_none() -> None:
    paragraph = " ".join(["assets"] * 50)
    assert find_break_point(paragraph, 100, 80, 0.75) is None


def test_empty_content_returns_none() -> None:
    assert find_break_point("", 10, 80, 0.75) is None


def test_large_table_at_top_splits_inside_and_repeats_header() -> None:
    lines = _table(18)
    bp = find_break_point("\n".join(lines), 10, 80, 0.75)
    assert bp is not None
    assert bp.rule == "table_inside"
    assert bp.index == 6
    overflow = bp.overflow_content.split("\n")
    assert overflow[:2] == [HEADER, SEPARATOR]
    assert overflow[2] == lines[6]
    assert bp.keep_content.split("\n") == lines[:6]


def test_long_table_below_top_splits_inside() -> None:
    lines = ["Intro.", "", "More intro.", "", *_table(30)]
    bp = find_break_point("\n".join(lines), 30, 80, 0.75)
    assert bp is not None
    assert bp.rule == "table_inside"
    assert bp.overflow_content.startswith(f"{HEADER}\n{SEPARATOR}\n")


def test_small_table_away_from_top_moves_whole() -> None:
    lines = [f"Intro paragraph {i}." for i in range(5)] + _table(4)
    bp = find_break_point("\n".join(lines), 10, 80, 0.75)
    assert bp is not None
    assert bp.rule == "table_before"
    assert bp.index == 5
    assert bp.overflow_content.split("\n")[0] == HEADER
    assert HEADER not in bp.keep_content


def test_code_block_moves_together() -> None:
    lines = ["First.", "Second.", "Third.", "```", *(f"x = {i}" for i in range(6)), "```"]
    bp = find_break_point("\n".join(lines), 10, 80, 0.75)
    assert bp is not None
    assert bp.rule == "code_block"
    assert bp.index == 3
    assert bp.overflow_content.startswith("```\nx = 0")
    assert bp.keep_content == "First.\nSecond.\nThird."


def test_closing_fence_still_belongs_to_block() -> None:
    lines = ["a", "```", "b", "```", "after"]
    bp = find_break_point("\n".join(lines), 4, 80, 0.875)
    assert bp is not None
    assert bp.rule == "code_block"
    assert bp.index == 1


def test_code_block_at_top_is_unsplittable() -> None:
    lines = ["```", *(f"print({i})" for i in range(40))]
    assert find_break_point("\n".join(lines), 10, 80, 0.75) is None


def test_prefers_blank_line_within_window() -> None:
    lines = ["# Heading", "text", "text", "text", "", "more", "more", "more", "more"]
    bp = find_break_point("\n".join(lines), 10, 80, 0.75)
    assert bp is not None
    assert bp.rule == "clean_boundary"
    assert bp.index == 4
    assert bp.keep_content == "# Heading\ntext\ntext\ntext"
    assert bp.overflow_content == "more\nmore\nmore\nmore"


def test_prefers_heading_within_window() -> None:
    lines = [f"Line {i}" for i in range(5)] + ["## Section", "body", "body", "body"]
    bp = find_break_point("\n".join(lines), 10, 80, 0.75)
    assert bp is not None
    assert bp.rule == "clean_boundary"
    assert bp.overflow_content.startswith("## Section")


def test_forced_break_when_no_clean_boundary() -> None:
    lines = [f"Line {i}" for i in range(12)]
    bp = find_break_point("\n".join(lines), 10, 80, 0.75)
    assert bp is not None
    assert bp.rule == "forced"
    assert bp.index == 7
    assert bp.overflow_content.startswith("Line 7")


def test_heading_inside_code_block_is_not_a_clean_boundary() -> None:
    lines = ["p", "p", "p", "```", "# comment", "x", "```", "t", "t", "t"]
    bp = find_break_point("\n".join(lines), 12, 80, 0.8)
    assert bp is not None
    assert bp.rule == "forced"
    assert bp.index == 8


def test_single_oversized_line_is_unsplittable() -> None:
    assert find_break_point("x" * 2000, 10, 80, 0.75) is None


def test_higher_ratio_keeps_more() -> None:
    content = "\n".join(f"Line {i}" for i in range(40))
    heuristic = find_break_point(content, 30, 80, 0.75)
    calibrated = find_break_point(content, 30, 80, 0.95)
    assert heuristic is not None and calibrated is not None
    assert calibrated.index > heuristic.index


def _fixture_document() -> str:
    lines = [
        "# Annual Financial Statements",
        "",
        *(f"Paragraph line {i} describing accounting policies." for i in range(8)),
        "",
        "```",
        *(f"ledger[{i}] = balance({i})" for i in range(10)),
        "",
        "# not a heading inside code",
        "```",
        "",
        *(f"Closing remark {i}." for i in range(10)),
    ]
    return "\n".join(lines)


@pytest.mark.parametrize("ratio", [0.75, 0.95])
@pytest.mark.parametrize("limit", list(range(2, 40)))
def test_never_breaks_inside_code_block(limit: int, ratio: float) -> None:
    content = _fixture_document()
    start, end = _code_block(content.split("\n")) or (0, 0)
    bp = find_break_point(content, limit, 80, ratio)
    if bp is not None:
        assert not start < bp.index <= end


@pytest.mark.parametrize("limit", list(range(2, 40)))
def test_split_strictly_shrinks_extent(limit: int) -> None:
    content = _fixture_document()
    bp = find_break_point(content, limit, 80, 0.75)
    if bp is not None:
        assert estimate_content_extent(bp.keep_content, 80) < estimate_content_extent(content, 80)
        assert bp.overflow_content.strip()


@pytest.mark.parametrize("limit", list(range(2, 40)))
def test_split_conserves_words(limit: int) -> None:
    content = _fixture_document()
    bp = find_break_point(content, limit, 80, 0.75)
    if bp is not None:
        rejoined = f"{bp.keep_content}\n{bp.overflow_content}"
        assert rejoined.split() == content.split()
