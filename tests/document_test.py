import pytest

from md_paginator.document import Document, join_document, split_document
from md_paginator.errors import InvalidSettings
from md_paginator.models import BreakPoint, Orientation, Page, PageSettings


@pytest.mark.parametrize(
    "text",
    [
        "",
        "# Only page",
        "# One\n\n---\n\n# Two",
        "a\n---\nb",
        "---",
        "first\n\n---\n\n\n\n---\n\nthird\n",
    ],
)
def test_separator_round_trip(text: str) -> None:
    assert join_document(split_document(text)) == text


def test_from_text_builds_pages_with_settings() -> None:
    settings = PageSettings(orientation=Orientation.LANDSCAPE)
    doc = Document.from_text("# One\n\n---\n\n# Two", settings)
    assert [p.content for p in doc] == ["# One", "# Two"]
    assert all(p.settings == settings for p in doc)
    assert doc.to_text() == "# One\n\n---\n\n# Two"


def test_empty_document_rejected() -> None:
    with pytest.raises(ValueError):
        Document(())


def test_deleting_only_page_is_declined() -> None:
    doc = Document.of([Page.new("solo")])
    outcome = doc.delete_page(0)
    assert outcome.declined
    assert outcome.reason == "Cannot delete the last page"
    assert outcome.document is doc
    assert len(outcome.document) == 1


def test_delete_page() -> None:
    doc = Document.of([Page.new("a"), Page.new("b")])
    outcome = doc.delete_page(0)
    assert outcome.accepted
    assert [p.content for p in outcome.document] == ["b"]


def test_deleting_toc_clears_flag() -> None:
    doc = Document.of([Page.new("Cover"), Page.new("Banner\n# One")])
    with_toc = doc.add_table_of_contents().document
    assert with_toc.has_table_of_contents
    assert not with_toc.delete_page(1).document.has_table_of_contents


def test_add_page_after_index() -> None:
    doc = Document.of([Page.new("a"), Page.new("b")])
    outcome = doc.add_page(0)
    assert [p.content for p in outcome.document][1] == "# New Page\n\nStart writing here..."
    assert len(outcome.document) == 3


def test_move_page() -> None:
    doc = Document.of([Page.new("a"), Page.new("b"), Page.new("c")])
    moved = doc.move_page(2, 0).document
    assert [p.content for p in moved] == ["c", "a", "b"]


def test_move_out_of_range_declined() -> None:
    doc = Document.of([Page.new("a"), Page.new("b")])
    outcome = doc.move_page(1, 2)
    assert outcome.declined
    assert outcome.document is doc


def test_update_settings_validates() -> None:
    doc = Document.of([Page.new("a")])
    updated = doc.update_settings(0, {"orientation": "landscape"})
    assert updated[0].settings.orientation is Orientation.LANDSCAPE
    assert updated[0].id == doc[0].id


@pytest.mark.parametrize(
    "settings",
    [
        {"orientation": "sideways"},
        {"margins": {"top": -1}},
        {"orientation": "portrait", "columns": 2},
    ],
)
def test_update_settings_rejects_malformed(settings: dict) -> None:
    doc = Document.of([Page.new("a")])
    with pytest.raises(InvalidSettings):
        doc.update_settings(0, settings)


def test_update_content_keeps_identity() -> None:
    doc = Document.of([Page.new("a")])
    updated = doc.update_content(0, "b")
    assert updated[0].content == "b"
    assert updated[0].id == doc[0].id


def test_apply_split_inserts_overflow() -> None:
    doc = Document.of([Page.new("keep\nmove"), Page.new("tail")])
    bp = BreakPoint(keep_content="keep", overflow_content="move", index=1)
    split = doc.apply_split(0, bp)
    assert [p.content for p in split] == ["keep", "move", "tail"]
    assert split.index_of(doc[0].id) == 0


def test_duplicate_table_of_contents_declined() -> None:
    doc = Document.of([Page.new("Cover"), Page.new("Banner\n# One")])
    first = doc.add_table_of_contents()
    second = first.document.add_table_of_contents()
    assert first.accepted
    assert second.declined
    assert second.reason == "Table of Contents already exists"
    assert second.document is first.document


def test_reloaded_table_of_contents_keeps_its_flag() -> None:
    doc = Document.of([Page.new("Cover"), Page.new("Banner\n# One"), Page.new("Tail\n# Two")])
    saved = doc.add_table_of_contents().document.to_text()
    reloaded = Document.from_text(saved)
    assert [p.is_table_of_contents for p in reloaded] == [False, True, False, False]
    assert reloaded.add_table_of_contents().declined


def test_contents_heading_elsewhere_is_ordinary_content() -> None:
    doc = Document.from_text("Cover\n\n---\n\nIntro\n# **Contents**")
    assert not doc.has_table_of_contents


def test_repaginate_returns_new_document() -> None:
    body = "\n".join(f"Line {i}" for i in range(100))
    doc = Document.of([Page.new(body)])
    repaginated, result = doc.repaginate()
    assert len(repaginated) == 1 + result.split_count
    assert repaginated.find(doc[0].id) is not None
