"""Trim page contents and drop pages left empty.

Pasted or hand-written documents often carry stray blank lines around the
page separator. At least one page always survives so the document invariant
holds even for an empty input.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from md_paginator.document import Document
from md_paginator.framework import Artifact, register, with_metrics


def normalize_pages(document: Document) -> Document:
    trimmed = [page.with_content(page.content.strip()) for page in document]
    kept = [page for page in trimmed if page.content or page.is_table_of_contents]
    return Document.of(kept or trimmed[:1])


@dataclass
class _NormalizePass:
    name: str = field(default="normalize", init=False)
    input_type: type = field(default=Document, init=False)
    output_type: type = field(default=Document, init=False)
    enabled: bool = True

    def __call__(self, a: Artifact) -> Artifact:
        if not self.enabled or not isinstance(a.payload, Document):
            return a
        normalized = normalize_pages(a.payload)
        dropped = len(a.payload) - len(normalized)
        return Artifact(
            payload=normalized,
            meta=with_metrics(a.meta, self.name, {"dropped_pages": dropped}),
        )


normalize = register(_NormalizePass())
