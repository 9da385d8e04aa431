from __future__ import annotations

import logging
from dataclasses import dataclass, field

from md_paginator.document import Document
from md_paginator.framework import Artifact, register, with_metrics

logger = logging.getLogger(__name__)


@dataclass
class _RepaginatePass:
    """Heuristic repagination of the whole document."""

    name: str = field(default="repaginate", init=False)
    input_type: type = field(default=Document, init=False)
    output_type: type = field(default=Document, init=False)
    enabled: bool = True

    def __call__(self, a: Artifact) -> Artifact:
        if not self.enabled or not isinstance(a.payload, Document):
            return a
        document, result = a.payload.repaginate()
        if result.unsplittable:
            logger.warning(
                "repaginate: %d page(s) still overflow with no safe break point",
                len(result.unsplittable),
            )
        meta = with_metrics(
            a.meta,
            self.name,
            {
                "splits": result.split_count,
                "unsplittable": list(result.unsplittable),
                "pages": len(document),
            },
        )
        return Artifact(payload=document, meta=meta)


repaginate = register(_RepaginatePass())
