from __future__ import annotations

import logging
from dataclasses import dataclass, field

from md_paginator.document import Document
from md_paginator.framework import Artifact, register, with_metrics

logger = logging.getLogger(__name__)


@dataclass
class _BuildTocPass:
    """Insert a table of contents after the cover page.

    An existing ToC is kept as is; the declined reason is recorded in the
    pass metrics instead of failing the pipeline.
    """

    name: str = field(default="build_toc", init=False)
    input_type: type = field(default=Document, init=False)
    output_type: type = field(default=Document, init=False)
    enabled: bool = True

    def __call__(self, a: Artifact) -> Artifact:
        if not self.enabled or not isinstance(a.payload, Document):
            return a
        outcome = a.payload.add_table_of_contents()
        if outcome.declined:
            logger.warning("build_toc: %s", outcome.reason)
        meta = with_metrics(
            a.meta,
            self.name,
            {"inserted": outcome.accepted, "reason": outcome.reason},
        )
        return Artifact(payload=outcome.document, meta=meta)


build_toc = register(_BuildTocPass())
