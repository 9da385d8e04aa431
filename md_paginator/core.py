from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import fields, is_dataclass, replace
from pathlib import Path
from typing import Any

from md_paginator.capacity import assess_page
from md_paginator.config import PipelineSpec
from md_paginator.document import Document
from md_paginator.framework import Artifact, Pass, registry, resolve, run_pipeline

logger = logging.getLogger(__name__)


def _ensure_toc_follows_repaginate(steps: Sequence[str]) -> None:
    """ToC page numbers are only right once pagination is final."""
    if "build_toc" not in steps or "repaginate" not in steps:
        return
    if steps.index("build_toc") < steps.index("repaginate"):
        raise ValueError("build_toc requires repaginate to run beforehand")


def _enforce_invariants(spec: PipelineSpec) -> list[Pass]:
    passes = resolve(spec.pipeline)
    _ensure_toc_follows_repaginate(spec.pipeline)
    return passes


def configure_pass(pass_obj: Pass, opts: Mapping[str, Any]) -> Pass:
    """Return a copy of ``pass_obj`` with matching ``opts`` applied."""
    if not opts or not is_dataclass(pass_obj):
        return pass_obj
    names = {f.name for f in fields(pass_obj) if f.init}
    updates = {k: v for k, v in opts.items() if k in names}
    return replace(pass_obj, **updates) if updates else pass_obj


def _run_passes(spec: PipelineSpec, a: Artifact) -> tuple[Artifact, dict[str, float]]:
    """Run pipeline passes declared in ``spec`` capturing per-pass timings."""
    passes = _enforce_invariants(spec)
    configured = [configure_pass(p, spec.options.get(p.name, {})) for p in passes]
    return run_pipeline(configured, a)


def load_document(path: str | Path, spec: PipelineSpec | None = None) -> Document:
    """Read a serialized document, applying the spec's default page settings."""
    text = Path(path).read_text(encoding="utf-8")
    return Document.from_text(text, (spec or PipelineSpec()).page_settings())


def write_document(document: Document, path: str | Path) -> None:
    Path(path).write_text(document.to_text(), encoding="utf-8")


def run_paginate(
    path: str | Path, spec: PipelineSpec
) -> tuple[Document, dict[str, Any], dict[str, float]]:
    """Load ``path`` and run ``spec``'s pipeline over it.

    Returns the resulting document, the artifact metadata and per-pass
    timings in seconds.
    """
    abs_path = str(Path(path).resolve())
    artifact = Artifact(payload=load_document(path, spec), meta={"metrics": {}, "input": abs_path})
    artifact, timings = _run_passes(spec, artifact)
    logger.info("paginated %s into %d page(s)", abs_path, len(artifact.payload))
    return artifact.payload, dict(artifact.meta or {}), timings


def inspect_document(document: Document) -> list[dict[str, Any]]:
    """Heuristic capacity report for each page, in reading order."""
    return [
        {
            "page": number,
            **assess_page(page).as_dict(),
            "table_of_contents": page.is_table_of_contents,
        }
        for number, page in enumerate(document, start=1)
    ]


def assemble_report(timings: Mapping[str, float], meta: Mapping[str, Any]) -> dict[str, Any]:
    """Purely assemble run report data without performing IO."""
    return {
        "input": meta.get("input"),
        "timings": dict(timings),
        "metrics": dict(meta.get("metrics") or {}),
    }


def describe_passes() -> dict[str, dict[str, str]]:
    """Return a lightweight view of the registry for CLI/tests."""
    return {
        name: {"input": p.input_type.__name__, "output": p.output_type.__name__}
        for name, p in registry().items()
    }
