from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path
from typing import Any, Optional

import typer

from md_paginator.config import PipelineSpec, load_spec
from md_paginator.core import (
    assemble_report,
    describe_passes,
    inspect_document,
    load_document,
    run_paginate,
    write_document,
)
from md_paginator.models import Orientation

app = typer.Typer(add_completion=False, no_args_is_help=True)


def _spec_path_candidates(path: str | Path) -> Iterator[Path]:
    """Yield potential spec locations without hitting the filesystem."""
    candidate = Path(path)
    pkg_dir = Path(__file__).resolve().parent
    yield from (
        candidate,
        pkg_dir.parent / candidate,
        pkg_dir / candidate,
    )


def _resolve_spec_path(path: str | Path) -> Path:
    """Pick the first existing pipeline spec from candidate locations."""
    return next((p for p in _spec_path_candidates(path) if p.exists()), Path(path))


def _format_timings(timings: Mapping[str, float]) -> str:
    """Return ``timings`` as newline-delimited ``name: seconds`` strings."""
    return "\n".join(f"{n}: {t:.3f}s" for n, t in timings.items())


def _exit_with_error(exc: Exception) -> None:
    """Print ``exc`` to stderr and exit with status 1."""
    print(f"error: {exc}", file=sys.stderr)
    raise typer.Exit(1)


def _safe(func: Callable[[], None]) -> None:
    """Invoke ``func`` and exit non-zero on any exception."""
    try:
        func()
    except typer.Exit:
        raise
    except Exception as exc:
        _exit_with_error(exc)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="[%(levelname)s] %(name)s:%(funcName)s - %(message)s",
        )


def _cli_overrides(orientation: Orientation | None) -> dict[str, dict[str, Any]]:
    if orientation is None:
        return {}
    return {"document": {"orientation": orientation.value}}


def _with_toc(spec: PipelineSpec) -> PipelineSpec:
    """Append ``build_toc`` unless the spec already runs it."""
    if "build_toc" in spec.pipeline:
        return spec
    return spec.model_copy(update={"pipeline": [*spec.pipeline, "build_toc"]})


def _run_paginate(
    input_path: Path,
    out: Path | None,
    toc: bool,
    orientation: Orientation | None,
    spec: str,
    report: Path | None,
    verbose: bool,
) -> None:
    _configure_logging(verbose)
    s = load_spec(_resolve_spec_path(spec), overrides=_cli_overrides(orientation))
    s = _with_toc(s) if toc else s
    document, meta, timings = run_paginate(input_path, s)
    write_document(document, out or input_path)
    if report:
        report.write_text(json.dumps(assemble_report(timings, meta), indent=2), encoding="utf-8")
    if verbose:
        print(_format_timings(timings))
    splits = ((meta.get("metrics") or {}).get("repaginate") or {}).get("splits", 0)
    print(f"paginate: OK ({len(document)} pages, {splits} split(s))")


def _run_inspect(input_path: Path, spec: str) -> None:
    s = load_spec(_resolve_spec_path(spec))
    print(json.dumps(inspect_document(load_document(input_path, s)), indent=2))


@app.command()
def paginate(
    input_path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    out: Optional[Path] = typer.Option(None, "--out", help="Write here instead of in place."),
    toc: bool = typer.Option(False, "--toc/--no-toc", help="Insert a table of contents."),
    orientation: Optional[Orientation] = typer.Option(None, "--orientation"),
    spec: str = typer.Option("pipeline.yaml", "--spec"),
    report: Optional[Path] = typer.Option(None, "--report", help="Write a JSON run report."),
    verbose: bool = typer.Option(False, "--verbose"),
) -> None:
    """Split overflowing pages of a document at safe boundaries."""
    _safe(lambda: _run_paginate(input_path, out, toc, orientation, spec, report, verbose))


@app.command()
def inspect(
    input_path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    spec: str = typer.Option("pipeline.yaml", "--spec"),
) -> None:
    """Print the per-page capacity report as JSON."""
    _safe(lambda: _run_inspect(input_path, spec))


@app.command()
def passes() -> None:
    """List registered passes."""
    print(json.dumps(describe_passes(), indent=2))


if __name__ == "__main__":
    app()
