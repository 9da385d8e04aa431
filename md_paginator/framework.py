"""Pass registry and the timed pipeline runner.

Passes take and return an ``Artifact`` wrapping a ``Document``. They
register themselves under a unique name at import time, and a pipeline is
resolved from step names before anything runs, so a typo fails the whole
run up front rather than half way through.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from functools import reduce
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Protocol, Sequence, Type, runtime_checkable

from md_paginator.document import Document

Timings = Dict[str, float]


@dataclass(frozen=True)
class Artifact:
    """A document plus the metadata passes accumulate about it."""

    payload: Document
    meta: Dict[str, Any] | None = None


@runtime_checkable
class Pass(Protocol):
    name: str
    input_type: Type
    output_type: Type

    def __call__(self, a: Artifact) -> Artifact: ...


_PASSES: Mapping[str, Pass] = MappingProxyType({})


def register(p: Pass) -> Pass:
    """Make ``p`` resolvable by its name; a later pass of the same name wins."""
    global _PASSES
    _PASSES = MappingProxyType({**_PASSES, p.name: p})
    return p


def registry() -> Dict[str, Pass]:
    return dict(_PASSES)


def resolve(steps: Iterable[str]) -> List[Pass]:
    """Registered passes for ``steps`` in order; ``KeyError`` names any unknown."""
    names = list(steps)
    unknown = [s for s in names if s not in _PASSES]
    if unknown:
        raise KeyError(f"unknown steps: {unknown}")
    return [_PASSES[s] for s in names]


def _timed(acc: tuple[Artifact, Timings], p: Pass) -> tuple[Artifact, Timings]:
    a, timings = acc
    t0 = time.time()
    a = p(a)
    return a, {**timings, p.name: time.time() - t0}


def run_pipeline(passes: Sequence[Pass], a: Artifact) -> tuple[Artifact, Timings]:
    """Apply ``passes`` in order, returning the result and seconds per pass."""
    return reduce(_timed, passes, (a, {}))


def with_metrics(
    meta: Mapping[str, Any] | None, name: str, values: Mapping[str, Any]
) -> dict[str, Any]:
    """Return ``meta`` with ``values`` merged into ``metrics[name]``."""
    all_metrics = dict((meta or {}).get("metrics") or {})
    existing = dict(all_metrics.get(name) or {})
    return {**(meta or {}), "metrics": {**all_metrics, name: {**existing, **values}}}
