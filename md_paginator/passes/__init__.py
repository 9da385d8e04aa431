"""Lazy pass accessors that avoid shadowing submodules."""

from importlib import import_module
from typing import Any

_PASS_MODULES = [
    "build_toc",
    "normalize",
    "repaginate",
]

# Import submodules for their registration side effects while keeping
# ``md_paginator.passes.<module>`` importable.
for _mod in _PASS_MODULES:  # pragma: no cover - import side effects only
    import_module(f".{_mod}", __name__)

__all__ = list(_PASS_MODULES)


def __getattr__(name: str) -> Any:  # pragma: no cover - simple delegation
    if name in __all__:
        module = import_module(f".{name}", __name__)
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
