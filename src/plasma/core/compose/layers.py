"""Layer catalog.

The fixed set of top-level layer names that make up a component tree.
Declaration order is the canonical iteration order for diagnostics.
"""
from __future__ import annotations

from typing import Iterator

LAYER_NAMES: tuple[str, ...] = (
    "platform",
    "interaction",
    "integration",
    "cognition",
    "conversation",
    "stabilization",
    "foundation",
)

_LAYER_SET = frozenset(LAYER_NAMES)


def is_layer(name: str) -> bool:
    """Return True when ``name`` is a recognized layer name (exact match)."""
    return name in _LAYER_SET


def iter_layers() -> Iterator[str]:
    """Iterate layer names in catalog order."""
    return iter(LAYER_NAMES)


def sort_layers(names) -> list[str]:
    """Return the recognized names from ``names`` in catalog order."""
    present = {n for n in names if is_layer(n)}
    return [n for n in LAYER_NAMES if n in present]


__all__ = ["LAYER_NAMES", "is_layer", "iter_layers", "sort_layers"]
