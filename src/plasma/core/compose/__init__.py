"""Plasma image composition.

Assembles layer directories from downloaded packages into the canonical
image tree:

- layers: the catalog of recognized layer names
- layout: legacy/modern package layout detection
- packages: package cache enumeration
- merger: ordered, last-source-wins tree overlay
- builder: orchestration, decision records, locking
"""
from __future__ import annotations

from plasma.core.compose.builder import ComposeBuilder
from plasma.core.compose.exceptions import (
    BuildLockError,
    ComposeError,
    MergeError,
    PackageResolutionError,
)
from plasma.core.compose.layers import LAYER_NAMES, is_layer, iter_layers
from plasma.core.compose.layout import resolve_content_root
from plasma.core.compose.merger import TreeMerger
from plasma.core.compose.models import (
    BuildResult,
    ContentRoot,
    Layout,
    MergeResult,
    PackageDecision,
    PackageRef,
)
from plasma.core.compose.packages import PackageEnumerator

__all__ = [
    # Catalog
    "LAYER_NAMES",
    "is_layer",
    "iter_layers",
    # Detection / enumeration / merge
    "resolve_content_root",
    "PackageEnumerator",
    "TreeMerger",
    "ComposeBuilder",
    # Models
    "Layout",
    "PackageRef",
    "ContentRoot",
    "PackageDecision",
    "MergeResult",
    "BuildResult",
    # Exceptions
    "ComposeError",
    "PackageResolutionError",
    "MergeError",
    "BuildLockError",
]
