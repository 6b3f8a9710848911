"""Compose data models.

Provides immutable dataclasses for packages, resolved content roots and
build results.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional


class Layout(str, Enum):
    """On-disk package convention."""

    LEGACY = "legacy"  # layers at the package root
    MODERN = "modern"  # layers under <package>/src/


@dataclass(frozen=True, slots=True)
class PackageRef:
    """A selected package located in the package cache.

    Attributes:
        name: Unique package name
        target: Resolved target selector (version or branch tag)
        root: Package root, ``<packages_dir>/<name>/<target>``
    """

    name: str
    target: str
    root: Path


@dataclass(frozen=True, slots=True)
class ContentRoot:
    """Directory a package's layers are read from.

    Attributes:
        package_root: The package root that was inspected
        path: Resolved content root (``package_root`` or ``package_root/src``)
        layout: Which convention the detector chose
    """

    package_root: Path
    path: Path
    layout: Layout

    @property
    def is_modern(self) -> bool:
        return self.layout is Layout.MODERN


@dataclass(frozen=True, slots=True)
class PackageDecision:
    """Per-package record of the layout decision."""

    name: str
    target: str
    content_root: ContentRoot
    layers: tuple[str, ...] = ()

    @property
    def layout(self) -> Layout:
        return self.content_root.layout

    def describe(self) -> str:
        if self.content_root.is_modern:
            return f"{self.name}: modern layout (reading from src/)"
        return f"{self.name}: legacy layout (reading from root)"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "target": self.target,
            "layout": self.layout.value,
            "package_root": str(self.content_root.package_root),
            "content_root": str(self.content_root.path),
            "layers": list(self.layers),
        }


@dataclass(frozen=True, slots=True)
class MergeResult:
    """Result of overlaying content roots onto a destination.

    Attributes:
        destination: Directory that received the layers
        layers: Layers written, in catalog order
        files_written: Number of files and links copied
        files_overwritten: How many of those replaced an earlier source's file
    """

    destination: Path
    layers: tuple[str, ...] = ()
    files_written: int = 0
    files_overwritten: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "destination": str(self.destination),
            "layers": list(self.layers),
            "files_written": self.files_written,
            "files_overwritten": self.files_overwritten,
        }


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Result of a build run."""

    output_dir: Path
    decisions: tuple[PackageDecision, ...] = ()
    merge: Optional[MergeResult] = None
    clean: bool = True
    dry_run: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "output_dir": str(self.output_dir),
            "clean": self.clean,
            "dry_run": self.dry_run,
            "packages": [d.to_dict() for d in self.decisions],
            "merge": self.merge.to_dict() if self.merge is not None else None,
        }


__all__ = [
    "Layout",
    "PackageRef",
    "ContentRoot",
    "PackageDecision",
    "MergeResult",
    "BuildResult",
]
