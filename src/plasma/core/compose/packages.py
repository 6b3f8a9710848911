"""Package enumeration.

Turns a selection mapping (package name -> resolved target) into an
ordered list of package roots inside the local package cache. Downloading
and version resolution happen before this runs; this module only joins
names and targets into paths and checks that they exist.
"""
from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import List, Mapping

from .exceptions import PackageResolutionError
from .models import PackageRef


def _validate_segment(kind: str, value: str, *, package: str) -> str:
    s = str(value).strip()
    if not s:
        raise PackageResolutionError(
            f"Package '{package}' has an empty {kind}.",
            context={"package": package},
        )
    p = PurePosixPath(s)
    segments = s.split("/")
    if p.is_absolute() or not p.parts or "." in segments or ".." in segments or s.startswith("~"):
        raise PackageResolutionError(
            f"Package '{package}' has unsafe {kind} '{s}' (must stay inside the package cache).",
            context={"package": package, kind: s},
        )
    return s


class PackageEnumerator:
    """Resolve selected packages to their roots in the package cache.

    The cache is laid out as ``<packages_dir>/<name>/<target>/``.
    """

    def __init__(self, packages_dir: Path) -> None:
        """Initialize enumerator.

        Args:
            packages_dir: Root of the local package cache
        """
        self.packages_dir = Path(packages_dir)

    def package_root(self, name: str, target: str) -> Path:
        """Return the on-disk root for ``name`` at ``target`` (not checked)."""
        name_s = _validate_segment("name", name, package=str(name))
        target_s = _validate_segment("target", target, package=name_s)
        return self.packages_dir / name_s / target_s

    def enumerate(self, selections: Mapping[str, str]) -> List[PackageRef]:
        """Return selected packages sorted by name.

        The order is the merge order, so later packages win file conflicts.

        Raises:
            PackageResolutionError: If a selection is invalid or its root is
                missing or not a directory.
        """
        refs: List[PackageRef] = []
        for name in sorted(selections):
            target = str(selections[name]).strip()
            root = self.package_root(name, target)
            if not root.exists():
                raise PackageResolutionError(
                    f"Package '{name}' at target '{target}' not found: {root}",
                    context={"package": name, "target": target, "path": root},
                )
            if not root.is_dir():
                raise PackageResolutionError(
                    f"Package '{name}' at target '{target}' is not a directory: {root}",
                    context={"package": name, "target": target, "path": root},
                )
            refs.append(PackageRef(name=str(name).strip(), target=target, root=root))
        return refs


__all__ = ["PackageEnumerator"]
