"""Compose subsystem exceptions.

Every error raised while building the image tree derives from
``ComposeError`` and carries a ``context`` mapping (package, paths) so the
CLI can report what failed and where.
"""
from __future__ import annotations

from typing import Any, Mapping

from plasma.core.exceptions import PlasmaError


class ComposeError(PlasmaError):
    """Base exception for compose errors."""


class PackageResolutionError(ComposeError, FileNotFoundError):
    """Raised when a selected package/target cannot be located on disk."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ComposeError.__init__(self, message, context=context)
        FileNotFoundError.__init__(self, message)


class MergeError(ComposeError, OSError):
    """Raised when reading a source tree or writing the destination fails."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ComposeError.__init__(self, message, context=context)
        OSError.__init__(self, message)


class BuildLockError(ComposeError, TimeoutError):
    """Raised when another build holds the output directory lock."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ComposeError.__init__(self, message, context=context)
        TimeoutError.__init__(self, message)


__all__ = [
    "ComposeError",
    "PackageResolutionError",
    "MergeError",
    "BuildLockError",
]
