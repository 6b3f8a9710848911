"""Error raised when the project root or a configured path cannot be resolved."""
from __future__ import annotations


class PlasmaPathError(ValueError):
    """Project root or repo-relative path resolution failed.

    Raised for a ``PLASMA_PROJECT_ROOT`` that is missing or points at
    ``.plasma`` itself, and when no git repository can be found.
    """


__all__ = ["PlasmaPathError"]
