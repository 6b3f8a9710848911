"""Package layout detection.

Packages come in two on-disk conventions and carry no manifest field that
says which one they use:

- legacy: layer directories live directly under the package root
- modern: layer directories live under ``<package root>/src/``

The only signal is the presence of a recognized layer directory directly
under ``src/``. Anything ambiguous (no ``src``, ``src`` not a directory,
``src`` without layers, stat failures) resolves to the legacy layout. This
module never raises for those cases and never writes to disk.
"""
from __future__ import annotations

import logging
from pathlib import Path

from .layers import iter_layers
from .models import ContentRoot, Layout

logger = logging.getLogger(__name__)

MODERN_SUBDIR = "src"


def present_layers(directory: Path) -> tuple[str, ...]:
    """Return catalog layers present under ``directory``, in catalog order.

    Entries that cannot be stat'ed are skipped; the merge reports them.
    """
    found = []
    for name in iter_layers():
        try:
            if (directory / name).is_dir():
                found.append(name)
        except OSError as exc:
            logger.debug("Could not stat %s: %s", directory / name, exc)
    return tuple(found)


def _has_layer_dir(directory: Path) -> bool:
    return bool(present_layers(directory))


def resolve_content_root(package_root: Path) -> ContentRoot:
    """Return the directory a package's layers should be read from.

    Args:
        package_root: Root of the downloaded package. Existence is the
            caller's concern; a missing root simply resolves as legacy.

    Returns:
        ContentRoot whose ``layout`` tells which branch was taken.
    """
    package_root = Path(package_root)
    candidate = package_root / MODERN_SUBDIR

    try:
        candidate_is_dir = candidate.is_dir()
    except OSError as exc:
        logger.debug("Could not stat %s: %s", candidate, exc)
        candidate_is_dir = False

    if candidate_is_dir and _has_layer_dir(candidate):
        return ContentRoot(package_root=package_root, path=candidate, layout=Layout.MODERN)
    return ContentRoot(package_root=package_root, path=package_root, layout=Layout.LEGACY)


__all__ = ["MODERN_SUBDIR", "present_layers", "resolve_content_root"]
