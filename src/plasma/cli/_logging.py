"""Per-invocation stdlib logging setup for the CLI.

Library modules only create loggers; handlers are installed here once per
CLI invocation. Log records go to stderr (and optionally a file) so stdout
stays machine-readable in JSON mode.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from plasma.core.utils.io import ensure_directory

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_INSTALLED: list[logging.Handler] = []


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(
    *,
    level: str = "WARNING",
    verbose: bool = False,
    log_file: Optional[Path] = None,
) -> None:
    """Install stderr (and optional file) handlers on the ``plasma`` logger.

    Idempotent: handlers installed by a previous call are replaced.
    """
    effective = _level_from_name(level)
    if verbose:
        effective = min(effective, logging.INFO)

    root = logging.getLogger("plasma")
    reset_logging()
    root.setLevel(effective)

    stream = logging.StreamHandler(sys.stderr)
    stream.setLevel(effective)
    stream.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root.addHandler(stream)
    _INSTALLED.append(stream)

    if log_file is not None:
        ensure_directory(Path(log_file).parent)
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
        fh.setLevel(effective)
        fh.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(fh)
        _INSTALLED.append(fh)


def reset_logging() -> None:
    """Remove handlers installed by :func:`configure_logging`."""
    root = logging.getLogger("plasma")
    while _INSTALLED:
        h = _INSTALLED.pop()
        root.removeHandler(h)
        h.close()


__all__ = ["configure_logging", "reset_logging"]
