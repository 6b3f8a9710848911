"""Core I/O utilities for Plasma.

Directory management primitives shared by the YAML readers, the lock
helpers and the compose merger.
"""
from __future__ import annotations

from pathlib import Path
from typing import Union

PathLike = Union[str, Path]


def ensure_directory(path: PathLike, create: bool = True) -> Path:
    """Ensure directory exists.

    Args:
        path: Directory path to check/create
        create: If True, create directory if missing; if False, raise if missing

    Returns:
        Path: The directory path (guaranteed to exist if create=True)

    Raises:
        FileNotFoundError: If create=False and directory doesn't exist
        NotADirectoryError: If path exists but is not a directory
        OSError: If directory creation fails

    Examples:
        >>> out_dir = ensure_directory(Path(".plasma/compose/image/src"))
        >>> assert out_dir.is_dir()
    """
    path = Path(path)

    if path.exists():
        if not path.is_dir():
            raise NotADirectoryError(f"Path exists but is not a directory: {path}")
        return path

    if create:
        path.mkdir(parents=True, exist_ok=True)
        return path

    raise FileNotFoundError(f"Directory does not exist: {path}")


__all__ = ["PathLike", "ensure_directory"]
