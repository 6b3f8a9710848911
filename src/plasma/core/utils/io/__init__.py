"""I/O utilities for Plasma core.

Re-exports the directory, YAML and locking helpers so callers can import
from a single place.
"""
from __future__ import annotations

from .core import ensure_directory
from .locking import LockTimeoutError, acquire_file_lock
from .yaml import iter_yaml_files, read_yaml

__all__ = [
    "ensure_directory",
    "LockTimeoutError",
    "acquire_file_lock",
    "iter_yaml_files",
    "read_yaml",
]
