"""Path resolution helpers for Plasma."""
from __future__ import annotations

from .errors import PlasmaPathError
from .resolver import (
    PROJECT_CONFIG_DIR,
    PROJECT_ROOT_ENV,
    get_project_config_dir,
    get_user_config_dir,
    resolve_project_root,
    resolve_repo_path,
)

__all__ = [
    "PlasmaPathError",
    "PROJECT_CONFIG_DIR",
    "PROJECT_ROOT_ENV",
    "get_project_config_dir",
    "get_user_config_dir",
    "resolve_project_root",
    "resolve_repo_path",
]
