"""Project root and project-relative path resolution.

Resolution follows these principles:
- Framework defaults come from the plasma.data package (bundled)
- Project config comes from <repo>/.plasma/config/
- Configured paths are repo-relative unless absolute
"""
from __future__ import annotations

import os
import subprocess
from pathlib import Path

from .errors import PlasmaPathError

PROJECT_ROOT_ENV = "PLASMA_PROJECT_ROOT"
PROJECT_CONFIG_DIR = ".plasma"


def resolve_project_root() -> Path:
    """Resolve project root with fail-fast validation.

    Resolution priority:
    1. PLASMA_PROJECT_ROOT environment variable
    2. Current directory when it holds a ``.plasma`` directory
    3. Git repository root via ``git rev-parse --show-toplevel``

    Returns:
        Path: Absolute path to project root

    Raises:
        PlasmaPathError: If the root cannot be resolved or points at ``.plasma`` itself
    """
    env_root = os.environ.get(PROJECT_ROOT_ENV)
    if env_root:
        env_path = Path(env_root).expanduser().resolve()
        if not env_path.exists():
            raise PlasmaPathError(f"{PROJECT_ROOT_ENV} points at missing path: {env_path}")
        if env_path.name == PROJECT_CONFIG_DIR:
            raise PlasmaPathError(
                f"{PROJECT_ROOT_ENV} points to {PROJECT_CONFIG_DIR} directory: {env_path}. "
                "This is invalid - must point to project root."
            )
        return env_path

    cwd = Path.cwd().resolve()
    if (cwd / PROJECT_CONFIG_DIR).is_dir():
        return cwd

    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=str(cwd),
            text=True,
            capture_output=True,
            check=True,
            timeout=5,
        )
    except FileNotFoundError as exc:
        raise PlasmaPathError(
            "git executable not found on PATH; "
            f"set {PROJECT_ROOT_ENV} to your project root."
        ) from exc
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired) as exc:
        raise PlasmaPathError(
            "Unable to resolve project root via git. "
            f"Set {PROJECT_ROOT_ENV} or run inside a git repository."
        ) from exc

    root_str = (result.stdout or "").strip()
    if not root_str:
        raise PlasmaPathError(
            "git rev-parse --show-toplevel returned empty output; "
            f"set {PROJECT_ROOT_ENV}."
        )
    return Path(root_str).resolve()


def resolve_repo_path(repo_root: Path, raw: str | os.PathLike[str]) -> Path:
    """Return ``raw`` as an absolute path, treating relative values as repo-relative."""
    p = Path(os.path.expandvars(str(raw)).strip()).expanduser()
    if not p.is_absolute():
        p = Path(repo_root) / p
    return p


def get_project_config_dir(repo_root: Path) -> Path:
    """Return ``<repo_root>/.plasma``."""
    return Path(repo_root) / PROJECT_CONFIG_DIR


def get_user_config_dir() -> Path:
    """Return the per-user config directory (``~/.plasma``)."""
    return Path("~").expanduser() / PROJECT_CONFIG_DIR


__all__ = [
    "PROJECT_ROOT_ENV",
    "PROJECT_CONFIG_DIR",
    "resolve_project_root",
    "resolve_repo_path",
    "get_project_config_dir",
    "get_user_config_dir",
]
