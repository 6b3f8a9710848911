"""Shared CLI utility functions."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Dict, Iterable, Mapping

from plasma.core.utils.paths import resolve_project_root


def get_repo_root(args: argparse.Namespace) -> Path:
    """Get repository root from ``--repo-root`` or auto-detect."""
    if getattr(args, "repo_root", None):
        return Path(args.repo_root).resolve()
    return resolve_project_root()


def parse_package_selections(items: Iterable[str]) -> Dict[str, str]:
    """Parse ``NAME=TARGET`` strings into a selection mapping.

    Raises:
        ValueError: If an item is not of the form NAME=TARGET.
    """
    selections: Dict[str, str] = {}
    for item in items or []:
        name, sep, target = str(item).partition("=")
        name, target = name.strip(), target.strip()
        if not sep or not name or not target:
            raise ValueError(f"Invalid package selection '{item}' (expected NAME=TARGET)")
        selections[name] = target
    return selections


def merge_selections(configured: Mapping[str, str], overrides: Mapping[str, str]) -> Dict[str, str]:
    """Combine configured selections with command-line overrides (overrides win)."""
    merged = dict(configured)
    merged.update(overrides)
    return merged


__all__ = ["get_repo_root", "parse_package_selections", "merge_selections"]
