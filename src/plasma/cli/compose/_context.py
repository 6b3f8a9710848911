"""Shared setup for compose subcommands.

Loads project configuration once, installs logging, and resolves the
package selections (config ``compose.packages`` plus ``--package``).
"""
from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from plasma.cli._logging import configure_logging
from plasma.cli._utils import get_repo_root, merge_selections, parse_package_selections
from plasma.core.config import ComposeConfig, ConfigManager, LoggingConfig


@dataclass(frozen=True)
class ComposeContext:
    repo_root: Path
    config: Dict[str, Any]
    compose: ComposeConfig
    selections: Dict[str, str]


def build_compose_context(args: argparse.Namespace) -> ComposeContext:
    """Resolve repo root, config, logging and selections for a compose command."""
    repo_root = get_repo_root(args)
    config = ConfigManager(repo_root).load_config()

    log_cfg = LoggingConfig(repo_root, config=config)
    configure_logging(
        level=log_cfg.level,
        verbose=bool(getattr(args, "verbose", False)),
        log_file=log_cfg.file,
    )

    compose = ComposeConfig(repo_root, config=config)
    selections = merge_selections(
        compose.selections,
        parse_package_selections(getattr(args, "packages", None) or []),
    )
    return ComposeContext(
        repo_root=repo_root,
        config=config,
        compose=compose,
        selections=selections,
    )


__all__ = ["ComposeContext", "build_compose_context"]
