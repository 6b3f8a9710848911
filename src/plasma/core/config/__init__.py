"""Plasma configuration system.

Usage:
    from plasma.core.config import ConfigManager
    from plasma.core.config.domains import ComposeConfig

    manager = ConfigManager(repo_root=Path("/path/to/project"))
    config = manager.load_config()

    compose = ComposeConfig(repo_root=Path("/path/to/project"))
    output = compose.output_dir
"""
from __future__ import annotations

from .base import BaseDomainConfig
from .domains import ComposeConfig, LoggingConfig
from .manager import ConfigManager

__all__ = [
    "ConfigManager",
    "BaseDomainConfig",
    "ComposeConfig",
    "LoggingConfig",
]
