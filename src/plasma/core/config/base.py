"""Base class for domain-specific configuration accessors.

Provides a standardized pattern for all domain configs with:
- Consistent repo_root handling
- Type-safe section access
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Optional

from .manager import ConfigManager


class BaseDomainConfig(ABC):
    """Abstract base class for domain-specific configuration accessors.

    Usage:
        class MyConfig(BaseDomainConfig):
            def _config_section(self) -> str:
                return "mySection"

            @cached_property
            def my_setting(self) -> str:
                return self.section.get("mySetting", "default")

        cfg = MyConfig(repo_root=Path("/path/to/project"))
        print(cfg.my_setting)
    """

    def __init__(
        self,
        repo_root: Optional[Path] = None,
        *,
        config: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize domain config.

        Args:
            repo_root: Repository root path. Uses auto-detection if None.
            config: Already-loaded configuration (skips loading when given).
        """
        manager = ConfigManager(repo_root)
        self._repo_root = manager.repo_root
        self._config = config if config is not None else manager.load_config()

    @property
    def repo_root(self) -> Path:
        return self._repo_root

    @property
    def config(self) -> Dict[str, Any]:
        return self._config

    @abstractmethod
    def _config_section(self) -> str:
        """Return the top-level config key for this domain."""
        ...

    @cached_property
    def section(self) -> Dict[str, Any]:
        """Get this domain's configuration section (empty dict when absent)."""
        return self._config.get(self._config_section(), {}) or {}


__all__ = ["BaseDomainConfig"]
