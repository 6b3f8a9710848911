"""Domain-specific configuration for image composition."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Dict

from plasma.core.exceptions import ConfigError
from plasma.core.utils.paths import resolve_repo_path

from ..base import BaseDomainConfig


class ComposeConfig(BaseDomainConfig):
    """Accessor for the ``compose``, ``paths`` and ``file_locking`` settings."""

    def _config_section(self) -> str:
        return "compose"

    @cached_property
    def clean(self) -> bool:
        return bool(self.section.get("clean", True))

    @cached_property
    def selections(self) -> Dict[str, str]:
        """Configured package selections (name -> resolved target)."""
        raw = self.section.get("packages") or {}
        if not isinstance(raw, dict):
            raise ConfigError("compose.packages must be a mapping of name -> target")
        for name, target in raw.items():
            # YAML reads 1.10 as the float 1.1; only quoted targets are exact.
            if not isinstance(target, str):
                raise ConfigError(
                    f"compose.packages.{name} must be a string target; "
                    f"quote version-like values (got {target!r})",
                    context={"package": name},
                )
        return {str(name): target for name, target in raw.items()}

    @cached_property
    def _paths(self) -> Dict[str, str]:
        return self.config.get("paths") or {}

    @cached_property
    def packages_dir(self) -> Path:
        return resolve_repo_path(self.repo_root, self._paths.get("packages_dir", ".plasma/compose/packages"))

    @cached_property
    def output_dir(self) -> Path:
        return resolve_repo_path(self.repo_root, self._paths.get("output_dir", ".plasma/compose/image/src"))

    @cached_property
    def lock_timeout(self) -> float:
        locking = self.config.get("file_locking") or {}
        return float(locking.get("timeout_seconds", 30))

    @cached_property
    def lock_poll_interval(self) -> float:
        locking = self.config.get("file_locking") or {}
        return float(locking.get("poll_interval_seconds", 0.1))


__all__ = ["ComposeConfig"]
