"""
Plasma configuration management (YAML layers + environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from plasma.core.exceptions import ConfigError
from plasma.core.schemas import SchemaValidationError, validate_payload
from plasma.core.utils.io import iter_yaml_files, read_yaml
from plasma.core.utils.merge import deep_merge
from plasma.core.utils.paths import (
    get_project_config_dir,
    get_user_config_dir,
    resolve_project_root,
)
from plasma.data import get_data_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "PLASMA_"
CONFIG_SCHEMA = "config.schema"


class ConfigManager:
    """Load, merge, and validate Plasma configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: PLASMA_<section>__<key>
    2. Project-local config: <repo>/.plasma/config.local/*.yaml (alphabetical order, uncommitted)
    3. Project config: <repo>/.plasma/config/*.yaml (alphabetical order)
    4. User config: ~/.plasma/config/*.yaml (alphabetical order)
    5. Bundled defaults: plasma.data/config/*.yaml (alphabetical order)
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self.repo_root = Path(repo_root) if repo_root is not None else resolve_project_root()

        project_dir = get_project_config_dir(self.repo_root)
        self.core_config_dir = get_data_path("config")
        self.user_config_dir = get_user_config_dir() / "config"
        self.project_config_dir = project_dir / "config"
        self.project_local_config_dir = project_dir / "config.local"

    def config_dirs(self) -> List[Path]:
        """Return config directories in low→high precedence order (excluding env)."""
        return [
            self.core_config_dir,
            self.user_config_dir,
            self.project_config_dir,
            self.project_local_config_dir,
        ]

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path in iter_yaml_files(directory):
            # Fail closed: configuration must never silently ignore invalid YAML.
            try:
                data = read_yaml(path, default={}, raise_on_error=True)
            except Exception as exc:
                raise ConfigError(
                    f"Invalid YAML in {path}: {exc}", context={"path": path}
                ) from exc
            if not isinstance(data, dict):
                raise ConfigError(
                    f"Config file must contain a mapping: {path}", context={"path": path}
                )
            cfg = deep_merge(cfg, data)
        return cfg

    # ---------- environment overrides ----------

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except ValueError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            # Only nested keys are config overrides (PLASMA_PROJECT_ROOT is not).
            if "__" not in raw:
                continue
            segs = raw.split("__")
            if any(seg == "" for seg in segs):
                raise ConfigError(
                    f"Malformed {ENV_PREFIX}* key: empty segment in '{key}'.",
                    context={"env": key},
                )
            yield [seg.lower() for seg in segs], self._coerce_type(os.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        cur: Any = root
        for part in path[:-1]:
            nxt = cur.get(part)
            if not isinstance(nxt, dict):
                nxt = {}
                cur[part] = nxt
            cur = nxt
        cur[path[-1]] = value

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, value in self._iter_env_overrides():
            logger.debug("Config override from environment: %s", ".".join(path))
            self._set_nested(cfg, path, value)

    # ---------- loading ----------

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load and merge configuration from every layer.

        Args:
            validate: If True, validate the merged result against the bundled schema.

        Returns:
            Merged configuration dictionary

        Raises:
            ConfigError: On invalid YAML, malformed env keys, or schema violations.
        """
        cfg: Dict[str, Any] = {}
        for directory in self.config_dirs():
            cfg = self._load_directory(directory, cfg)
        self.apply_env_overrides(cfg)

        if validate:
            self.validate(cfg)
        return cfg

    def validate(self, cfg: Dict[str, Any]) -> None:
        try:
            validate_payload(cfg, CONFIG_SCHEMA)
        except SchemaValidationError as exc:
            raise ConfigError(str(exc), context={"repo_root": self.repo_root}) from exc


__all__ = ["ConfigManager", "ENV_PREFIX"]
