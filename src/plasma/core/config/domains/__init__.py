"""Domain-specific configuration accessors."""
from __future__ import annotations

from .compose import ComposeConfig
from .logging import LoggingConfig

__all__ = ["ComposeConfig", "LoggingConfig"]
