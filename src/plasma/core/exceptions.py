from __future__ import annotations

from typing import Any, Dict, Mapping


class PlasmaError(Exception):
    """Base exception for Plasma."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": {k: str(v) for k, v in self.context.items()},
        }


class ConfigError(PlasmaError, ValueError):
    """Raised when configuration is missing, malformed or fails validation."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        PlasmaError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


__all__ = [
    "PlasmaError",
    "ConfigError",
]
