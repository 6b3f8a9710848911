"""Unified CLI output formatting utilities.

This module provides consistent output formatting for all Plasma CLI commands,
supporting both JSON and text output modes.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional


class OutputFormatter:
    """Unified output formatter for CLI commands."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON; otherwise output text
            indent: JSON indentation level
        """
        self.json_mode = json_mode
        self.indent = indent

    def success(
        self,
        data: Dict[str, Any],
        message: str,
        *,
        status: str = "success",
    ) -> None:
        """Output success result (``data`` in JSON mode, ``message`` in text mode)."""
        if self.json_mode:
            output = {"status": status, **data}
            print(json.dumps(output, indent=self.indent, default=str))
        else:
            print(message)

    def error(
        self,
        error: Exception,
        message: Optional[str] = None,
        *,
        error_code: str = "error",
    ) -> None:
        """Output error result to stderr.

        Args:
            error: The exception that occurred
            message: Optional human-readable message (defaults to str(error))
            error_code: Error code for JSON output
        """
        msg = message or str(error)
        if self.json_mode:
            output: Dict[str, Any] = {
                "error": error_code,
                "message": msg,
            }
            to_json = getattr(error, "to_json_error", None)
            if callable(to_json):
                payload = to_json()
                output["code"] = payload["code"]
                if payload["context"]:
                    output["context"] = payload["context"]
            print(json.dumps(output, indent=self.indent), file=sys.stderr)
        else:
            print(f"Error: {msg}", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        """Output raw JSON data."""
        print(json.dumps(data, indent=self.indent, default=str))

    def text(self, message: str) -> None:
        """Output plain text message."""
        print(message)

    def text_kv(self, key: str, value: Any, prefix: str = "  ") -> None:
        """Output key-value pair in text mode."""
        if not self.json_mode:
            print(f"{prefix}{key}: {value}")


__all__ = ["OutputFormatter"]
