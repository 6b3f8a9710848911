"""Shared schema validation utilities.

Plasma validates structured YAML payloads using JSON Schema. Schemas are
stored as YAML files under ``plasma.data/schemas/`` and loaded in a single,
consistent way.
"""
from __future__ import annotations

from typing import Any, Dict, List

from jsonschema import Draft202012Validator

from plasma.data import get_data_path, read_yaml


class SchemaValidationError(ValueError):
    """Raised when schema validation fails."""

    def __init__(self, message: str, errors: List[str] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema by name.

    Automatically appends ``.yaml`` if no extension is present.

    Raises:
        FileNotFoundError: If schema file doesn't exist.
        ValueError: If schema is not a YAML mapping.
    """
    lowered = schema_name.lower()
    if not (lowered.endswith(".yaml") or lowered.endswith(".yml")):
        schema_name = f"{schema_name}.yaml"

    schema_path = get_data_path("schemas", schema_name)
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_name} (searched {schema_path.parent})")

    schema = read_yaml("schemas", schema_name)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def validate_payload(payload: Dict[str, Any], schema_name: str) -> None:
    """Validate a payload against a bundled JSON schema.

    All violations are collected so a single run reports every problem.

    Raises:
        SchemaValidationError: If validation fails.
    """
    schema = load_schema(schema_name)
    validator = Draft202012Validator(schema)

    errors: List[str] = []
    for err in sorted(validator.iter_errors(payload), key=lambda e: list(e.path)):
        location = ".".join(str(p) for p in err.path) or "<root>"
        errors.append(f"{location}: {err.message}")

    if errors:
        raise SchemaValidationError(
            f"Validation failed against schema '{schema_name}': " + "; ".join(errors),
            errors,
        )


__all__ = ["SchemaValidationError", "load_schema", "validate_payload"]
