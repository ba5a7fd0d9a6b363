"""
Configuration validation utilities.

Provides both minimal always-on validation and optional full JSON schema
validation (requires the [jsonschema] extra).
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from functools import cache
from pathlib import Path
from typing import Any

SCHEMA_PATH = Path(__file__).with_name("config.schema.json")


class ConfigError(ValueError):
    """Raised when an audit configuration mapping fails validation."""


_TRUE_VALUES = {"true", "yes", "on", "1"}
_FALSE_VALUES = {"false", "no", "off", "0"}


def parse_boolean(value: Any) -> bool:
    """
    Parse a keyfile style boolean.

    Accepts real booleans and the strings true/false, yes/no, on/off, 1/0
    (case insensitive, surrounding whitespace ignored).

    Raises:
        ConfigError: If the value is not a recognizable boolean.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
    raise ConfigError(f"not a boolean value: {value!r}")


def validate_config_minimal(data: Mapping[str, Any]) -> None:
    """
    Perform minimal validation on a configuration mapping.

    Checks:
    - The top level is a mapping
    - The ``logging`` group, if present, is a mapping
    - ``logging.audit``, if present, parses as a boolean

    Args:
        data: Keyfile shaped mapping, ``{"logging": {"audit": ...}}``.

    Raises:
        ConfigError: If the mapping fails validation.
    """
    if not isinstance(data, Mapping):
        raise ConfigError(f"configuration must be a mapping, got {type(data).__name__}")

    group = data.get("logging")
    if group is None:
        return
    if not isinstance(group, Mapping):
        raise ConfigError(f"[logging] must be a mapping, got {type(group).__name__}")

    if "audit" in group:
        try:
            parse_boolean(group["audit"])
        except ConfigError as exc:
            raise ConfigError(f"invalid logging.audit: {exc}") from None


@cache
def load_schema() -> dict[str, Any]:
    """Load the vendored configuration JSON schema (cached)."""
    with open(SCHEMA_PATH, encoding="utf-8") as f:
        return json.load(f)


def validate_config(data: Mapping[str, Any]) -> None:
    """
    Validate a configuration mapping against ``config.schema.json``.

    Every schema violation is reported, not only the first one. Requires the
    ``jsonschema`` extra (``pip install audit-dispatch[jsonschema]``).

    Raises:
        ConfigError: If the mapping violates the schema.
        ImportError: If jsonschema is not installed.
    """
    try:
        from jsonschema import Draft202012Validator
    except ImportError:
        raise ImportError(
            "validate_config needs jsonschema: pip install audit-dispatch[jsonschema]"
        ) from None

    validator = Draft202012Validator(load_schema())
    problems = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
    if problems:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.absolute_path) or '<root>'}: {err.message}"
            for err in problems
        )
        raise ConfigError(f"invalid audit configuration: {details}")
