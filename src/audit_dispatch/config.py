"""
Configuration for AuditManager.
"""

from __future__ import annotations

import configparser
import enum
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from audit_dispatch.transports.base import AUDIT_USYS_CONFIG
from audit_dispatch.validation import ConfigError, parse_boolean, validate_config_minimal

LOGGING_GROUP = "logging"
AUDIT_KEY = "audit"
DEFAULT_AUDIT_ENABLED = False


class ConfigChange(enum.Flag):
    """Kinds of configuration change notifications."""

    NONE = 0
    VALUES = enum.auto()
    SIGHUP = enum.auto()
    SIGUSR1 = enum.auto()
    DNS_RC = enum.auto()


@dataclass(frozen=True)
class AuditManagerConfig:
    """
    Configuration snapshot for AuditManager.

    Args:
        audit_enabled: Whether the external audit transport should be open (default False).
        category: Audit record type tag passed with every transport write
            (default AUDIT_USYS_CONFIG).
    """

    audit_enabled: bool = DEFAULT_AUDIT_ENABLED
    category: int = AUDIT_USYS_CONFIG

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], **overrides: Any) -> AuditManagerConfig:
        """
        Build a config from a keyfile shaped mapping.

        Example::

            AuditManagerConfig.from_mapping({"logging": {"audit": "true"}})

        Raises:
            ConfigError: If the mapping fails minimal validation.
        """
        validate_config_minimal(data)
        group = data.get(LOGGING_GROUP) or {}
        enabled = DEFAULT_AUDIT_ENABLED
        if AUDIT_KEY in group:
            enabled = parse_boolean(group[AUDIT_KEY])
        return cls(audit_enabled=enabled, **overrides)

    @classmethod
    def from_keyfile(cls, path: str | Path, **overrides: Any) -> AuditManagerConfig:
        """
        Read a config from an INI keyfile, e.g.::

            [logging]
            audit=true

        A missing file yields the defaults.

        Raises:
            ConfigError: If the file cannot be parsed or holds invalid values.
        """
        parser = configparser.ConfigParser(interpolation=None)
        try:
            parser.read(Path(path), encoding="utf-8")
        except configparser.Error as exc:
            raise ConfigError(f"failed to parse {path}: {exc}") from exc

        data = {name: dict(parser.items(name)) for name in parser.sections()}
        return cls.from_mapping(data, **overrides)
