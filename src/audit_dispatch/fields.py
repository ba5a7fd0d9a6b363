"""
Typed audit fields.

A field is one ``name=value`` unit of an audit record. Each field carries
the set of backends it is rendered for and, for strings, whether the value
must go through the audit transport's name/value encoder.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

UINT64_MAX = (1 << 64) - 1


class Backend(enum.Flag):
    """Delivery targets an audit field can be rendered for."""

    LOG = enum.auto()
    AUDITD = enum.auto()
    ALL = LOG | AUDITD


@dataclass(frozen=True)
class AuditField:
    """
    A single named value of an audit record.

    Only ``str`` and unsigned 64-bit ``int`` values are allowed. Anything
    else is a programming error and is rejected at construction.

    Args:
        name: Field name, rendered as the key.
        value: String or unsigned integer value.
        backends: Backends this field is rendered for.
        need_encoding: Whether the value must be encoded for the audit transport.
    """

    name: str
    value: str | int
    backends: Backend = Backend.ALL
    need_encoding: bool = False

    def __post_init__(self) -> None:
        value = self.value
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise TypeError(
                f"audit field {self.name!r}: unsupported value type {type(value).__name__}"
            )
        if isinstance(value, int) and not 0 <= value <= UINT64_MAX:
            raise ValueError(f"audit field {self.name!r}: {value} is not an unsigned 64-bit value")

    @property
    def is_string(self) -> bool:
        return isinstance(self.value, str)


def string_field(
    name: str,
    value: str,
    *,
    need_encoding: bool = False,
    backends: Backend = Backend.ALL,
) -> AuditField:
    """Build a string field."""
    if not isinstance(value, str):
        raise TypeError(f"audit field {name!r}: expected str, got {type(value).__name__}")
    return AuditField(name, value, backends, need_encoding)


def uint64_field(name: str, value: int, *, backends: Backend = Backend.ALL) -> AuditField:
    """Build an unsigned integer field."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"audit field {name!r}: expected int, got {type(value).__name__}")
    return AuditField(name, value, backends)
