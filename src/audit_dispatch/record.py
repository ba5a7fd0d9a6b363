"""
Audit record construction.

A record is the ordered list of fields describing one audited operation:
the operation name, the caller's domain fields, the actor identity, the
result and an optional reason. The domain helpers below build the field
lists for the common event shapes (connection, device, generic).
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from audit_dispatch.fields import AuditField, Backend, string_field, uint64_field
from audit_dispatch.subject import AuthSubject, subject_fields


class AuditContractError(ValueError):
    """Raised when an audit call is missing a mandatory argument."""


class ConnectionLike(Protocol):
    """Anything exposing a connection's uuid and display id."""

    @property
    def uuid(self) -> str: ...

    @property
    def id(self) -> str: ...


class DeviceLike(Protocol):
    """Anything exposing a device's IP interface name and index."""

    @property
    def ip_iface(self) -> str: ...

    @property
    def ip_ifindex(self) -> int: ...


def build_record(
    op: str,
    fields: Iterable[AuditField] = (),
    *,
    result: bool,
    subject: AuthSubject | None = None,
    reason: str | None = None,
) -> list[AuditField]:
    """
    Assemble the canonical field sequence for one audit event.

    Order is: ``op``, the domain fields as given, ``pid``/``uid`` of the
    subject when available, ``result`` and finally ``reason``. The reason is
    only ever rendered for the log backend.

    Args:
        op: Operation name. Must be non-empty.
        fields: Domain fields in caller order.
        result: Whether the operation succeeded.
        subject: Resolved auth subject of the actor, if any.
        reason: Optional failure or context explanation.

    Returns:
        The ordered list of fields.

    Raises:
        AuditContractError: If ``op`` is empty.
    """
    if not op:
        raise AuditContractError("audit operation name is required")

    record = [string_field("op", op)]
    record.extend(fields)
    record.extend(subject_fields(subject))
    record.append(string_field("result", "success" if result else "fail"))
    if reason is not None:
        record.append(string_field("reason", reason, backends=Backend.LOG))
    return record


def _args_fields(args: str | None) -> list[AuditField]:
    if args is None:
        return []
    return [string_field("args", args)]


def connection_fields(connection: ConnectionLike | None, args: str | None = None) -> list[AuditField]:
    """Domain fields for a connection event; the connection is optional."""
    fields = []
    if connection is not None:
        fields.append(string_field("uuid", connection.uuid))
        fields.append(string_field("name", connection.id, need_encoding=True))
    fields.extend(_args_fields(args))
    return fields


def device_fields(device: DeviceLike, args: str | None = None) -> list[AuditField]:
    """Domain fields for a device event."""
    if device is None:
        raise AuditContractError("device audit events require a device")

    fields = [string_field("interface", device.ip_iface, need_encoding=True)]
    ifindex = device.ip_ifindex
    if ifindex is not None and ifindex > 0:
        fields.append(uint64_field("ifindex", ifindex))
    fields.extend(_args_fields(args))
    return fields


def generic_fields(arg: str, args: str | None = None) -> list[AuditField]:
    """Domain fields for a generic event carrying a single argument."""
    if arg is None:
        raise AuditContractError("generic audit events require an argument")
    fields = [string_field("arg", arg, need_encoding=True)]
    fields.extend(_args_fields(args))
    return fields
