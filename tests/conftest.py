"""
Shared fixtures for audit-dispatch tests.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass

import pytest

from audit_dispatch import AuditManager, AuditManagerConfig, MemoryTransport


@dataclass
class _Connection:
    uuid: str
    id: str


@dataclass
class _Device:
    ip_iface: str
    ip_ifindex: int


def _reject_unsafe(name: str, value: str) -> str | None:
    if " " in value:
        return None
    return f"{name}={value}"


@pytest.fixture
def audit_logger_name() -> str:
    """Logger name used by managers built with make_manager."""
    return "audit.test"


@pytest.fixture
def log_enabled(
    caplog: pytest.LogCaptureFixture, audit_logger_name: str
) -> pytest.LogCaptureFixture:
    """Enable the audit log backend and capture its records."""
    caplog.set_level(logging.INFO, logger=audit_logger_name)
    return caplog


@pytest.fixture
def log_disabled(
    caplog: pytest.LogCaptureFixture, audit_logger_name: str
) -> pytest.LogCaptureFixture:
    """Disable the audit log backend."""
    caplog.set_level(logging.WARNING, logger=audit_logger_name)
    return caplog


@pytest.fixture
def strict_encoder() -> Callable[[str, str], str | None]:
    """Name/value encoder that refuses any value containing a space."""
    return _reject_unsafe


@pytest.fixture
def make_connection() -> type[_Connection]:
    """Factory for connection-like objects (uuid, id)."""
    return _Connection


@pytest.fixture
def make_device() -> type[_Device]:
    """Factory for device-like objects (ip_iface, ip_ifindex)."""
    return _Device


@pytest.fixture
def memory_transport() -> MemoryTransport:
    """Create a fresh memory transport for testing."""
    return MemoryTransport()


@pytest.fixture
def enabled_config() -> AuditManagerConfig:
    """Config with the external audit transport enabled."""
    return AuditManagerConfig(audit_enabled=True)


@pytest.fixture
def make_manager(
    memory_transport: MemoryTransport,
    audit_logger_name: str,
) -> Iterator[Callable[..., AuditManager]]:
    """Factory for managers logging to the test logger; closes them afterwards."""
    managers: list[AuditManager] = []

    def factory(
        config: AuditManagerConfig | None = None,
        transport: MemoryTransport | None = memory_transport,
        **kwargs,
    ) -> AuditManager:
        kwargs.setdefault("logger_name", audit_logger_name)
        manager = AuditManager(config, transport, **kwargs)
        managers.append(manager)
        return manager

    yield factory

    for manager in managers:
        manager.close()
