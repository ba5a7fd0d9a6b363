"""
External audit transports for audit-dispatch.

Transports deliver rendered audit records to a security audit facility
outside the process log stream.
"""

from audit_dispatch.transports.base import AUDIT_USYS_CONFIG, AuditHandle, AuditTransport
from audit_dispatch.transports.libaudit import LibauditHandle, LibauditTransport
from audit_dispatch.transports.memory import MemoryHandle, MemoryTransport, TransportMessage

__all__ = [
    "AUDIT_USYS_CONFIG",
    "AuditHandle",
    "AuditTransport",
    "LibauditHandle",
    "LibauditTransport",
    "MemoryHandle",
    "MemoryTransport",
    "TransportMessage",
]
