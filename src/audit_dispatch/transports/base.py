"""
Interfaces of the external audit transport.
"""

from typing import Protocol, runtime_checkable

# Linux audit record type for user space configuration changes.
AUDIT_USYS_CONFIG = 1103


@runtime_checkable
class AuditHandle(Protocol):
    """
    An open connection to an audit transport.

    Writes are best effort: any exception raised by :meth:`write` is
    ignored by the caller.
    """

    def write(self, message: str, category: int, success: bool) -> None:
        """
        Write one audit message.

        Args:
            message: Rendered ``name=value`` text.
            category: Audit record type tag.
            success: Result of the audited operation.
        """
        ...

    def close(self) -> None:
        """Release the handle."""
        ...


@runtime_checkable
class AuditTransport(Protocol):
    """
    Factory for audit handles plus the transport's name/value encoding.

    Implementations raise ``OSError`` from :meth:`open` when the transport
    is unavailable.
    """

    def open(self) -> AuditHandle:
        """Open a new handle."""
        ...

    def encode_nv_string(self, name: str, value: str) -> str | None:
        """Encode a name/value pair, or return None if it cannot be encoded safely."""
        ...
