"""
In-memory audit transport for testing and development.
"""

from __future__ import annotations

from dataclasses import dataclass

from audit_dispatch.encoding import NvEncoder, encode_nv_string


@dataclass(frozen=True)
class TransportMessage:
    """One message written to a :class:`MemoryTransport`."""

    message: str
    category: int
    success: bool


class MemoryHandle:
    """Handle returned by :meth:`MemoryTransport.open`."""

    def __init__(self, transport: MemoryTransport) -> None:
        self._transport = transport
        self.closed = False

    def write(self, message: str, category: int, success: bool) -> None:
        if self.closed:
            raise OSError("audit handle is closed")
        if self._transport.fail_write:
            raise OSError("simulated audit write failure")
        self._transport.messages.append(TransportMessage(message, category, success))

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._transport.close_count += 1


class MemoryTransport:
    """
    In-memory audit transport that stores written messages in a list.

    Useful for testing and development. Not intended for production use.

    Args:
        encoder: Name/value encoder. Defaults to the Linux audit convention.
        fail_open: Make :meth:`open` raise ``OSError``.
        fail_write: Make handle writes raise ``OSError``.
    """

    def __init__(
        self,
        encoder: NvEncoder | None = None,
        *,
        fail_open: bool = False,
        fail_write: bool = False,
    ) -> None:
        self._encoder = encoder if encoder is not None else encode_nv_string
        self.fail_open = fail_open
        self.fail_write = fail_write
        self.messages: list[TransportMessage] = []
        self.open_count = 0
        self.close_count = 0

    def open(self) -> MemoryHandle:
        if self.fail_open:
            raise OSError("simulated audit open failure")
        self.open_count += 1
        return MemoryHandle(self)

    def encode_nv_string(self, name: str, value: str) -> str | None:
        return self._encoder(name, value)

    def clear(self) -> None:
        """Clear all stored messages."""
        self.messages.clear()

    def __len__(self) -> int:
        """Return the number of stored messages."""
        return len(self.messages)
