"""
Linux audit transport.

Writes user space audit records through the libaudit Python bindings
(the ``audit`` module shipped with the distribution's libaudit package,
e.g. ``python3-audit``). The bindings are imported on first use so that the
rest of the package works on systems without them.
"""

from __future__ import annotations

from types import ModuleType
from typing import Any


def _load_bindings() -> ModuleType:
    try:
        import audit
    except ImportError as exc:
        raise OSError(
            "libaudit Python bindings are not available. "
            "Install your distribution's python3-audit package."
        ) from exc
    return audit


class LibauditHandle:
    """An open audit netlink socket."""

    def __init__(self, bindings: Any, fd: int) -> None:
        self._audit = bindings
        self._fd = fd

    @property
    def fd(self) -> int:
        return self._fd

    def write(self, message: str, category: int, success: bool) -> None:
        if self._fd < 0:
            raise OSError("audit socket is closed")
        r = self._audit.audit_log_user_message(
            self._fd, category, message, None, None, None, 1 if success else 0
        )
        if r <= 0:
            raise OSError(f"audit_log_user_message failed ({r})")

    def close(self) -> None:
        if self._fd >= 0:
            self._audit.audit_close(self._fd)
            self._fd = -1


class LibauditTransport:
    """
    Audit transport backed by the kernel audit subsystem.

    :meth:`open` raises ``OSError`` when the bindings are missing or the
    audit socket cannot be created (for example without ``CAP_AUDIT_WRITE``).
    """

    def open(self) -> LibauditHandle:
        bindings = _load_bindings()
        fd = bindings.audit_open()
        if fd < 0:
            raise OSError(f"audit_open failed ({fd})")
        return LibauditHandle(bindings, fd)

    def encode_nv_string(self, name: str, value: str) -> str | None:
        bindings = _load_bindings()
        return bindings.audit_encode_nv_string(name, value, 0)
