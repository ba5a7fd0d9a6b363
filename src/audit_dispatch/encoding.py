"""
Rendering of audit records into backend wire text.

The log backend gets ``name="value"`` for strings. The audit transport gets
``name=value`` for plain strings and the transport's own name/value encoding
for strings flagged ``need_encoding``; when the transport cannot encode a
value the fragment becomes ``name=???``. Integers are ``name=123`` for both.
"""

from __future__ import annotations

import io
from collections.abc import Callable, Iterable

from audit_dispatch.fields import AuditField, Backend

NvEncoder = Callable[[str, str], str | None]

ENCODE_FAILED = "???"


def value_needs_encoding(value: str) -> bool:
    """Whether a value contains characters outside printable ASCII, space or a double quote."""
    return any(ch == '"' or ord(ch) < 0x21 or ord(ch) > 0x7E for ch in value)


def encode_nv_string(name: str, value: str) -> str | None:
    """
    Encode a name/value pair following the Linux audit convention.

    Safe values are quoted, ``name="value"``. Values with spaces, quotes,
    control or non-ASCII characters are rendered as upper-case hex of their
    UTF-8 bytes, ``name=776C20616E30``.

    Args:
        name: Field name.
        value: Field value.

    Returns:
        The encoded fragment, or None if the name itself is not representable.
    """
    if not name or "=" in name or value_needs_encoding(name):
        return None
    if value_needs_encoding(value):
        return f"{name}={value.encode('utf-8').hex().upper()}"
    return f'{name}="{value}"'


def _encode(encoder: NvEncoder | None, name: str, value: str) -> str | None:
    """Run the transport encoder; a raising encoder counts as a failed encoding."""
    if encoder is None:
        return None
    try:
        return encoder(name, value)
    except Exception:
        return None


class MessageBuffer:
    """
    Reusable text buffer for rendering one record for several backends.

    A buffer is meant to live for a single audit call. Each :meth:`render`
    rewinds it without releasing the already allocated storage.
    """

    def __init__(self) -> None:
        self._buf = io.StringIO()

    def _reset(self) -> None:
        self._buf.seek(0)
        self._buf.truncate(0)

    def render(
        self,
        fields: Iterable[AuditField],
        backend: Backend,
        encoder: NvEncoder | None = None,
    ) -> str:
        """
        Render the fields selected for ``backend`` as one space separated line.

        Args:
            fields: The record, in order.
            backend: Either ``Backend.LOG`` or ``Backend.AUDITD``.
            encoder: Name/value encoder of the audit transport, used for
                ``need_encoding`` strings on ``Backend.AUDITD``.

        Returns:
            The rendered text.
        """
        self._reset()
        buf = self._buf
        first = True

        for field in fields:
            if not field.backends & backend:
                continue

            if first:
                first = False
            else:
                buf.write(" ")

            value = field.value
            if isinstance(value, str):
                if backend is Backend.AUDITD:
                    if field.need_encoding:
                        encoded = _encode(encoder, field.name, value)
                        if encoded is None:
                            buf.write(f"{field.name}={ENCODE_FAILED}")
                        else:
                            buf.write(encoded)
                    else:
                        buf.write(f"{field.name}={value}")
                else:
                    buf.write(f'{field.name}="{value}"')
            elif isinstance(value, int):
                buf.write(f"{field.name}={value:d}")
            else:
                raise TypeError(
                    f"audit field {field.name!r}: unsupported value type {type(value).__name__}"
                )

        return buf.getvalue()
