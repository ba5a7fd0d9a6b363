"""
Core AuditManager class.

Builds audit records for connection, device and generic operations and
dispatches them to two independent backends: a Python logger and an optional
external audit transport. Neither backend being unavailable ever makes an
audit call fail.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import Any

from audit_dispatch.config import AuditManagerConfig, ConfigChange
from audit_dispatch.encoding import MessageBuffer
from audit_dispatch.fields import AuditField, Backend
from audit_dispatch.record import (
    AuditContractError,
    ConnectionLike,
    DeviceLike,
    build_record,
    connection_fields,
    device_fields,
    generic_fields,
)
from audit_dispatch.subject import ActorContext, SubjectExtractor, resolve_subject
from audit_dispatch.transports.base import AuditHandle, AuditTransport

_log = logging.getLogger(__name__)

AUDIT_LOG_LEVEL = logging.INFO
DEFAULT_LOGGER_NAME = "audit"

# Frames between the public log_* method's caller and Logger.log().
_CALLER_STACKLEVEL = 4


class AuditManager:
    """
    Record audited operations to the log and to an external audit transport.

    The transport is opened while ``audit_enabled`` is set in the current
    configuration and closed otherwise. Configuration snapshots are pushed in
    with :meth:`apply_config`. Every ``log_*`` method is safe to call from any
    thread and whether or not any backend is active.

    Log backend lines carry only the rendered fields, without an ``audit: ``
    prefix; the logger name (``logger_name``) identifies them as audit records.

    Args:
        config: Initial configuration snapshot. Defaults to AuditManagerConfig().
        transport: External audit transport. None disables that backend.
        subject_extractor: Resolves ``InvocationContext.raw`` into an auth subject.
        logger_name: Name of the logger audit records are emitted to (default "audit").

    Example::

        from audit_dispatch import (
            AuditManager,
            AuditManagerConfig,
            LibauditTransport,
            UnixProcessSubject,
        )

        with AuditManager(AuditManagerConfig(audit_enabled=True), LibauditTransport()) as audit:
            audit.log_generic_op("reload", "eth0", True, actor=UnixProcessSubject(pid=100, uid=0))
    """

    def __init__(
        self,
        config: AuditManagerConfig | None = None,
        transport: AuditTransport | None = None,
        *,
        subject_extractor: SubjectExtractor | None = None,
        logger_name: str = DEFAULT_LOGGER_NAME,
    ) -> None:
        self._lock = threading.Lock()
        self._config: AuditManagerConfig | None = (
            config if config is not None else AuditManagerConfig()
        )
        self._transport = transport
        self._handle: AuditHandle | None = None
        self._extractor = subject_extractor
        self._audit_logger = logging.getLogger(logger_name)
        self._closed = False

        with self._lock:
            self._reconcile()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def config(self) -> AuditManagerConfig | None:
        """Return the current configuration, or None once closed."""
        return self._config

    @property
    def transport(self) -> AuditTransport | None:
        """Return the external audit transport."""
        return self._transport

    @property
    def transport_open(self) -> bool:
        """Whether a transport handle is currently held."""
        with self._lock:
            return self._handle is not None

    @property
    def logger_name(self) -> str:
        """Return the audit logger name."""
        return self._audit_logger.name

    def apply_config(
        self,
        config: AuditManagerConfig,
        changes: ConfigChange = ConfigChange.VALUES,
    ) -> None:
        """
        Apply a new configuration snapshot.

        The transport is only opened or closed when ``changes`` includes
        ``ConfigChange.VALUES``.

        Args:
            config: The new configuration.
            changes: What kind of change produced this snapshot.
        """
        with self._lock:
            if self._closed:
                _log.debug("Ignoring configuration change on closed audit manager")
                return

            self._config = config
            if ConfigChange.VALUES in changes:
                self._reconcile()

    def _reconcile(self) -> None:
        """Open or close the transport to match the current configuration. Caller holds the lock."""
        config = self._config
        if config is not None and config.audit_enabled:
            if self._handle is None and self._transport is not None:
                try:
                    self._handle = self._transport.open()
                except Exception as exc:
                    _log.error("Failed to open audit transport: %s", exc)
                else:
                    _log.debug("Audit transport opened")
        elif self._handle is not None:
            self._close_handle()

    def _close_handle(self) -> None:
        handle, self._handle = self._handle, None
        try:
            handle.close()
        except Exception as exc:
            _log.debug("Error closing audit transport: %s", exc)
        else:
            _log.debug("Audit transport closed")

    def close(self) -> None:
        """Close the transport handle and release the configuration."""
        with self._lock:
            if self._handle is not None:
                self._close_handle()
            self._config = None
            self._closed = True

    def __enter__(self) -> AuditManager:
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Context manager exit - close the transport."""
        self.close()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _log_enabled(self) -> bool:
        return self._audit_logger.isEnabledFor(AUDIT_LOG_LEVEL)

    def audit_enabled(self) -> bool:
        """
        Whether any backend is currently active.

        Only an optimization hint: the ``log_*`` methods are free when
        nothing is active.
        """
        with self._lock:
            if self._handle is not None:
                return True
        return self._log_enabled()

    # ------------------------------------------------------------------
    # Audit entry points
    # ------------------------------------------------------------------

    def log_op(
        self,
        op: str,
        fields: Iterable[AuditField],
        result: bool,
        *,
        actor: ActorContext | None = None,
        reason: str | None = None,
    ) -> None:
        """
        Audit an operation described by arbitrary domain fields.

        Args:
            op: Operation name.
            fields: Domain fields, rendered in the given order after ``op``.
            result: Whether the operation succeeded.
            actor: Who performed the operation.
            reason: Optional explanation, rendered to the log backend only.
        """
        self._log_op(op, fields, result, actor, reason)

    def log_connection_op(
        self,
        op: str,
        connection: ConnectionLike | None,
        result: bool,
        *,
        args: str | None = None,
        actor: ActorContext | None = None,
        reason: str | None = None,
    ) -> None:
        """Audit an operation on a connection profile (``uuid``, ``name``)."""
        self._log_op(op, connection_fields(connection, args), result, actor, reason)

    def log_device_op(
        self,
        op: str,
        device: DeviceLike,
        result: bool,
        *,
        args: str | None = None,
        actor: ActorContext | None = None,
        reason: str | None = None,
    ) -> None:
        """Audit an operation on a device (``interface``, ``ifindex``)."""
        self._log_op(op, device_fields(device, args), result, actor, reason)

    def log_generic_op(
        self,
        op: str,
        arg: str,
        result: bool,
        *,
        args: str | None = None,
        actor: ActorContext | None = None,
        reason: str | None = None,
    ) -> None:
        """Audit an operation with a single free-form argument (``arg``)."""
        self._log_op(op, generic_fields(arg, args), result, actor, reason)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _log_op(
        self,
        op: str,
        fields: Iterable[AuditField],
        result: bool,
        actor: ActorContext | None,
        reason: str | None,
    ) -> None:
        if not op:
            raise AuditContractError("audit operation name is required")

        if not self.audit_enabled():
            return

        subject = resolve_subject(actor, self._extractor)
        record = build_record(op, fields, result=result, subject=subject, reason=reason)
        self._dispatch(record, result)

    def _dispatch(self, record: list[AuditField], success: bool) -> None:
        """Render and deliver a record to every active backend."""
        buf: MessageBuffer | None = None

        with self._lock:
            handle = self._handle
            if handle is not None:
                buf = MessageBuffer()
                message = buf.render(record, Backend.AUDITD, self._transport.encode_nv_string)
                try:
                    handle.write(message, self._config.category, success)
                except Exception as exc:
                    _log.debug("Dropped audit transport message: %s", exc)

        if self._log_enabled():
            if buf is None:
                buf = MessageBuffer()
            self._audit_logger.log(
                AUDIT_LOG_LEVEL,
                buf.render(record, Backend.LOG),
                extra={"audit": True},
                stacklevel=_CALLER_STACKLEVEL,
            )
