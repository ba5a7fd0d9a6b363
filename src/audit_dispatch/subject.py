"""
Actor identity resolution.

Callers describe who performed an audited operation with an actor context.
The context is either an already resolved auth subject, an
:class:`InvocationContext` wrapping a wire-level request from which a subject
has to be extracted, or ``None``. Only Unix process subjects contribute
identity fields (``pid`` and ``uid``) to an audit record.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union

from audit_dispatch.fields import UINT64_MAX, AuditField, uint64_field

_log = logging.getLogger(__name__)

# Reserved pid/uid value meaning "not available".
UNAVAILABLE = UINT64_MAX


@dataclass(frozen=True)
class UnixProcessSubject:
    """A local process identified by its pid and uid."""

    pid: int = UNAVAILABLE
    uid: int = UNAVAILABLE
    start_time: int = 0


@dataclass(frozen=True)
class UnixSessionSubject:
    """A login session; carries no process identity."""

    session_id: str


@dataclass(frozen=True)
class InternalSubject:
    """The service acting on its own behalf."""


AuthSubject = Union[UnixProcessSubject, UnixSessionSubject, InternalSubject]


@dataclass(frozen=True)
class InvocationContext:
    """
    A wire-level invocation context (for example an incoming bus method call).

    The subject is extracted lazily by the manager's subject extractor.
    """

    raw: Any


ActorContext = Union[UnixProcessSubject, UnixSessionSubject, InternalSubject, InvocationContext]

SubjectExtractor = Callable[[Any], AuthSubject | None]

_SUBJECT_TYPES = (UnixProcessSubject, UnixSessionSubject, InternalSubject)


def resolve_subject(
    actor: ActorContext | None,
    extractor: SubjectExtractor | None = None,
) -> AuthSubject | None:
    """
    Resolve an actor context into an auth subject.

    Never raises: an unrecognized context is reported with a warning and an
    extraction failure with a debug message, both resolving to ``None``.

    Args:
        actor: The caller-supplied actor context.
        extractor: Maps ``InvocationContext.raw`` to a subject.

    Returns:
        The resolved subject, or None if no identity is available.
    """
    if actor is None:
        return None

    if isinstance(actor, _SUBJECT_TYPES):
        return actor

    if isinstance(actor, InvocationContext):
        if extractor is None:
            _log.debug("No subject extractor configured, dropping actor identity")
            return None
        try:
            subject = extractor(actor.raw)
        except Exception as exc:
            _log.debug("Failed to extract auth subject from invocation context: %s", exc)
            return None
        if subject is not None and not isinstance(subject, _SUBJECT_TYPES):
            _log.warning(
                "Subject extractor returned unsupported type %s", type(subject).__name__
            )
            return None
        return subject

    _log.warning("Unrecognized actor context of type %s", type(actor).__name__)
    return None


def _available(value: object) -> bool:
    # negative or oversized ids (e.g. -1 from a C API) count as unavailable
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value < UNAVAILABLE


def subject_fields(subject: AuthSubject | None) -> list[AuditField]:
    """Return the pid/uid fields for a subject, omitting unavailable values."""
    if not isinstance(subject, UnixProcessSubject):
        return []

    fields = []
    if _available(subject.pid):
        fields.append(uint64_field("pid", subject.pid))
    if _available(subject.uid):
        fields.append(uint64_field("uid", subject.uid))
    return fields
