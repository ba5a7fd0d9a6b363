"""
audit-dispatch: dual-backend audit logging for Python services.

Builds ordered ``name=value`` audit records for operations on connections,
devices and other entities, and delivers them to a Python logger and to an
optional external security audit transport such as the Linux audit subsystem.
"""

__version__ = "0.1.0"

from audit_dispatch.config import AuditManagerConfig, ConfigChange
from audit_dispatch.encoding import MessageBuffer, encode_nv_string
from audit_dispatch.fields import AuditField, Backend, string_field, uint64_field
from audit_dispatch.manager import AuditManager
from audit_dispatch.record import AuditContractError, build_record
from audit_dispatch.subject import (
    UNAVAILABLE,
    InternalSubject,
    InvocationContext,
    UnixProcessSubject,
    UnixSessionSubject,
)
from audit_dispatch.transports import (
    AUDIT_USYS_CONFIG,
    AuditHandle,
    AuditTransport,
    LibauditTransport,
    MemoryTransport,
)
from audit_dispatch.validation import ConfigError, validate_config, validate_config_minimal

__all__ = [
    "__version__",
    # Core
    "AuditManager",
    "AuditManagerConfig",
    "ConfigChange",
    "AuditContractError",
    # Records
    "AuditField",
    "Backend",
    "build_record",
    "string_field",
    "uint64_field",
    # Encoding
    "MessageBuffer",
    "encode_nv_string",
    # Actor identity
    "UNAVAILABLE",
    "InternalSubject",
    "InvocationContext",
    "UnixProcessSubject",
    "UnixSessionSubject",
    # Transports
    "AUDIT_USYS_CONFIG",
    "AuditHandle",
    "AuditTransport",
    "LibauditTransport",
    "MemoryTransport",
    # Validation
    "ConfigError",
    "validate_config",
    "validate_config_minimal",
]
