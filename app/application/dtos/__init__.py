"""Application DTOs (no ORM dependency)."""

from app.application.dtos.audit_log import (
    AuditEvent,
    AuditLogEntryCreate,
    AuditLogResult,
)
from app.application.dtos.lifecycle import (
    BulkLifecycleResult,
    EntitySnapshot,
    LifecycleResult,
)
from app.application.dtos.role import RoleAssignmentView
from app.application.dtos.user import PrincipalResult

__all__ = [
    "AuditEvent",
    "AuditLogEntryCreate",
    "AuditLogResult",
    "BulkLifecycleResult",
    "EntitySnapshot",
    "LifecycleResult",
    "PrincipalResult",
    "RoleAssignmentView",
]
