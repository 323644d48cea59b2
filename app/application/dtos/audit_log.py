"""DTOs for the audit trail (SystemLog rows)."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.shared.enums import AuditAction, AuditSeverity


@dataclass(frozen=True)
class AuditEvent:
    """Input for appending one audit record. Append-only; no update."""

    actor_id: str | None
    action: AuditAction
    entity_type: str
    entity_id: str | None
    severity: AuditSeverity
    description: str
    metadata: dict[str, Any] = field(default_factory=dict)
    before: dict[str, Any] | None = None


@dataclass(frozen=True)
class AuditLogEntryCreate:
    """Row-shaped audit record handed to the repository."""

    user_id: str | None
    action: str
    entity_type: str
    entity_id: str | None
    severity: str
    description: str
    metadata: dict[str, Any]
    old_values: dict[str, Any] | None
    ip_address: str | None
    request_id: str | None


@dataclass(frozen=True)
class AuditLogResult:
    """Single audit record (read-model)."""

    id: str
    user_id: str | None
    action: str
    entity_type: str
    entity_id: str | None
    severity: str
    description: str
    metadata: dict[str, Any] | None
    old_values: dict[str, Any] | None
    ip_address: str | None
    request_id: str | None
    created_at: datetime
