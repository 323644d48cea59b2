"""Request/response schemas for audit log API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class AuditLogEntryResponse(BaseModel):
    """Single audit log entry (read)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str | None
    action: str
    entity_type: str
    entity_id: str | None
    severity: str
    description: str
    metadata: dict[str, Any] | None = None
    old_values: dict[str, Any] | None = None
    ip_address: str | None = None
    request_id: str | None = None
    created_at: datetime


class AuditLogListResponse(BaseModel):
    """List of audit log entries for one entity (newest first)."""

    items: list[AuditLogEntryResponse]
    limit: int
