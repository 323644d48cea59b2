"""Pydantic request/response schemas for the API."""

from app.schemas.audit_log import AuditLogEntryResponse, AuditLogListResponse
from app.schemas.health import HealthResponse
from app.schemas.lifecycle import BulkLifecycleResponse, LifecycleResponse

__all__ = [
    "AuditLogEntryResponse",
    "AuditLogListResponse",
    "BulkLifecycleResponse",
    "HealthResponse",
    "LifecycleResponse",
]
