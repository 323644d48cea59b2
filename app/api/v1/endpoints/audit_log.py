"""Audit log API: read-only view of the SystemLog trail for one entity."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.v1.dependencies import get_lifecycle_store, require_action
from app.application.dtos.user import PrincipalResult
from app.domain.enums import Action
from app.infrastructure.persistence.repositories import SqlLifecycleStore
from app.schemas.audit_log import AuditLogEntryResponse, AuditLogListResponse

router = APIRouter()


@router.get("", response_model=AuditLogListResponse)
async def list_audit_log(
    current_user: Annotated[PrincipalResult, Depends(require_action(Action.VIEW_AUDIT_LOG))],
    store: Annotated[SqlLifecycleStore, Depends(get_lifecycle_store)],
    entity_type: Annotated[str, Query(min_length=1)],
    entity_id: Annotated[str, Query(min_length=1)],
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
):
    """Audit records for one entity, newest first."""
    async with store.transaction("read audit log") as uow:
        entries = await uow.audit_log.list_for_entity(entity_type, entity_id, limit=limit)
    return AuditLogListResponse(
        items=[AuditLogEntryResponse.model_validate(e) for e in entries],
        limit=limit,
    )
