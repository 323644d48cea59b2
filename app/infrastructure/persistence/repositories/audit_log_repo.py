"""Audit log repository. Append-only; implements IAuditLogRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.audit_log import AuditLogEntryCreate, AuditLogResult
from app.infrastructure.persistence.models.system_log import SystemLog
from app.shared.utils.datetime import ensure_utc
from app.shared.utils.generators import generate_cuid


def _orm_to_result(row: SystemLog) -> AuditLogResult:
    """Map ORM to application DTO."""
    return AuditLogResult(
        id=row.id,
        user_id=row.user_id,
        action=row.action,
        entity_type=row.entity_type,
        entity_id=row.entity_id,
        severity=row.severity,
        description=row.description,
        metadata=row.metadata_,
        old_values=row.old_values,
        ip_address=row.ip_address,
        request_id=row.request_id,
        created_at=ensure_utc(row.created_at),
    )


class AuditLogRepository:
    """Append-only audit log repository. No update/delete."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def append(self, entry: AuditLogEntryCreate) -> AuditLogResult:
        """Append one audit log entry; return created record."""
        row = SystemLog(
            id=generate_cuid(),
            user_id=entry.user_id,
            action=entry.action,
            entity_type=entry.entity_type,
            entity_id=entry.entity_id,
            severity=entry.severity,
            description=entry.description,
            metadata_=entry.metadata,
            old_values=entry.old_values,
            ip_address=entry.ip_address,
            request_id=entry.request_id,
        )
        self.db.add(row)
        await self.db.flush()
        await self.db.refresh(row)
        return _orm_to_result(row)

    async def list_for_entity(
        self, entity_type: str, entity_id: str, *, limit: int = 100
    ) -> list[AuditLogResult]:
        """Audit records for one entity, newest first."""
        result = await self.db.execute(
            select(SystemLog)
            .where(SystemLog.entity_type == entity_type, SystemLog.entity_id == entity_id)
            .order_by(SystemLog.created_at.desc(), SystemLog.id.desc())
            .limit(limit)
        )
        return [_orm_to_result(row) for row in result.scalars().all()]
