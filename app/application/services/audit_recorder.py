"""Audit Recorder: append-only trail of privileged operations and denials.

Two paths:
- record_in(uow, event): inside the lifecycle transaction, so a summary
  record commits or rolls back together with the cascade.
- record(event): in its own transaction, used for failures and denials
  after the operation's transaction has rolled back. Best effort: a
  storage failure is logged to the audit fallback logger and swallowed so
  it never masks the original outcome.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any

from app.application.dtos.audit_log import AuditEvent, AuditLogEntryCreate
from app.application.interfaces.repositories import ILifecycleStore, ILifecycleUnitOfWork
from app.shared.context import (
    get_current_actor_id,
    get_current_ip_address,
    get_current_request_id,
)
from app.shared.enums import AuditAction, AuditSeverity
from app.shared.telemetry.logging import get_audit_fallback_logger, get_logger

logger = get_logger(__name__)

SENSITIVE_KEYS = frozenset({
    "password", "password_hash", "hashed_password", "secret", "api_key", "token",
    "credentials", "client_secret", "refresh_token", "access_token",
})


class AuditRecorder:
    """Builds SystemLog entries from AuditEvents and appends them."""

    def __init__(self, store: ILifecycleStore) -> None:
        self.store = store
        self._fallback = get_audit_fallback_logger()

    async def record_in(self, uow: ILifecycleUnitOfWork, event: AuditEvent) -> None:
        await uow.audit_log.append(self._to_entry(event))

    async def record(self, event: AuditEvent) -> None:
        entry = self._to_entry(event)
        try:
            async with self.store.transaction("audit") as uow:
                await uow.audit_log.append(entry)
        except Exception:
            # Best effort: the trail must never change the caller's outcome.
            self._fallback.exception(
                "Audit record could not be persisted: action=%s entity=%s:%s actor=%s "
                "severity=%s description=%s",
                entry.action,
                entry.entity_type,
                entry.entity_id,
                entry.user_id,
                entry.severity,
                entry.description,
            )

    async def record_denial(
        self,
        actor_id: str | None,
        action: str,
        reason: str,
        semester_id: str | None = None,
    ) -> None:
        """Record an authorization denial (best effort)."""
        await self.record(
            AuditEvent(
                actor_id=actor_id,
                action=AuditAction.AUTHORIZATION_DENIED,
                entity_type="Authorization",
                entity_id=None,
                severity=AuditSeverity.WARNING,
                description=f"Denied {action}: {reason}",
                metadata={"action": action, "reason": reason, "semester_id": semester_id},
            )
        )

    def _to_entry(self, event: AuditEvent) -> AuditLogEntryCreate:
        return AuditLogEntryCreate(
            user_id=event.actor_id or get_current_actor_id(),
            action=event.action.value,
            entity_type=event.entity_type,
            entity_id=event.entity_id,
            severity=event.severity.value,
            description=event.description,
            metadata=self._sanitize(event.metadata),
            old_values=self._sanitize(event.before) if event.before is not None else None,
            ip_address=get_current_ip_address(),
            request_id=get_current_request_id(),
        )

    @classmethod
    def _sanitize(cls, data: dict[str, Any]) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for key, value in data.items():
            if key.lower() in SENSITIVE_KEYS:
                out[key] = "[REDACTED]"
            else:
                out[key] = cls._jsonable(value)
        return out

    @classmethod
    def _jsonable(cls, value: Any) -> Any:
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        if isinstance(value, dict):
            return cls._sanitize(value)
        if isinstance(value, (list, tuple, set, frozenset)):
            return [cls._jsonable(v) for v in value]
        if value is None or isinstance(value, (str, int, float, bool)):
            return value
        return str(value)
