"""Service interfaces (ports) for the application layer.

Protocols define contracts for application services (DIP).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.audit_log import AuditEvent
    from app.application.interfaces.repositories import ILifecycleUnitOfWork


# Audit recorder interface
class IAuditRecorder(Protocol):
    """Protocol for appending audit records."""

    async def record(self, event: AuditEvent) -> None:
        """Append in a separate transaction. Best effort: never raises."""

    async def record_in(self, uow: ILifecycleUnitOfWork, event: AuditEvent) -> None:
        """Append inside uow's transaction. Errors propagate (and roll it back)."""
