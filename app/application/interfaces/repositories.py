"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs or domain types only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Protocol

from app.domain.enums import EntityType

if TYPE_CHECKING:
    from app.application.dtos.audit_log import AuditLogEntryCreate, AuditLogResult
    from app.application.dtos.lifecycle import EntitySnapshot
    from app.application.dtos.role import RoleAssignmentView
    from app.application.dtos.user import PrincipalResult
    from app.domain.value_objects import SemesterPath


# Generic lifecycle repository interface
class ILifecycleRepository(Protocol):
    """Protocol for type-generic row access used by cascade and restore.

    Every method runs inside the caller's transaction; id collections may be
    arbitrarily large (implementations chunk them).
    """

    async def get_snapshot(
        self, entity_type: EntityType, entity_id: str, *, for_update: bool = False
    ) -> EntitySnapshot | None:
        """Return the row's column values, optionally locking it. None if missing."""

    async def select_ids(
        self,
        entity_type: EntityType,
        foreign_key: str,
        parent_ids: Iterable[str],
        *,
        deleted: bool,
        semester_path: SemesterPath | None = None,
        scope_semester_id: str | None = None,
    ) -> set[str]:
        """Ids of entity_type rows whose foreign_key is in parent_ids and whose
        is_deleted equals deleted. When scope_semester_id and semester_path are
        both given, only rows belonging to that semester are returned."""

    async def referenced_parent_ids(
        self, entity_type: EntityType, foreign_key: str, parent_ids: Iterable[str]
    ) -> set[str]:
        """Subset of parent_ids still referenced by a non-deleted entity_type row."""

    async def active_ids(self, entity_type: EntityType, ids: Iterable[str]) -> set[str]:
        """Subset of ids that exist and are not deleted."""

    async def fetch_references(
        self, entity_type: EntityType, ids: Iterable[str], fields: Sequence[str]
    ) -> dict[str, dict[str, str | None]]:
        """Map row id -> {field: value} for the given foreign-key fields."""

    async def set_deleted(
        self, entity_type: EntityType, ids: Iterable[str], deleted: bool
    ) -> int:
        """Flip is_deleted on rows not already in that state; return rows changed."""

    async def list_ids(self, entity_type: EntityType, *, deleted: bool = False) -> list[str]:
        """All ids of entity_type with the given is_deleted flag (stable order)."""


# Role assignment repository interface
class IRoleAssignmentRepository(Protocol):
    """Protocol for reading a principal's role assignments."""

    async def get_assignments(self, user_id: str) -> list[RoleAssignmentView]:
        """Non-deleted assignments of non-deleted roles for user_id."""

    async def get_role_names(self, user_id: str) -> list[str]:
        """Role names of every non-deleted assignment of user_id (active or not)."""


# Principal repository interface
class IUserRepository(Protocol):
    """Protocol for principal lookup."""

    async def get_principal(self, user_id: str) -> PrincipalResult | None:
        """Return the principal if it exists and is not deleted."""


# Audit log repository interface
class IAuditLogRepository(Protocol):
    """Protocol for the append-only audit log."""

    async def append(self, entry: AuditLogEntryCreate) -> AuditLogResult:
        """Insert one audit record."""

    async def list_for_entity(
        self, entity_type: str, entity_id: str, *, limit: int = 100
    ) -> list[AuditLogResult]:
        """Audit records for one entity, newest first."""


# Unit of work: repositories bound to one transaction
class ILifecycleUnitOfWork(Protocol):
    """Repositories sharing one database transaction."""

    entities: ILifecycleRepository
    role_assignments: IRoleAssignmentRepository
    users: IUserRepository
    audit_log: IAuditLogRepository


class ILifecycleStore(Protocol):
    """Opens transactions. Commit on normal exit, rollback on exception.

    Storage errors surface as TransactionFailureException.
    """

    def transaction(
        self, operation: str = "lifecycle"
    ) -> AbstractAsyncContextManager[ILifecycleUnitOfWork]:
        """Begin a transaction and yield its unit of work."""
