"""DTOs for lifecycle (cascade soft-delete / restore) operations."""

from dataclasses import dataclass, field
from typing import Any

from app.domain.enums import EntityType, LifecycleOutcome


@dataclass(frozen=True)
class EntitySnapshot:
    """Column values of one row, read inside the lifecycle transaction."""

    entity_type: EntityType
    id: str
    is_deleted: bool
    values: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class LifecycleResult:
    """Outcome of cascade_soft_delete / restore.

    counts maps entity type name -> rows flipped. For restore, skipped maps
    entity type name -> deleted rows left deleted because a parent is gone.
    """

    outcome: LifecycleOutcome
    root_type: EntityType
    root_id: str
    root_deleted: bool
    scope_semester_id: str | None = None
    counts: dict[str, int] = field(default_factory=dict)
    skipped: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        """Rows flipped across all types, root included."""
        return sum(self.counts.values())


@dataclass(frozen=True)
class BulkLifecycleResult:
    """Outcome of soft_delete_all_principals."""

    outcome: LifecycleOutcome
    scope_semester_id: str | None
    principal_ids: tuple[str, ...] = ()
    skipped_protected: tuple[str, ...] = ()
    deleted_principals: int = 0
    counts: dict[str, int] = field(default_factory=dict)
