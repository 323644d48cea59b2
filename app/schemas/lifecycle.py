"""Request/response schemas for lifecycle (soft-delete / restore) API."""

from pydantic import BaseModel, ConfigDict, Field

from app.application.dtos.lifecycle import BulkLifecycleResult, LifecycleResult


class LifecycleResponse(BaseModel):
    """Outcome of a cascade soft-delete or restore."""

    model_config = ConfigDict(from_attributes=True)

    outcome: str = Field(..., description="deleted, partially_deleted, restored or already_in_state")
    root_type: str
    root_id: str
    root_deleted: bool
    scope_semester_id: str | None = None
    counts: dict[str, int] = Field(default_factory=dict, description="Rows changed per entity type")
    skipped: dict[str, int] = Field(
        default_factory=dict, description="Restore only: rows left deleted per entity type"
    )
    total: int = 0

    @classmethod
    def from_result(cls, result: LifecycleResult) -> "LifecycleResponse":
        return cls(
            outcome=result.outcome.value,
            root_type=result.root_type.value,
            root_id=result.root_id,
            root_deleted=result.root_deleted,
            scope_semester_id=result.scope_semester_id,
            counts=result.counts,
            skipped=result.skipped,
            total=result.total,
        )


class BulkLifecycleResponse(BaseModel):
    """Outcome of DELETE /users (every non-protected principal)."""

    outcome: str
    scope_semester_id: str | None = None
    principal_ids: list[str] = Field(default_factory=list)
    skipped_protected: list[str] = Field(default_factory=list)
    deleted_principals: int = 0
    counts: dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_result(cls, result: BulkLifecycleResult) -> "BulkLifecycleResponse":
        return cls(
            outcome=result.outcome.value,
            scope_semester_id=result.scope_semester_id,
            principal_ids=list(result.principal_ids),
            skipped_protected=list(result.skipped_protected),
            deleted_principals=result.deleted_principals,
            counts=result.counts,
        )
