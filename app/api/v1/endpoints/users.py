"""User lifecycle API: thin routes delegating to LifecycleCoordinator."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.v1.dependencies import get_lifecycle_coordinator, require_action
from app.application.dtos.user import PrincipalResult
from app.application.services.lifecycle_coordinator import LifecycleCoordinator
from app.domain.enums import Action, EntityType
from app.schemas.lifecycle import BulkLifecycleResponse, LifecycleResponse

router = APIRouter()

SemesterScope = Annotated[
    str | None,
    Query(description="Only remove the principal's data in this semester"),
]


@router.delete("", response_model=BulkLifecycleResponse)
async def delete_all_users(
    current_user: Annotated[PrincipalResult, Depends(require_action(Action.DELETE_ALL_USERS))],
    coordinator: Annotated[LifecycleCoordinator, Depends(get_lifecycle_coordinator)],
    semester_id: SemesterScope = None,
):
    """Soft-delete every principal except holders of protected roles."""
    result = await coordinator.soft_delete_all_principals(
        actor_id=current_user.id, scope_semester_id=semester_id
    )
    return BulkLifecycleResponse.from_result(result)


@router.delete("/{user_id}", response_model=LifecycleResponse)
async def delete_user(
    user_id: str,
    current_user: Annotated[PrincipalResult, Depends(require_action(Action.DELETE_USER))],
    coordinator: Annotated[LifecycleCoordinator, Depends(get_lifecycle_coordinator)],
    semester_id: SemesterScope = None,
):
    """Soft-delete a principal and its dependents (optionally one semester only)."""
    result = await coordinator.cascade_soft_delete(
        root_type=EntityType.USER,
        root_id=user_id,
        actor_id=current_user.id,
        scope_semester_id=semester_id,
    )
    return LifecycleResponse.from_result(result)


@router.post("/{user_id}/restore", response_model=LifecycleResponse)
async def restore_user(
    user_id: str,
    current_user: Annotated[PrincipalResult, Depends(require_action(Action.RESTORE_USER))],
    coordinator: Annotated[LifecycleCoordinator, Depends(get_lifecycle_coordinator)],
):
    """Restore a soft-deleted principal and whatever of its dependents can come back."""
    result = await coordinator.restore(
        root_type=EntityType.USER, root_id=user_id, actor_id=current_user.id
    )
    return LifecycleResponse.from_result(result)
