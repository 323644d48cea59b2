"""Semester lifecycle API."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import get_lifecycle_coordinator, require_action
from app.application.dtos.user import PrincipalResult
from app.application.services.lifecycle_coordinator import LifecycleCoordinator
from app.domain.enums import Action, EntityType
from app.schemas.lifecycle import LifecycleResponse

router = APIRouter()


@router.delete("/{semester_id}", response_model=LifecycleResponse)
async def delete_semester(
    semester_id: str,
    current_user: Annotated[PrincipalResult, Depends(require_action(Action.DELETE_SEMESTER))],
    coordinator: Annotated[LifecycleCoordinator, Depends(get_lifecycle_coordinator)],
):
    """Soft-delete a semester with its topics, groups, enrolments and role assignments."""
    result = await coordinator.cascade_soft_delete(
        root_type=EntityType.SEMESTER, root_id=semester_id, actor_id=current_user.id
    )
    return LifecycleResponse.from_result(result)


@router.post("/{semester_id}/restore", response_model=LifecycleResponse)
async def restore_semester(
    semester_id: str,
    current_user: Annotated[
        PrincipalResult, Depends(require_action(Action.RESTORE_SEMESTER))
    ],
    coordinator: Annotated[LifecycleCoordinator, Depends(get_lifecycle_coordinator)],
):
    result = await coordinator.restore(
        root_type=EntityType.SEMESTER, root_id=semester_id, actor_id=current_user.id
    )
    return LifecycleResponse.from_result(result)
