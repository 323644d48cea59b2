"""Topic lifecycle API.

semester_id is required for semester-scoped callers (e.g. mentors) and must
be the topic's own semester.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.v1.dependencies import get_lifecycle_coordinator, require_action
from app.application.dtos.user import PrincipalResult
from app.application.services.lifecycle_coordinator import LifecycleCoordinator
from app.domain.enums import Action, EntityType
from app.schemas.lifecycle import LifecycleResponse

router = APIRouter()


@router.delete("/{topic_id}", response_model=LifecycleResponse)
async def delete_topic(
    topic_id: str,
    current_user: Annotated[PrincipalResult, Depends(require_action(Action.DELETE_TOPIC))],
    coordinator: Annotated[LifecycleCoordinator, Depends(get_lifecycle_coordinator)],
    semester_id: Annotated[str | None, Query(description="Semester of the topic")] = None,
):
    """Soft-delete a topic; refused while it has active registrations."""
    result = await coordinator.cascade_soft_delete(
        root_type=EntityType.TOPIC,
        root_id=topic_id,
        actor_id=current_user.id,
        scope_semester_id=semester_id,
    )
    return LifecycleResponse.from_result(result)


@router.post("/{topic_id}/restore", response_model=LifecycleResponse)
async def restore_topic(
    topic_id: str,
    current_user: Annotated[PrincipalResult, Depends(require_action(Action.RESTORE_TOPIC))],
    coordinator: Annotated[LifecycleCoordinator, Depends(get_lifecycle_coordinator)],
):
    result = await coordinator.restore(
        root_type=EntityType.TOPIC, root_id=topic_id, actor_id=current_user.id
    )
    return LifecycleResponse.from_result(result)
