"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the lifecycle store, audit recorder,
coordinator and the authenticated principal. Routes depend only on these,
not on infrastructure directly.
"""

from app.api.v1.dependencies.db import (
    get_audit_recorder,
    get_authorization_evaluator,
    get_lifecycle_coordinator,
    get_lifecycle_store,
)
from app.api.v1.dependencies.user_rbac import (
    get_current_user,
    get_current_user_optional,
    require_action,
)

__all__ = [
    "get_audit_recorder",
    "get_authorization_evaluator",
    "get_current_user",
    "get_current_user_optional",
    "get_lifecycle_coordinator",
    "get_lifecycle_store",
    "require_action",
]
