"""Current principal and role-based authorization dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.application.dtos.user import PrincipalResult
from app.application.services.audit_recorder import AuditRecorder
from app.application.services.authorization_service import AuthorizationEvaluator
from app.core.config import get_settings
from app.domain.enums import Action
from app.domain.exceptions import AuthenticationException, AuthorizationException
from app.domain.value_objects import Deny
from app.infrastructure.persistence.repositories import SqlLifecycleStore
from app.infrastructure.security.jwt import decode_principal_id
from app.shared.context import set_request_context
from app.shared.telemetry.logging import get_logger

from . import db as db_deps

logger = get_logger(__name__)

_http_bearer = HTTPBearer(auto_error=False)


def _semester_context(request: Request) -> str | None:
    """Semester the request acts on: ?semester_id=..., else a {semester_id} path param."""
    return request.query_params.get("semester_id") or request.path_params.get("semester_id")


async def get_current_user_optional(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    store: Annotated[SqlLifecycleStore, Depends(db_deps.get_lifecycle_store)],
) -> PrincipalResult | None:
    """Return current principal (with role assignments) from JWT if present; else None."""
    if not credentials:
        return None
    try:
        user_id = decode_principal_id(credentials.credentials)
    except ValueError as exc:
        logger.debug("Rejected bearer token: %s", exc)
        return None
    async with store.transaction("authenticate") as uow:
        principal = await uow.users.get_principal(user_id)
    if principal is None or not principal.is_active:
        return None
    set_request_context(principal.id, request.client.host if request.client else None)
    return principal


async def get_current_user(
    current_user: Annotated[PrincipalResult | None, Depends(get_current_user_optional)],
) -> PrincipalResult:
    """Return current principal from JWT; raise 401 if missing or invalid."""
    if current_user is None:
        raise AuthenticationException("Not authenticated")
    return current_user


def require_action(action: Action, *, require_semester: bool | None = None):
    """Dependency factory: require JWT auth and a role allowed to perform action.

    The semester context comes from the semester_id query or path parameter.
    require_semester defaults to settings.authorization_require_semester.
    Denials are written to the audit trail before the 403 is raised.
    """

    async def _require(
        request: Request,
        current_user: Annotated[PrincipalResult, Depends(get_current_user)],
        evaluator: Annotated[
            AuthorizationEvaluator, Depends(db_deps.get_authorization_evaluator)
        ],
        audit_recorder: Annotated[AuditRecorder, Depends(db_deps.get_audit_recorder)],
    ) -> PrincipalResult:
        semester_id = _semester_context(request)
        needs_semester = (
            get_settings().authorization_require_semester
            if require_semester is None
            else require_semester
        )
        decision = evaluator.authorize_action(
            current_user.role_assignments,
            action,
            semester_id,
            require_semester=needs_semester,
        )
        if isinstance(decision, Deny):
            logger.warning(
                "Denied %s for %s (semester=%s): %s",
                action.value,
                current_user.id,
                semester_id,
                decision.reason.value,
            )
            await audit_recorder.record_denial(
                current_user.id, action.value, decision.reason.value, semester_id
            )
            raise AuthorizationException(decision.reason.value, action.value, semester_id)
        return current_user

    return _require
