"""Authorization Evaluator: semester-scoped role checks over a caller's assignments.

Pure decision logic; no I/O. Callers fetch the role assignments once per
request and are responsible for auditing denials.

A system-wide role bypasses the semester check only when that role itself
is among the required roles. A caller whose only system-wide role is not
required must satisfy the scoped rules like anyone else.
"""

from __future__ import annotations

from collections.abc import Iterable

from app.application.dtos.role import RoleAssignmentView
from app.application.services.role_registry import RoleRegistry, get_role_registry
from app.domain.enums import Action, DenialReason, RoleName
from app.domain.exceptions import AuthorizationException
from app.domain.value_objects import Allow, AuthorizationDecision, Deny


class AuthorizationEvaluator:
    """Decides allow/deny for a required-role set and optional semester context."""

    def __init__(self, registry: RoleRegistry | None = None) -> None:
        self.registry = registry or get_role_registry()

    def _usable(
        self, assignments: Iterable[RoleAssignmentView]
    ) -> list[tuple[RoleName, RoleAssignmentView]]:
        """Active, non-deleted assignments of known roles that satisfy the row invariant."""
        usable: list[tuple[RoleName, RoleAssignmentView]] = []
        for assignment in assignments:
            if not assignment.is_active or assignment.is_deleted:
                continue
            role = self.registry.parse(assignment.role_name)
            if role is None:
                continue
            if not self.registry.is_system_wide(role):
                # Scoped role without a semester is a malformed row.
                if not assignment.semester_id or assignment.semester_deleted:
                    continue
            usable.append((role, assignment))
        return usable

    def authorize(
        self,
        assignments: Iterable[RoleAssignmentView],
        required_roles: Iterable[RoleName | str],
        semester_id: str | None = None,
        *,
        require_semester: bool = True,
    ) -> AuthorizationDecision:
        """Return Allow or Deny(reason).

        Args:
            assignments: The caller's role assignments.
            required_roles: Any one of these roles grants access.
            semester_id: Semester the request acts on, if any.
            require_semester: When False, a scoped role is accepted without
                semester context (it is still checked when semester_id is given).
        """
        required = {
            role
            for role in (self.registry.parse(name) for name in required_roles)
            if role is not None
        }
        usable = self._usable(assignments)

        if any(
            role in required and self.registry.is_system_wide(role)
            for role, _ in usable
        ):
            return Allow()

        matching = [(role, a) for role, a in usable if role in required]
        if not matching:
            return Deny(DenialReason.INSUFFICIENT_ROLE)

        if semester_id is None:
            if require_semester:
                return Deny(DenialReason.MISSING_SEMESTER_CONTEXT)
            return Allow()

        if any(a.semester_id == semester_id for _, a in matching):
            return Allow()
        return Deny(DenialReason.ROLE_NOT_VALID_FOR_SEMESTER)

    def authorize_action(
        self,
        assignments: Iterable[RoleAssignmentView],
        action: Action,
        semester_id: str | None = None,
        *,
        require_semester: bool = True,
    ) -> AuthorizationDecision:
        """Authorize against the roles the registry allows for action."""
        return self.authorize(
            assignments,
            self.registry.roles_for(action),
            semester_id,
            require_semester=require_semester,
        )

    def require(
        self,
        assignments: Iterable[RoleAssignmentView],
        action: Action,
        semester_id: str | None = None,
        *,
        require_semester: bool = True,
    ) -> None:
        """Raise AuthorizationException unless action is allowed."""
        decision = self.authorize_action(
            assignments, action, semester_id, require_semester=require_semester
        )
        if isinstance(decision, Deny):
            raise AuthorizationException(
                reason=decision.reason.value,
                action=action.value,
                semester_id=semester_id,
            )
