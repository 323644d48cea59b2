"""Role Registry: static role classification and role -> action mapping.

Pure and process-wide. Unknown role names are denied by default: they are
not system-wide, not protected, and permit no actions. Nothing here raises
for an unknown name, so one bad row never aborts an unrelated evaluation.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from app.domain.enums import Action, RoleName

# Valid in every semester; any semester_id stored on the assignment is ignored.
SYSTEM_WIDE_ROLES: frozenset[RoleName] = frozenset({
    RoleName.ADMIN,
    RoleName.GRADUATION_THESIS_MANAGER,
    RoleName.ACADEMIC_OFFICER,
    RoleName.EXAMINATION_OFFICER,
    RoleName.DEAN,
    RoleName.HEAD_OF_DEPARTMENT,
})

# Holders of these roles are never cascade-deleted.
PROTECTED_ROLES: frozenset[RoleName] = frozenset({
    RoleName.ADMIN,
    RoleName.GRADUATION_THESIS_MANAGER,
    RoleName.ACADEMIC_OFFICER,
    RoleName.EXAMINATION_OFFICER,
})

_OFFICE_ACTIONS = frozenset({
    Action.CREATE_TOPIC,
    Action.REVIEW_TOPIC,
    Action.EXPORT_TOPICS,
    Action.MANAGE_SUBMISSION_PERIOD,
    Action.VIEW_SUBMISSION_PERIOD,
    Action.MANAGE_COUNCIL,
})

ROLE_ACTIONS: Mapping[RoleName, frozenset[Action]] = MappingProxyType({
    RoleName.ADMIN: frozenset({
        Action.DELETE_USER,
        Action.DELETE_ALL_USERS,
        Action.RESTORE_USER,
        Action.MANAGE_USER_ROLES,
        Action.DELETE_SEMESTER,
        Action.RESTORE_SEMESTER,
        Action.DELETE_TOPIC,
        Action.RESTORE_TOPIC,
        Action.CREATE_TOPIC,
        Action.REVIEW_TOPIC,
        Action.EXPORT_TOPICS,
        Action.VIEW_AUDIT_LOG,
    }),
    RoleName.GRADUATION_THESIS_MANAGER: _OFFICE_ACTIONS
    | frozenset({Action.DELETE_TOPIC, Action.RESTORE_TOPIC}),
    RoleName.ACADEMIC_OFFICER: _OFFICE_ACTIONS
    | frozenset({
        Action.DELETE_TOPIC,
        Action.RESTORE_TOPIC,
        Action.DELETE_SEMESTER,
        Action.RESTORE_SEMESTER,
    }),
    RoleName.EXAMINATION_OFFICER: _OFFICE_ACTIONS,
    RoleName.DEAN: frozenset({Action.REVIEW_TOPIC, Action.VIEW_SUBMISSION_PERIOD}),
    RoleName.HEAD_OF_DEPARTMENT: frozenset({
        Action.REVIEW_TOPIC,
        Action.VIEW_SUBMISSION_PERIOD,
    }),
    RoleName.LECTURER: frozenset({
        Action.CREATE_TOPIC,
        Action.REVIEW_TOPIC,
        Action.VIEW_SUBMISSION_PERIOD,
    }),
    RoleName.MENTOR: frozenset({
        Action.CREATE_TOPIC,
        Action.MENTOR_GROUP,
        Action.DELETE_TOPIC,
    }),
    RoleName.REVIEWER: frozenset({Action.REVIEW_TOPIC}),
    RoleName.CHAIRMAN: frozenset({Action.SCORE_DEFENSE}),
    RoleName.SECRETARY: frozenset({Action.SCORE_DEFENSE}),
    RoleName.COUNCIL_MEMBER: frozenset({Action.SCORE_DEFENSE, Action.REVIEW_TOPIC}),
    RoleName.LEADER: frozenset({Action.REGISTER_TOPIC, Action.SUBMIT_PROGRESS_REPORT}),
    RoleName.STUDENT: frozenset({
        Action.REGISTER_TOPIC,
        Action.SUBMIT_PROGRESS_REPORT,
        Action.VIEW_SUBMISSION_PERIOD,
    }),
})


def _build_action_index(
    role_actions: Mapping[RoleName, frozenset[Action]],
) -> Mapping[Action, frozenset[RoleName]]:
    index: dict[Action, set[RoleName]] = {action: set() for action in Action}
    for role, actions in role_actions.items():
        for action in actions:
            index[action].add(role)
    return MappingProxyType({a: frozenset(r) for a, r in index.items()})


class RoleRegistry:
    """Read-only lookups over the static role tables.

    Accepts either RoleName members or raw strings (as stored in role.name);
    strings that do not name a known role resolve to "deny by default".
    """

    def __init__(
        self,
        role_actions: Mapping[RoleName, frozenset[Action]] = ROLE_ACTIONS,
        system_wide: frozenset[RoleName] = SYSTEM_WIDE_ROLES,
        protected: frozenset[RoleName] = PROTECTED_ROLES,
    ) -> None:
        self._role_actions = role_actions
        self._system_wide = system_wide
        self._protected = protected
        self._roles_by_action = _build_action_index(role_actions)

    @staticmethod
    def parse(role_name: RoleName | str) -> RoleName | None:
        """Return the RoleName for a stored name, or None when unknown."""
        if isinstance(role_name, RoleName):
            return role_name
        try:
            return RoleName(role_name.strip().lower())
        except (ValueError, AttributeError):
            return None

    def is_system_wide(self, role_name: RoleName | str) -> bool:
        """True when the role is valid across all semesters."""
        role = self.parse(role_name)
        return role is not None and role in self._system_wide

    def is_protected(self, role_name: RoleName | str) -> bool:
        """True when holding the role shields a principal from cascade deletion."""
        role = self.parse(role_name)
        return role is not None and role in self._protected

    def permitted_actions(self, role_name: RoleName | str) -> frozenset[Action]:
        """Actions the role may perform; empty for unknown roles."""
        role = self.parse(role_name)
        if role is None:
            return frozenset()
        return self._role_actions.get(role, frozenset())

    def roles_for(self, action: Action) -> frozenset[RoleName]:
        """Roles allowed to perform action (inverse of permitted_actions)."""
        return self._roles_by_action.get(action, frozenset())

    def protected_roles_in(self, role_names: Iterable[RoleName | str]) -> list[str]:
        """Return the protected role names among role_names, sorted and de-duplicated."""
        found = {
            role.value
            for role in (self.parse(name) for name in role_names)
            if role is not None and role in self._protected
        }
        return sorted(found)


_default_registry = RoleRegistry()


def get_role_registry() -> RoleRegistry:
    """Process-wide registry built from the static tables at import."""
    return _default_registry
