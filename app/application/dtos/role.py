"""DTOs for role assignments (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RoleAssignmentView:
    """One RoleAssignment as seen by the Authorization Evaluator.

    role_name is the stored role.name string; the evaluator resolves it
    through the Role Registry. semester_id is ignored for system-wide roles.
    semester_deleted is True when the assignment's semester is soft-deleted.
    """

    role_name: str
    semester_id: str | None = None
    is_active: bool = True
    is_deleted: bool = False
    semester_deleted: bool = False
    id: str | None = None
    user_id: str | None = None
