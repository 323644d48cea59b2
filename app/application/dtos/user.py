"""DTOs for principals (no dependency on ORM)."""

from dataclasses import dataclass, field

from app.application.dtos.role import RoleAssignmentView


@dataclass(frozen=True)
class PrincipalResult:
    """Authenticated caller: identity plus role assignments loaded once per request."""

    id: str
    email: str
    username: str
    is_active: bool
    full_name: str | None = None
    role_assignments: tuple[RoleAssignmentView, ...] = field(default_factory=tuple)
