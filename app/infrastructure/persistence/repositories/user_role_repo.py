"""UserRole repository: a principal's role assignments (read side)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.role import RoleAssignmentView
from app.infrastructure.persistence.models.role import Role, UserRole
from app.infrastructure.persistence.models.semester import Semester


class UserRoleRepository:
    """User-role link table only. Implements IRoleAssignmentRepository."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_assignments(self, user_id: str) -> list[RoleAssignmentView]:
        """Non-deleted assignments of non-deleted roles, each flagged with its semester state."""
        result = await self.db.execute(
            select(
                UserRole.id,
                UserRole.user_id,
                UserRole.semester_id,
                UserRole.is_active,
                Role.name,
                Semester.is_deleted,
            )
            .join(Role, UserRole.role_id == Role.id)
            .outerjoin(Semester, UserRole.semester_id == Semester.id)
            .where(
                UserRole.user_id == user_id,
                UserRole.is_deleted.is_(False),
                Role.is_deleted.is_(False),
            )
            .order_by(UserRole.id)
        )
        return [
            RoleAssignmentView(
                id=row.id,
                user_id=row.user_id,
                role_name=row.name,
                semester_id=row.semester_id,
                is_active=row.is_active,
                semester_deleted=bool(row.is_deleted),
            )
            for row in result.all()
        ]

    async def get_role_names(self, user_id: str) -> list[str]:
        result = await self.db.execute(
            select(Role.name)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(
                UserRole.user_id == user_id,
                UserRole.is_deleted.is_(False),
                Role.is_deleted.is_(False),
            )
            .distinct()
        )
        return list(result.scalars().all())
