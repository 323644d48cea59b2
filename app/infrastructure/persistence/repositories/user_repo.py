"""User repository: principal lookup. Interface methods return application DTOs."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.user import PrincipalResult
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.user_role_repo import UserRoleRepository


def _user_to_result(u: User, assignments: tuple = ()) -> PrincipalResult:
    """Map ORM User to PrincipalResult (no password)."""
    return PrincipalResult(
        id=u.id,
        email=u.email,
        username=u.username,
        full_name=u.full_name,
        is_active=u.is_active,
        role_assignments=assignments,
    )


class UserRepository(BaseRepository[User]):
    """Implements IUserRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)
        self._roles = UserRoleRepository(db)

    async def get_principal(self, user_id: str) -> PrincipalResult | None:
        """Return the principal with its role assignments; None if missing or deleted."""
        user = await self.get_by_id(user_id)
        if user is None or user.is_deleted:
            return None
        assignments = tuple(await self._roles.get_assignments(user.id))
        return _user_to_result(user, assignments)
