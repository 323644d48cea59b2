"""Role repository: keeps the role table in line with the Role Registry."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.services.role_registry import RoleRegistry
from app.domain.enums import RoleName
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.repositories.base import BaseRepository


class RoleRepository(BaseRepository[Role]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Role)

    async def get_by_name(self, name: str) -> Role | None:
        result = await self.db.execute(select(Role).where(Role.name == name))
        return result.scalar_one_or_none()

    async def sync_with_registry(self, registry: RoleRegistry) -> tuple[list[str], list[str]]:
        """Create missing roles and correct is_system_wide on existing ones.

        Soft-deleted roles are left deleted. Returns (created, updated) names.
        """
        created: list[str] = []
        updated: list[str] = []
        for role_name in RoleName:
            system_wide = registry.is_system_wide(role_name)
            role = await self.get_by_name(role_name.value)
            if role is None:
                self.db.add(Role(name=role_name.value, is_system_wide=system_wide))
                created.append(role_name.value)
            elif role.is_system_wide != system_wide:
                role.is_system_wide = system_wide
                updated.append(role_name.value)
        await self.db.flush()
        return created, updated
