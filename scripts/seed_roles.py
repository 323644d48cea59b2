"""Create or correct the role rows the Role Registry knows about.

Usage:
    python -m scripts.seed_roles
Requires DATABASE_URL. Run once per environment and after adding a role.
"""

import asyncio

from app.application.services.role_registry import get_role_registry
from app.infrastructure.persistence.database import dispose_engine, get_session_factory
from app.infrastructure.persistence.repositories import RoleRepository


async def main() -> None:
    """Sync the role table with the registry."""
    session_factory = get_session_factory()
    try:
        async with session_factory() as session, session.begin():
            created, updated = await RoleRepository(session).sync_with_registry(
                get_role_registry()
            )
    finally:
        await dispose_engine()
    print(f"Roles created: {', '.join(created) or 'none'}")
    print(f"Roles updated: {', '.join(updated) or 'none'}")


if __name__ == "__main__":
    asyncio.run(main())
