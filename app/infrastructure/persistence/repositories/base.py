"""Base repository: typed primary-key lookups shared by entity repositories."""

from collections.abc import Iterable, Iterator
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import Base

# Stays under the bind-parameter limits of PostgreSQL and SQLite.
IN_CLAUSE_CHUNK = 500


def chunked(ids: Iterable[str], size: int = IN_CLAUSE_CHUNK) -> Iterator[list[str]]:
    """Yield ids in lists of at most size (sorted, for deterministic lock order)."""
    ordered = sorted(set(ids))
    for start in range(0, len(ordered), size):
        yield ordered[start : start + size]


ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with typed get_by_id.

    Soft-deleted rows are returned as-is; callers decide what is_deleted means.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()
