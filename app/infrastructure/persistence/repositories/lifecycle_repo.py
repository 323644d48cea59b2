"""Lifecycle repository: type-generic soft-delete queries over catalog entities.

Implements ILifecycleRepository. Entity types resolve to ORM models through
MODEL_REGISTRY; foreign-key names come from the Entity Graph Catalog and are
looked up as mapped columns, so a catalog/model mismatch fails loudly.
Writes are bulk UPDATE statements; no ORM objects are loaded for them.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from sqlalchemy import ColumnElement, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.lifecycle import EntitySnapshot
from app.domain.enums import EntityType
from app.domain.value_objects import SemesterPath
from app.infrastructure.persistence.models import MODEL_REGISTRY
from app.infrastructure.persistence.repositories.base import chunked
from app.shared.utils.datetime import utc_now


class LifecycleRepository:
    """Generic is_deleted reads and flips for every registered entity type."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    @staticmethod
    def _model(entity_type: EntityType) -> Any:
        try:
            return MODEL_REGISTRY[entity_type]
        except KeyError:
            raise ValueError(f"No model registered for {entity_type.value}") from None

    @classmethod
    def _column(cls, entity_type: EntityType, name: str) -> Any:
        model = cls._model(entity_type)
        column = model.__table__.columns.get(name)
        if column is None:
            raise ValueError(f"{entity_type.value} has no column {name!r}")
        return getattr(model, name)

    @classmethod
    def _semester_clause(
        cls, entity_type: EntityType, path: SemesterPath, semester_id: str
    ) -> ColumnElement[bool]:
        """WHERE clause: the row of entity_type belongs to semester_id via path."""
        if not path.hops:
            return cls._column(entity_type, path.field) == semester_id
        hop, rest = path.hops[0], SemesterPath(path.hops[1:], path.field)
        target = cls._model(hop.target)
        return cls._column(entity_type, hop.foreign_key).in_(
            select(target.id).where(cls._semester_clause(hop.target, rest, semester_id))
        )

    async def get_snapshot(
        self, entity_type: EntityType, entity_id: str, *, for_update: bool = False
    ) -> EntitySnapshot | None:
        model = self._model(entity_type)
        stmt = select(model.__table__).where(model.id == entity_id)
        if for_update:
            stmt = stmt.with_for_update()
        row = (await self.db.execute(stmt)).mappings().one_or_none()
        if row is None:
            return None
        values = dict(row)
        return EntitySnapshot(
            entity_type=entity_type,
            id=values["id"],
            is_deleted=bool(values["is_deleted"]),
            values=values,
        )

    async def select_ids(
        self,
        entity_type: EntityType,
        foreign_key: str,
        parent_ids: Iterable[str],
        *,
        deleted: bool,
        semester_path: SemesterPath | None = None,
        scope_semester_id: str | None = None,
    ) -> set[str]:
        model = self._model(entity_type)
        fk = self._column(entity_type, foreign_key)
        scope_clause = (
            self._semester_clause(entity_type, semester_path, scope_semester_id)
            if semester_path is not None and scope_semester_id is not None
            else None
        )
        ids: set[str] = set()
        for chunk in chunked(parent_ids):
            stmt = select(model.id).where(fk.in_(chunk), model.is_deleted.is_(deleted))
            if scope_clause is not None:
                stmt = stmt.where(scope_clause)
            ids.update((await self.db.execute(stmt)).scalars().all())
        return ids

    async def referenced_parent_ids(
        self, entity_type: EntityType, foreign_key: str, parent_ids: Iterable[str]
    ) -> set[str]:
        model = self._model(entity_type)
        fk = self._column(entity_type, foreign_key)
        referenced: set[str] = set()
        for chunk in chunked(parent_ids):
            stmt = select(fk).distinct().where(fk.in_(chunk), model.is_deleted.is_(False))
            referenced.update((await self.db.execute(stmt)).scalars().all())
        return referenced

    async def active_ids(self, entity_type: EntityType, ids: Iterable[str]) -> set[str]:
        model = self._model(entity_type)
        active: set[str] = set()
        for chunk in chunked(ids):
            stmt = select(model.id).where(model.id.in_(chunk), model.is_deleted.is_(False))
            active.update((await self.db.execute(stmt)).scalars().all())
        return active

    async def fetch_references(
        self, entity_type: EntityType, ids: Iterable[str], fields: Sequence[str]
    ) -> dict[str, dict[str, str | None]]:
        model = self._model(entity_type)
        columns = [self._column(entity_type, f) for f in fields]
        refs: dict[str, dict[str, str | None]] = {}
        for chunk in chunked(ids):
            stmt = select(model.id, *columns).where(model.id.in_(chunk))
            for row in (await self.db.execute(stmt)).all():
                refs[row[0]] = dict(zip(fields, row[1:], strict=True))
        return refs

    async def set_deleted(
        self, entity_type: EntityType, ids: Iterable[str], deleted: bool
    ) -> int:
        model = self._model(entity_type)
        changed = 0
        for chunk in chunked(ids):
            stmt = (
                update(model)
                .where(model.id.in_(chunk), model.is_deleted.is_(not deleted))
                .values(is_deleted=deleted, deleted_at=utc_now() if deleted else None)
                .execution_options(synchronize_session=False)
            )
            result = await self.db.execute(stmt)
            changed += result.rowcount or 0
        return changed

    async def list_ids(self, entity_type: EntityType, *, deleted: bool = False) -> list[str]:
        model = self._model(entity_type)
        stmt = select(model.id).where(model.is_deleted.is_(deleted)).order_by(model.id)
        return list((await self.db.execute(stmt)).scalars().all())
