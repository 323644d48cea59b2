"""Lifecycle Coordinator: atomic cascade soft-delete and restore.

Walks the Entity Graph Catalog from a root entity and flips is_deleted on
every dependent row inside one transaction. Either every row in the cascade
changes together with its summary audit record, or nothing changes.

Deletion runs in two phases. The plan phase reads the graph parent-first
and fails on the first BLOCK relation with active children, before any
write. The apply phase then writes children-first and the root last.

A scoped delete (scope_semester_id on a root that does not itself belong
to a semester, e.g. a User) only removes rows that belong to that semester.
Semester-bound types with no semester of their own (containers, e.g.
Student) and the root itself are deleted only once nothing semester-bound
still hangs off them.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from app.application.dtos.audit_log import AuditEvent
from app.application.dtos.lifecycle import (
    BulkLifecycleResult,
    EntitySnapshot,
    LifecycleResult,
)
from app.application.interfaces.repositories import ILifecycleStore, ILifecycleUnitOfWork
from app.application.interfaces.services import IAuditRecorder
from app.application.services.entity_graph import EntityGraphCatalog, get_entity_graph_catalog
from app.application.services.role_registry import RoleRegistry, get_role_registry
from app.domain.enums import CascadePolicy, EntityType, LifecycleOutcome
from app.domain.exceptions import (
    BlockedByActiveChildrenException,
    CapstoneException,
    ParentDeletedException,
    ProtectedEntityException,
    ResourceNotFoundException,
    ScopeConflictException,
    TransactionFailureException,
    ValidationException,
)
from app.domain.value_objects import Relation, SemesterPath
from app.shared.enums import AuditAction, AuditSeverity
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import add_span_attributes, traced

logger = get_logger(__name__)

# root type -> (success action, failed attempt action)
_DELETE_ACTIONS: Mapping[EntityType, tuple[AuditAction, AuditAction]] = MappingProxyType({
    EntityType.USER: (AuditAction.DELETE_USER, AuditAction.DELETE_USER_ATTEMPT),
    EntityType.SEMESTER: (AuditAction.DELETE_SEMESTER, AuditAction.DELETE_SEMESTER_ATTEMPT),
    EntityType.TOPIC: (AuditAction.DELETE_TOPIC, AuditAction.DELETE_TOPIC_ATTEMPT),
})
_RESTORE_ACTIONS: Mapping[EntityType, tuple[AuditAction, AuditAction]] = MappingProxyType({
    EntityType.USER: (AuditAction.RESTORE_USER, AuditAction.RESTORE_USER_ATTEMPT),
    EntityType.SEMESTER: (AuditAction.RESTORE_SEMESTER, AuditAction.RESTORE_SEMESTER_ATTEMPT),
    EntityType.TOPIC: (AuditAction.RESTORE_TOPIC, AuditAction.RESTORE_TOPIC_ATTEMPT),
})

# Failures that point at a misuse or a broken store rather than a routine conflict.
_ERROR_SEVERITY = (ProtectedEntityException, TransactionFailureException)


@dataclass
class _DeletePlan:
    """Rows a delete will flip, by type. Containers are decided after the flip."""

    delete: dict[EntityType, set[str]] = field(default_factory=dict)
    containers: dict[EntityType, set[str]] = field(default_factory=dict)


class LifecycleCoordinator:
    """Cascade soft-delete and restore for User, Semester and Topic roots."""

    def __init__(
        self,
        store: ILifecycleStore,
        audit_recorder: IAuditRecorder,
        catalog: EntityGraphCatalog | None = None,
        registry: RoleRegistry | None = None,
    ) -> None:
        self.store = store
        self.audit_recorder = audit_recorder
        self.catalog = catalog or get_entity_graph_catalog()
        self.registry = registry or get_role_registry()

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    @traced("lifecycle.cascade_soft_delete")
    async def cascade_soft_delete(
        self,
        root_type: EntityType,
        root_id: str,
        actor_id: str | None,
        scope_semester_id: str | None = None,
    ) -> LifecycleResult:
        """Soft-delete root_id and everything that depends on it.

        Args:
            root_type: User, Semester or Topic.
            root_id: Id of the root row.
            actor_id: Principal performing the operation (for the audit trail).
            scope_semester_id: Restrict a principal delete to one semester.

        Returns:
            LifecycleResult with per-type counts; outcome ALREADY_IN_STATE
            (and no writes) when the root was already deleted, or when a scoped
            delete finds nothing of the root left in that semester.

        Raises:
            ResourceNotFoundException, ProtectedEntityException,
            ScopeConflictException, BlockedByActiveChildrenException,
            TransactionFailureException. Nothing is persisted on any of them.
        """
        success_action, attempt_action = self._actions(root_type, _DELETE_ACTIONS)
        try:
            async with self.store.transaction(f"delete {root_type.value}") as uow:
                root = await self._load_root(uow, root_type, root_id)
                if root.is_deleted:
                    result = LifecycleResult(
                        outcome=LifecycleOutcome.ALREADY_IN_STATE,
                        root_type=root_type,
                        root_id=root_id,
                        root_deleted=True,
                        scope_semester_id=scope_semester_id,
                    )
                else:
                    scope = await self._resolve_scope(uow, root, scope_semester_id)
                    await self._ensure_not_protected(uow, root)
                    counts, root_deleted = await self._delete_root(uow, root, scope)
                    if root_deleted:
                        outcome = LifecycleOutcome.DELETED
                    elif counts:
                        outcome = LifecycleOutcome.PARTIALLY_DELETED
                    else:
                        # Scoped pass found nothing left in the semester.
                        outcome = LifecycleOutcome.ALREADY_IN_STATE
                    result = LifecycleResult(
                        outcome=outcome,
                        root_type=root_type,
                        root_id=root_id,
                        root_deleted=root_deleted,
                        scope_semester_id=scope_semester_id,
                        counts=counts,
                    )
                    if outcome is not LifecycleOutcome.ALREADY_IN_STATE:
                        await self.audit_recorder.record_in(
                            uow,
                            AuditEvent(
                                actor_id=actor_id,
                                action=success_action,
                                entity_type=root_type.value,
                                entity_id=root_id,
                                severity=AuditSeverity.INFO,
                                description=self._describe_delete(result),
                                metadata={
                                    "outcome": result.outcome,
                                    "scope_semester_id": scope_semester_id,
                                    "counts": counts,
                                },
                                before=root.values,
                            ),
                        )
        except CapstoneException as exc:
            await self._record_failure(attempt_action, root_type.value, root_id, actor_id, exc)
            raise

        add_span_attributes(outcome=result.outcome.value, total=result.total)
        logger.info(
            "%s %s %s (scope=%s): %d row(s) soft-deleted",
            result.outcome.value,
            root_type.value,
            root_id,
            scope_semester_id,
            result.total,
        )
        return result

    @traced("lifecycle.restore")
    async def restore(
        self,
        root_type: EntityType,
        root_id: str,
        actor_id: str | None = None,
    ) -> LifecycleResult:
        """Undo a soft-delete from the root downward.

        A dependent row comes back only if every parent it references (through
        non-IGNORE relations) is active once the restore is done; rows whose
        other parents are still deleted stay deleted and are counted in skipped.

        Restore starts from a deleted root. Rows removed by a scoped delete of a
        root that stayed active are not reachable this way. Restore does not
        know which cascade deleted a row, so a dependent deleted earlier by a
        separate operation comes back with the root if its parents are active.

        Raises:
            ResourceNotFoundException, ParentDeletedException (the root's own
            parent is deleted), TransactionFailureException.
        """
        success_action, attempt_action = self._actions(root_type, _RESTORE_ACTIONS)
        try:
            async with self.store.transaction(f"restore {root_type.value}") as uow:
                root = await self._load_root(uow, root_type, root_id)
                if not root.is_deleted:
                    result = LifecycleResult(
                        outcome=LifecycleOutcome.ALREADY_IN_STATE,
                        root_type=root_type,
                        root_id=root_id,
                        root_deleted=False,
                    )
                else:
                    await self._ensure_parents_active(uow, root)
                    counts, skipped = await self._restore_root(uow, root)
                    result = LifecycleResult(
                        outcome=LifecycleOutcome.RESTORED,
                        root_type=root_type,
                        root_id=root_id,
                        root_deleted=False,
                        counts=counts,
                        skipped=skipped,
                    )
                    await self.audit_recorder.record_in(
                        uow,
                        AuditEvent(
                            actor_id=actor_id,
                            action=success_action,
                            entity_type=root_type.value,
                            entity_id=root_id,
                            severity=AuditSeverity.INFO,
                            description=(
                                f"Restored {root_type.value} {root_id}: "
                                f"{result.total} row(s) restored"
                            ),
                            metadata={"counts": counts, "skipped": skipped},
                        ),
                    )
        except CapstoneException as exc:
            await self._record_failure(attempt_action, root_type.value, root_id, actor_id, exc)
            raise

        add_span_attributes(outcome=result.outcome.value, total=result.total)
        logger.info(
            "%s %s %s: %d row(s) restored, %d left deleted",
            result.outcome.value,
            root_type.value,
            root_id,
            result.total,
            sum(result.skipped.values()),
        )
        return result

    @traced("lifecycle.soft_delete_all_principals")
    async def soft_delete_all_principals(
        self,
        actor_id: str | None,
        scope_semester_id: str | None = None,
    ) -> BulkLifecycleResult:
        """Cascade-delete every principal except protected ones, in one transaction.

        A BLOCK conflict under any principal aborts the whole batch.
        """
        try:
            async with self.store.transaction("delete all users") as uow:
                if scope_semester_id is not None:
                    await self._ensure_scope_semester(uow, scope_semester_id)
                processed: list[str] = []
                protected: list[str] = []
                deleted = 0
                counts: Counter[str] = Counter()
                for principal_id in await uow.entities.list_ids(EntityType.USER):
                    names = await uow.role_assignments.get_role_names(principal_id)
                    if self.registry.protected_roles_in(names):
                        protected.append(principal_id)
                        continue
                    root = await uow.entities.get_snapshot(
                        EntityType.USER, principal_id, for_update=True
                    )
                    # Removed by an earlier principal's cascade in this batch.
                    if root is None or root.is_deleted:
                        continue
                    root_counts, root_deleted = await self._delete_root(
                        uow, root, scope_semester_id
                    )
                    if not root_counts:
                        continue
                    counts.update(root_counts)
                    processed.append(principal_id)
                    deleted += int(root_deleted)

                if not processed:
                    outcome = LifecycleOutcome.ALREADY_IN_STATE
                elif deleted == len(processed):
                    outcome = LifecycleOutcome.DELETED
                else:
                    outcome = LifecycleOutcome.PARTIALLY_DELETED
                result = BulkLifecycleResult(
                    outcome=outcome,
                    scope_semester_id=scope_semester_id,
                    principal_ids=tuple(processed),
                    skipped_protected=tuple(protected),
                    deleted_principals=deleted,
                    counts=dict(counts),
                )
                if processed:
                    await self.audit_recorder.record_in(
                        uow,
                        AuditEvent(
                            actor_id=actor_id,
                            action=AuditAction.DELETE_ALL_USERS,
                            entity_type=EntityType.USER.value,
                            entity_id=None,
                            severity=AuditSeverity.INFO,
                            description=(
                                f"Deleted {deleted} of {len(processed)} principal(s)"
                                + (f" in semester {scope_semester_id}" if scope_semester_id else "")
                                + f"; skipped {len(protected)} protected"
                            ),
                            metadata={
                                "outcome": outcome,
                                "scope_semester_id": scope_semester_id,
                                "principal_ids": processed,
                                "skipped_protected": protected,
                                "counts": dict(counts),
                            },
                        ),
                    )
        except CapstoneException as exc:
            await self._record_failure(
                AuditAction.DELETE_ALL_USERS_ATTEMPT, EntityType.USER.value, None, actor_id, exc
            )
            raise

        logger.info(
            "Bulk principal delete (scope=%s): %d processed, %d protected skipped",
            scope_semester_id,
            len(result.principal_ids),
            len(result.skipped_protected),
        )
        return result

    # ------------------------------------------------------------------
    # Preconditions
    # ------------------------------------------------------------------

    def _actions(
        self,
        root_type: EntityType,
        table: Mapping[EntityType, tuple[AuditAction, AuditAction]],
    ) -> tuple[AuditAction, AuditAction]:
        if root_type not in self.catalog.root_types or root_type not in table:
            raise ValidationException(
                f"{root_type.value} is not a lifecycle root", field="root_type"
            )
        return table[root_type]

    async def _load_root(
        self, uow: ILifecycleUnitOfWork, root_type: EntityType, root_id: str
    ) -> EntitySnapshot:
        root = await uow.entities.get_snapshot(root_type, root_id, for_update=True)
        if root is None:
            raise ResourceNotFoundException(root_type.value, root_id)
        return root

    async def _ensure_scope_semester(
        self, uow: ILifecycleUnitOfWork, scope_semester_id: str
    ) -> None:
        semester = await uow.entities.get_snapshot(EntityType.SEMESTER, scope_semester_id)
        if semester is None or semester.is_deleted:
            raise ScopeConflictException(
                scope_semester_id, "semester does not exist or is deleted"
            )

    async def _resolve_scope(
        self,
        uow: ILifecycleUnitOfWork,
        root: EntitySnapshot,
        scope_semester_id: str | None,
    ) -> str | None:
        """Validate the requested scope; return the scope the cascade should filter by.

        Roots that already live inside one semester (a Semester, a Topic) are
        wholly in that semester, so a matching scope is dropped.
        """
        if scope_semester_id is None:
            return None
        await self._ensure_scope_semester(uow, scope_semester_id)
        if root.entity_type is EntityType.SEMESTER:
            if root.id != scope_semester_id:
                raise ScopeConflictException(
                    scope_semester_id, "scope must be the semester being deleted"
                )
            return None
        path = self.catalog.semester_path(root.entity_type)
        if path is not None:
            owner = await self._semester_of(uow, root, path)
            if owner != scope_semester_id:
                raise ScopeConflictException(
                    scope_semester_id,
                    f"{root.entity_type.value} {root.id} belongs to another semester",
                )
            return None
        return scope_semester_id

    async def _semester_of(
        self, uow: ILifecycleUnitOfWork, snapshot: EntitySnapshot, path: SemesterPath
    ) -> str | None:
        current: EntitySnapshot | None = snapshot
        for hop in path.hops:
            ref = current.values.get(hop.foreign_key)
            if ref is None:
                return None
            current = await uow.entities.get_snapshot(hop.target, ref)
            if current is None:
                return None
        return current.values.get(path.field)

    async def _ensure_not_protected(
        self, uow: ILifecycleUnitOfWork, root: EntitySnapshot
    ) -> None:
        if root.entity_type is not EntityType.USER:
            return
        names = await uow.role_assignments.get_role_names(root.id)
        protected = self.registry.protected_roles_in(names)
        if protected:
            raise ProtectedEntityException(root.entity_type.value, root.id, protected)

    async def _ensure_parents_active(
        self, uow: ILifecycleUnitOfWork, root: EntitySnapshot
    ) -> None:
        for rel in self.catalog.parents_of(root.entity_type):
            parent_id = root.values.get(rel.foreign_key)
            if parent_id is None:
                continue
            parent = await uow.entities.get_snapshot(rel.parent_type, parent_id)
            if parent is None or parent.is_deleted:
                raise ParentDeletedException(
                    root.entity_type.value, root.id, rel.parent_type.value, parent_id
                )

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def _plan_delete(
        self,
        uow: ILifecycleUnitOfWork,
        root_type: EntityType,
        root_ids: set[str],
        scope: str | None,
    ) -> _DeletePlan:
        """Collect active dependents parent-first; raise on BLOCK before any write."""
        plan = _DeletePlan()
        frontier: dict[EntityType, set[str]] = {root_type: set(root_ids)}
        for entity_type in self.catalog.reachable_types(root_type):
            path = self.catalog.semester_path(entity_type)
            if scope is not None and not self.catalog.is_semester_bound(entity_type):
                continue
            found: set[str] = set()
            for rel in self.catalog.parents_of(entity_type):
                parent_ids = frontier.get(rel.parent_type)
                if not parent_ids:
                    continue
                ids = await uow.entities.select_ids(
                    entity_type,
                    rel.foreign_key,
                    parent_ids,
                    deleted=False,
                    semester_path=path if scope is not None else None,
                    scope_semester_id=scope,
                )
                if ids and rel.policy is CascadePolicy.BLOCK:
                    raise BlockedByActiveChildrenException(
                        entity_type.value, rel.parent_type.value, len(ids)
                    )
                found |= ids
            if not found:
                continue
            frontier[entity_type] = found
            if scope is not None and path is None:
                plan.containers[entity_type] = found
            else:
                plan.delete[entity_type] = found
        return plan

    async def _apply_plan(
        self,
        uow: ILifecycleUnitOfWork,
        root_type: EntityType,
        plan: _DeletePlan,
        counts: Counter[str],
    ) -> None:
        order = list(reversed(self.catalog.reachable_types(root_type)))
        for entity_type in order:
            ids = plan.delete.get(entity_type)
            if ids:
                counts[entity_type.value] += await uow.entities.set_deleted(
                    entity_type, ids, True
                )
        for entity_type in order:
            ids = plan.containers.get(entity_type)
            if not ids:
                continue
            released = ids - await self._retained(uow, entity_type, ids)
            if released:
                counts[entity_type.value] += await uow.entities.set_deleted(
                    entity_type, released, True
                )

    async def _retained(
        self, uow: ILifecycleUnitOfWork, entity_type: EntityType, ids: set[str]
    ) -> set[str]:
        """Ids still referenced by an active semester-bound child."""
        retained: set[str] = set()
        for rel in self.catalog.children_of(entity_type):
            if self.catalog.is_semester_bound(rel.entity_type):
                retained |= await uow.entities.referenced_parent_ids(
                    rel.entity_type, rel.foreign_key, ids
                )
        return retained

    async def _delete_root(
        self, uow: ILifecycleUnitOfWork, root: EntitySnapshot, scope: str | None
    ) -> tuple[dict[str, int], bool]:
        """Plan and apply the cascade under root; return (counts, root_deleted)."""
        counts: Counter[str] = Counter()
        plan = await self._plan_delete(uow, root.entity_type, {root.id}, scope)
        await self._apply_plan(uow, root.entity_type, plan, counts)

        if scope is not None:
            if await self._retained(uow, root.entity_type, {root.id}):
                return dict(counts), False
            # Nothing semester-bound is left; the rest of the subtree goes with the root.
            sweep = await self._plan_delete(uow, root.entity_type, {root.id}, None)
            await self._apply_plan(uow, root.entity_type, sweep, counts)

        counts[root.entity_type.value] += await uow.entities.set_deleted(
            root.entity_type, {root.id}, True
        )
        return dict(counts), True

    # ------------------------------------------------------------------
    # Restore
    # ------------------------------------------------------------------

    async def _restore_root(
        self, uow: ILifecycleUnitOfWork, root: EntitySnapshot
    ) -> tuple[dict[str, int], dict[str, int]]:
        counts: Counter[str] = Counter()
        skipped: Counter[str] = Counter()
        counts[root.entity_type.value] += await uow.entities.set_deleted(
            root.entity_type, {root.id}, False
        )
        restored: dict[EntityType, set[str]] = {root.entity_type: {root.id}}
        for entity_type in self.catalog.reachable_types(root.entity_type):
            parents = self.catalog.parents_of(entity_type)
            candidates: set[str] = set()
            for rel in parents:
                parent_ids = restored.get(rel.parent_type)
                if parent_ids:
                    candidates |= await uow.entities.select_ids(
                        entity_type, rel.foreign_key, parent_ids, deleted=True
                    )
            if not candidates:
                continue
            eligible = await self._with_active_parents(uow, entity_type, candidates, parents)
            if eligible:
                counts[entity_type.value] += await uow.entities.set_deleted(
                    entity_type, eligible, False
                )
                restored[entity_type] = eligible
            if len(eligible) < len(candidates):
                skipped[entity_type.value] += len(candidates) - len(eligible)
        return dict(counts), dict(skipped)

    async def _with_active_parents(
        self,
        uow: ILifecycleUnitOfWork,
        entity_type: EntityType,
        ids: set[str],
        parents: Iterable[Relation],
    ) -> set[str]:
        """Subset of ids whose every non-null parent reference points at an active row."""
        parents = tuple(parents)
        fields = list(dict.fromkeys(rel.foreign_key for rel in parents))
        refs = await uow.entities.fetch_references(entity_type, ids, fields)
        alive: dict[tuple[EntityType, str], set[str]] = {}
        for rel in parents:
            referenced = {r[rel.foreign_key] for r in refs.values() if r.get(rel.foreign_key)}
            alive[(rel.parent_type, rel.foreign_key)] = (
                await uow.entities.active_ids(rel.parent_type, referenced)
                if referenced
                else set()
            )
        return {
            row_id
            for row_id, row in refs.items()
            if all(
                row.get(rel.foreign_key) is None
                or row[rel.foreign_key] in alive[(rel.parent_type, rel.foreign_key)]
                for rel in parents
            )
        }

    # ------------------------------------------------------------------
    # Audit helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _describe_delete(result: LifecycleResult) -> str:
        scope = f" in semester {result.scope_semester_id}" if result.scope_semester_id else ""
        if result.root_deleted:
            return (
                f"Deleted {result.root_type.value} {result.root_id}{scope}: "
                f"{result.total} row(s) soft-deleted"
            )
        return (
            f"Removed {result.root_type.value} {result.root_id} from semester "
            f"{result.scope_semester_id}: {result.total} row(s) soft-deleted; "
            f"{result.root_type.value} retained for other semesters"
        )

    async def _record_failure(
        self,
        action: AuditAction,
        entity_type: str,
        entity_id: str | None,
        actor_id: str | None,
        exc: CapstoneException,
    ) -> None:
        severity = (
            AuditSeverity.ERROR if isinstance(exc, _ERROR_SEVERITY) else AuditSeverity.WARNING
        )
        if severity is AuditSeverity.ERROR:
            logger.error("%s on %s %s failed: %s", action.value, entity_type, entity_id, exc.message)
        else:
            logger.warning("%s on %s %s refused: %s", action.value, entity_type, entity_id, exc.message)
        await self.audit_recorder.record(
            AuditEvent(
                actor_id=actor_id,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                severity=severity,
                description=exc.message,
                metadata={"error_code": exc.error_code, "details": exc.details},
            )
        )
