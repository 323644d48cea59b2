"""Entity Graph Catalog: declarative parent/child table for lifecycle cascades.

Each Relation says which foreign key links a child type to a parent type
and what a parent soft-delete does to the children. SEMESTER_PATHS says how
each type reaches the semester it belongs to (types without an entry are
not semester-scoped). The Lifecycle Coordinator walks this table
generically; adding a dependent type means adding rows here, not code.

The catalog is built once at import and never mutated.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from functools import cached_property
from types import MappingProxyType

from app.domain.enums import CascadePolicy, EntityType
from app.domain.value_objects import Relation, SemesterHop, SemesterPath

E = EntityType
_CASCADE = CascadePolicy.CASCADE
_BLOCK = CascadePolicy.BLOCK
_IGNORE = CascadePolicy.IGNORE

RELATIONS: tuple[Relation, ...] = (
    # Principal
    Relation(E.USER_ROLE, E.USER, "user_id", _CASCADE),
    Relation(E.REFRESH_TOKEN, E.USER, "user_id", _CASCADE),
    Relation(E.STUDENT, E.USER, "user_id", _CASCADE),
    Relation(E.TOPIC, E.USER, "created_by", _CASCADE),
    Relation(E.TOPIC, E.USER, "main_supervisor", _CASCADE),
    Relation(E.TOPIC, E.USER, "sub_supervisor", _IGNORE),
    Relation(E.TOPIC_REGISTRATION, E.USER, "user_id", _CASCADE),
    Relation(E.GROUP_MEMBER, E.USER, "user_id", _CASCADE),
    Relation(E.GROUP_MENTOR, E.USER, "mentor_id", _CASCADE),
    Relation(E.GROUP_MENTOR, E.USER, "added_by", _CASCADE),
    Relation(E.DOCUMENT, E.USER, "uploaded_by", _CASCADE),
    Relation(E.PROGRESS_REPORT_MENTOR, E.USER, "mentor_id", _CASCADE),
    Relation(E.SUBMISSION_PERIOD, E.USER, "created_by", _CASCADE),
    Relation(E.DECISION, E.USER, "created_by", _CASCADE),
    Relation(E.COUNCIL_MEMBER, E.USER, "user_id", _CASCADE),
    Relation(E.REVIEW_ASSIGNMENT, E.USER, "reviewer_id", _CASCADE),
    # Student enrolment
    Relation(E.SEMESTER_STUDENT, E.STUDENT, "student_id", _CASCADE),
    Relation(E.DEFENSE_MEMBER_RESULT, E.STUDENT, "student_id", _CASCADE),
    # Semester
    Relation(E.USER_ROLE, E.SEMESTER, "semester_id", _CASCADE),
    Relation(E.SEMESTER_STUDENT, E.SEMESTER, "semester_id", _CASCADE),
    Relation(E.TOPIC, E.SEMESTER, "semester_id", _CASCADE),
    Relation(E.GROUP, E.SEMESTER, "semester_id", _CASCADE),
    Relation(E.SUBMISSION_PERIOD, E.SEMESTER, "semester_id", _CASCADE),
    Relation(E.DECISION, E.SEMESTER, "semester_id", _CASCADE),
    Relation(E.COUNCIL, E.SEMESTER, "semester_id", _CASCADE),
    # Council
    Relation(E.COUNCIL, E.SUBMISSION_PERIOD, "submission_period_id", _IGNORE),
    Relation(E.COUNCIL_MEMBER, E.COUNCIL, "council_id", _CASCADE),
    Relation(E.REVIEW_SCHEDULE, E.COUNCIL, "council_id", _CASCADE),
    Relation(E.REVIEW_ASSIGNMENT, E.COUNCIL, "council_id", _CASCADE),
    Relation(E.REVIEW_ASSIGNMENT, E.REVIEW_SCHEDULE, "review_schedule_id", _CASCADE),
    Relation(E.DEFENSE_SCHEDULE, E.COUNCIL, "council_id", _CASCADE),
    Relation(E.DEFENSE_MEMBER_RESULT, E.DEFENSE_SCHEDULE, "defense_schedule_id", _CASCADE),
    # Topic
    Relation(E.TOPIC_REGISTRATION, E.TOPIC, "topic_id", _BLOCK),
    Relation(E.TOPIC_ASSIGNMENT, E.TOPIC, "topic_id", _CASCADE),
    Relation(E.DOCUMENT, E.TOPIC, "topic_id", _CASCADE),
    Relation(E.REVIEW_SCHEDULE, E.TOPIC, "topic_id", _CASCADE),
    Relation(E.REVIEW_ASSIGNMENT, E.TOPIC, "topic_id", _CASCADE),
    # Group
    Relation(E.GROUP_MEMBER, E.GROUP, "group_id", _CASCADE),
    Relation(E.GROUP_MENTOR, E.GROUP, "group_id", _CASCADE),
    Relation(E.TOPIC_ASSIGNMENT, E.GROUP, "group_id", _CASCADE),
    Relation(E.PROGRESS_REPORT, E.GROUP, "group_id", _CASCADE),
    Relation(E.MEETING_SCHEDULE, E.GROUP, "group_id", _CASCADE),
    Relation(E.REVIEW_SCHEDULE, E.GROUP, "group_id", _CASCADE),
    Relation(E.DEFENSE_SCHEDULE, E.GROUP, "group_id", _CASCADE),
    Relation(E.PROGRESS_REPORT_MENTOR, E.PROGRESS_REPORT, "report_id", _CASCADE),
    Relation(E.FEEDBACK, E.MEETING_SCHEDULE, "meeting_id", _CASCADE),
)

SEMESTER_PATHS: Mapping[EntityType, SemesterPath] = MappingProxyType({
    E.USER_ROLE: SemesterPath(),
    E.SEMESTER_STUDENT: SemesterPath(),
    E.TOPIC: SemesterPath(),
    E.GROUP: SemesterPath(),
    E.SUBMISSION_PERIOD: SemesterPath(),
    E.DECISION: SemesterPath(),
    E.COUNCIL: SemesterPath(),
    E.TOPIC_REGISTRATION: SemesterPath((SemesterHop("topic_id", E.TOPIC),)),
    E.TOPIC_ASSIGNMENT: SemesterPath((SemesterHop("topic_id", E.TOPIC),)),
    E.DOCUMENT: SemesterPath((SemesterHop("topic_id", E.TOPIC),)),
    E.GROUP_MEMBER: SemesterPath((SemesterHop("group_id", E.GROUP),)),
    E.GROUP_MENTOR: SemesterPath((SemesterHop("group_id", E.GROUP),)),
    E.PROGRESS_REPORT: SemesterPath((SemesterHop("group_id", E.GROUP),)),
    E.MEETING_SCHEDULE: SemesterPath((SemesterHop("group_id", E.GROUP),)),
    E.FEEDBACK: SemesterPath((
        SemesterHop("meeting_id", E.MEETING_SCHEDULE),
        SemesterHop("group_id", E.GROUP),
    )),
    E.PROGRESS_REPORT_MENTOR: SemesterPath((
        SemesterHop("report_id", E.PROGRESS_REPORT),
        SemesterHop("group_id", E.GROUP),
    )),
    E.COUNCIL_MEMBER: SemesterPath((SemesterHop("council_id", E.COUNCIL),)),
    E.REVIEW_SCHEDULE: SemesterPath((SemesterHop("group_id", E.GROUP),)),
    E.REVIEW_ASSIGNMENT: SemesterPath((SemesterHop("topic_id", E.TOPIC),)),
    E.DEFENSE_SCHEDULE: SemesterPath((SemesterHop("group_id", E.GROUP),)),
    E.DEFENSE_MEMBER_RESULT: SemesterPath((
        SemesterHop("defense_schedule_id", E.DEFENSE_SCHEDULE),
        SemesterHop("group_id", E.GROUP),
    )),
})

ROOT_TYPES: frozenset[EntityType] = frozenset({E.USER, E.SEMESTER, E.TOPIC})


class CatalogError(ValueError):
    """Raised at startup when the catalog table is inconsistent."""


class EntityGraphCatalog:
    """Read-only graph queries over the relation table."""

    def __init__(
        self,
        relations: Iterable[Relation] = RELATIONS,
        semester_paths: Mapping[EntityType, SemesterPath] = SEMESTER_PATHS,
        root_types: frozenset[EntityType] = ROOT_TYPES,
    ) -> None:
        self._relations = tuple(relations)
        self._semester_paths = semester_paths
        self.root_types = root_types
        children: dict[EntityType, list[Relation]] = {}
        parents: dict[EntityType, list[Relation]] = {}
        for rel in self._relations:
            children.setdefault(rel.parent_type, []).append(rel)
            parents.setdefault(rel.entity_type, []).append(rel)
        self._children = {k: tuple(v) for k, v in children.items()}
        self._parents = {k: tuple(v) for k, v in parents.items()}
        self._topological = self._sort_types()
        self._validate_semester_paths()

    @property
    def relations(self) -> tuple[Relation, ...]:
        return self._relations

    def children_of(
        self, parent_type: EntityType, *, include_ignored: bool = False
    ) -> tuple[Relation, ...]:
        """Relations whose parent is parent_type; IGNORE rows are dropped unless asked for."""
        rels = self._children.get(parent_type, ())
        if include_ignored:
            return rels
        return tuple(r for r in rels if r.policy is not CascadePolicy.IGNORE)

    def parents_of(
        self, entity_type: EntityType, *, include_ignored: bool = False
    ) -> tuple[Relation, ...]:
        """Relations whose child is entity_type; IGNORE rows are dropped unless asked for."""
        rels = self._parents.get(entity_type, ())
        if include_ignored:
            return rels
        return tuple(r for r in rels if r.policy is not CascadePolicy.IGNORE)

    def semester_path(self, entity_type: EntityType) -> SemesterPath | None:
        """How entity_type reaches its semester, or None if it is not semester-scoped."""
        return self._semester_paths.get(entity_type)

    def is_semester_bound(self, entity_type: EntityType) -> bool:
        """True when the type, or anything it cascades to, belongs to a semester."""
        return entity_type in self._semester_bound_types

    def reachable_types(self, root_type: EntityType) -> list[EntityType]:
        """Types reachable from root_type via non-IGNORE relations, parents before children.

        root_type itself is not included.
        """
        seen: set[EntityType] = set()
        stack = [root_type]
        while stack:
            current = stack.pop()
            for rel in self.children_of(current):
                if rel.entity_type not in seen:
                    seen.add(rel.entity_type)
                    stack.append(rel.entity_type)
        seen.discard(root_type)
        return [t for t in self._topological if t in seen]

    @cached_property
    def _semester_bound_types(self) -> frozenset[EntityType]:
        bound: set[EntityType] = set(self._semester_paths)
        for entity_type in reversed(self._topological):
            if any(r.entity_type in bound for r in self.children_of(entity_type)):
                bound.add(entity_type)
        return frozenset(bound)

    def _sort_types(self) -> list[EntityType]:
        """Kahn's algorithm over parent -> child edges; raises CatalogError on a cycle."""
        nodes: set[EntityType] = set()
        for rel in self._relations:
            nodes.add(rel.entity_type)
            nodes.add(rel.parent_type)
        incoming = {n: 0 for n in nodes}
        edges: dict[EntityType, set[EntityType]] = {n: set() for n in nodes}
        for rel in self._relations:
            if rel.entity_type not in edges[rel.parent_type]:
                edges[rel.parent_type].add(rel.entity_type)
                incoming[rel.entity_type] += 1
        ready = sorted((n for n, deg in incoming.items() if deg == 0), key=lambda t: t.value)
        order: list[EntityType] = []
        while ready:
            node = ready.pop(0)
            order.append(node)
            for child in sorted(edges[node], key=lambda t: t.value):
                incoming[child] -= 1
                if incoming[child] == 0:
                    ready.append(child)
        if len(order) != len(nodes):
            stuck = sorted(t.value for t, deg in incoming.items() if deg > 0)
            raise CatalogError(f"Entity graph has a cycle through: {', '.join(stuck)}")
        return order

    def _validate_semester_paths(self) -> None:
        for entity_type, path in self._semester_paths.items():
            current = entity_type
            for hop in path.hops:
                if not any(
                    r.foreign_key == hop.foreign_key and r.parent_type == hop.target
                    for r in self.parents_of(current, include_ignored=True)
                ):
                    raise CatalogError(
                        f"Semester path of {entity_type.value} uses undeclared "
                        f"{current.value}.{hop.foreign_key} -> {hop.target.value}"
                    )
                current = hop.target
            if current not in self._semester_paths or self._semester_paths[current].hops:
                raise CatalogError(
                    f"Semester path of {entity_type.value} does not end at a type "
                    "that carries its own semester column"
                )


_default_catalog = EntityGraphCatalog()


def get_entity_graph_catalog() -> EntityGraphCatalog:
    """Process-wide catalog built from RELATIONS at import."""
    return _default_catalog
