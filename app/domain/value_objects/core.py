"""Domain value objects for authorization and the lifecycle catalog.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

from dataclasses import dataclass, field

from app.domain.enums import CascadePolicy, DenialReason, EntityType

# Column every semester path ends in unless a type names it differently.
DEFAULT_SEMESTER_FIELD = "semester_id"


@dataclass(frozen=True)
class Allow:
    """Authorization decision: the request may proceed."""

    allowed: bool = field(default=True, init=False)


@dataclass(frozen=True)
class Deny:
    """Authorization decision: the request is refused, with a reason."""

    reason: DenialReason
    allowed: bool = field(default=False, init=False)


AuthorizationDecision = Allow | Deny


@dataclass(frozen=True)
class SemesterHop:
    """One foreign-key hop on the way to a semester column."""

    foreign_key: str
    target: EntityType

    def __post_init__(self) -> None:
        if not self.foreign_key:
            raise ValueError("SemesterHop.foreign_key must be non-empty")


@dataclass(frozen=True)
class SemesterPath:
    """Field path from an entity to the semester it belongs to.

    An empty hop list means the entity carries the semester column itself;
    otherwise each hop follows a foreign key to the next entity, and the
    final entity carries `field`.

    Example: GroupMember -> group_id -> Group.semester_id is
    SemesterPath(hops=(SemesterHop("group_id", EntityType.GROUP),)).
    """

    hops: tuple[SemesterHop, ...] = ()
    field: str = DEFAULT_SEMESTER_FIELD


@dataclass(frozen=True)
class Relation:
    """One row of the Entity Graph Catalog.

    Rows of `entity_type` reference `parent_type` through `foreign_key`;
    `policy` says what happens to them when the parent is soft-deleted.
    """

    entity_type: EntityType
    parent_type: EntityType
    foreign_key: str
    policy: CascadePolicy = CascadePolicy.CASCADE

    def __post_init__(self) -> None:
        if self.entity_type == self.parent_type:
            raise ValueError(
                f"Self-referencing relation on {self.entity_type.value} is not supported"
            )
        if not self.foreign_key:
            raise ValueError("Relation.foreign_key must be non-empty")
