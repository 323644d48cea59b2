"""Domain layer: value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import (
    Action,
    CascadePolicy,
    DenialReason,
    EntityType,
    LifecycleOutcome,
    RoleName,
    SemesterStatus,
)
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    BlockedByActiveChildrenException,
    CapstoneException,
    ParentDeletedException,
    ProtectedEntityException,
    ResourceNotFoundException,
    ScopeConflictException,
    TransactionFailureException,
    ValidationException,
)
from app.domain.value_objects import (
    Allow,
    AuthorizationDecision,
    Deny,
    Relation,
    SemesterHop,
    SemesterPath,
)

__all__ = [
    # Enums
    "Action",
    "CascadePolicy",
    "DenialReason",
    "EntityType",
    "LifecycleOutcome",
    "RoleName",
    "SemesterStatus",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "BlockedByActiveChildrenException",
    "CapstoneException",
    "ParentDeletedException",
    "ProtectedEntityException",
    "ResourceNotFoundException",
    "ScopeConflictException",
    "TransactionFailureException",
    "ValidationException",
    # Value objects
    "Allow",
    "Deny",
    "AuthorizationDecision",
    "Relation",
    "SemesterHop",
    "SemesterPath",
]
