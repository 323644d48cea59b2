"""Domain value objects and shared value types."""

from app.domain.value_objects.core import (
    Allow,
    AuthorizationDecision,
    Deny,
    Relation,
    SemesterHop,
    SemesterPath,
)

__all__ = [
    "Allow",
    "Deny",
    "AuthorizationDecision",
    "Relation",
    "SemesterHop",
    "SemesterPath",
]
