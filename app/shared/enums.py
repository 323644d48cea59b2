"""Shared enumerations.

Cross-cutting enums used by application and infrastructure (audit action
and severity). Domain enums (roles, entity types, cascade policy) live in
app.domain.enums.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class AuditSeverity(_ValuesMixin, str, Enum):
    """Severity stored on SystemLog rows."""

    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class AuditAction(_ValuesMixin, str, Enum):
    """Audit action types written by the authorization and lifecycle engine."""

    AUTHORIZATION_DENIED = "AUTHORIZATION_DENIED"
    DELETE_USER = "DELETE_USER"
    DELETE_USER_ATTEMPT = "DELETE_USER_ATTEMPT"
    DELETE_ALL_USERS = "DELETE_ALL_USERS"
    DELETE_ALL_USERS_ATTEMPT = "DELETE_ALL_USERS_ATTEMPT"
    DELETE_SEMESTER = "DELETE_SEMESTER"
    DELETE_SEMESTER_ATTEMPT = "DELETE_SEMESTER_ATTEMPT"
    DELETE_TOPIC = "DELETE_TOPIC"
    DELETE_TOPIC_ATTEMPT = "DELETE_TOPIC_ATTEMPT"
    RESTORE_USER = "RESTORE_USER"
    RESTORE_USER_ATTEMPT = "RESTORE_USER_ATTEMPT"
    RESTORE_SEMESTER = "RESTORE_SEMESTER"
    RESTORE_SEMESTER_ATTEMPT = "RESTORE_SEMESTER_ATTEMPT"
    RESTORE_TOPIC = "RESTORE_TOPIC"
    RESTORE_TOPIC_ATTEMPT = "RESTORE_TOPIC_ATTEMPT"
