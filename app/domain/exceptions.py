"""Domain exceptions for the lifecycle engine.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class CapstoneException(Exception):
    """Base exception for all application errors.

    All custom exceptions inherit from this class to allow consistent
    error handling and logging. Presentation layer maps these to HTTP
    responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. entity_type, count).
        retryable: True only for transient store faults.
    """

    retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API error bodies."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
            "retryable": self.retryable,
        }


class ValidationException(CapstoneException):
    """Raised when input validation fails (e.g. unsupported root type)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(CapstoneException):
    """Raised when authentication fails (e.g. invalid or expired token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(CapstoneException):
    """Raised when the caller's role assignments do not allow the request.

    The denial reason is the string produced by the Authorization Evaluator
    (e.g. 'insufficient role', 'role not valid for semester').
    """

    def __init__(
        self,
        reason: str,
        action: str | None = None,
        semester_id: str | None = None,
    ) -> None:
        """Initialize with the denial reason and optional request context.

        Args:
            reason: Denial reason from the evaluator.
            action: Optional action that was attempted (e.g. 'user:delete').
            semester_id: Optional semester context of the request.
        """
        message = f"Permission denied: {reason}"
        details: dict[str, Any] = {"reason": reason}
        if action:
            details["action"] = action
        if semester_id:
            details["semester_id"] = semester_id
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(CapstoneException):
    """Raised when a lifecycle root (or other requested entity) is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'User', 'Semester').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ProtectedEntityException(CapstoneException):
    """Raised when cascade-deleting a principal who holds a protected role."""

    def __init__(self, entity_type: str, entity_id: str, roles: list[str]) -> None:
        super().__init__(
            f"Cannot delete {entity_type} {entity_id}: holds protected role(s) {', '.join(roles)}",
            "PROTECTED_ENTITY",
            {"entity_type": entity_type, "entity_id": entity_id, "roles": roles},
        )


class BlockedByActiveChildrenException(CapstoneException):
    """Raised when a BLOCK relation has active children inside the cascade."""

    def __init__(self, entity_type: str, parent_type: str, count: int) -> None:
        """Initialize with the blocking child type and how many rows block.

        Args:
            entity_type: Child entity type declared BLOCK (e.g. 'TopicRegistration').
            parent_type: Parent type the cascade tried to remove (e.g. 'Topic').
            count: Number of active child rows.
        """
        super().__init__(
            f"Cannot delete {parent_type}: {count} active {entity_type} row(s) exist",
            "BLOCKED_BY_ACTIVE_CHILDREN",
            {"entity_type": entity_type, "parent_type": parent_type, "count": count},
        )


class ScopeConflictException(CapstoneException):
    """Raised when the scope semester is missing, deleted, or incompatible with the root."""

    def __init__(self, semester_id: str, reason: str) -> None:
        super().__init__(
            f"Invalid scope semester {semester_id}: {reason}",
            "SCOPE_CONFLICT",
            {"semester_id": semester_id, "reason": reason},
        )


class ParentDeletedException(CapstoneException):
    """Raised when restoring a root whose own parent is still deleted."""

    def __init__(
        self, entity_type: str, entity_id: str, parent_type: str, parent_id: str
    ) -> None:
        super().__init__(
            f"Cannot restore {entity_type} {entity_id}: parent {parent_type} {parent_id} is deleted",
            "PARENT_DELETED",
            {
                "entity_type": entity_type,
                "entity_id": entity_id,
                "parent_type": parent_type,
                "parent_id": parent_id,
            },
        )


class TransactionFailureException(CapstoneException):
    """Raised when the store fails mid-transaction; everything was rolled back.

    Safe to retry by the caller.
    """

    retryable = True

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            f"Transaction failed during {operation}; no changes were persisted",
            "TRANSACTION_FAILURE",
            {"operation": operation, "reason": reason},
        )


class SqlNotConfiguredException(CapstoneException):
    """Raised when an operation requires the SQL store but it is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
