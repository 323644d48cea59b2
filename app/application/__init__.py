"""Application layer: interfaces, DTOs, services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (store, repositories).
"""

from app.application.interfaces import (
    IAuditLogRepository,
    IAuditRecorder,
    ILifecycleRepository,
    ILifecycleStore,
    ILifecycleUnitOfWork,
    IRoleAssignmentRepository,
    IUserRepository,
)
from app.application.services import (
    AuditRecorder,
    AuthorizationEvaluator,
    EntityGraphCatalog,
    LifecycleCoordinator,
    RoleRegistry,
)

__all__ = [
    "AuditRecorder",
    "AuthorizationEvaluator",
    "EntityGraphCatalog",
    "IAuditLogRepository",
    "IAuditRecorder",
    "ILifecycleRepository",
    "ILifecycleStore",
    "ILifecycleUnitOfWork",
    "IRoleAssignmentRepository",
    "IUserRepository",
    "LifecycleCoordinator",
    "RoleRegistry",
]
