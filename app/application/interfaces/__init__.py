"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    IAuditLogRepository,
    ILifecycleRepository,
    ILifecycleStore,
    ILifecycleUnitOfWork,
    IRoleAssignmentRepository,
    IUserRepository,
)
from app.application.interfaces.services import IAuditRecorder

__all__ = [
    "IAuditLogRepository",
    "IAuditRecorder",
    "ILifecycleRepository",
    "ILifecycleStore",
    "ILifecycleUnitOfWork",
    "IRoleAssignmentRepository",
    "IUserRepository",
]
