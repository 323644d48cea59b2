"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.audit_log_repo import AuditLogRepository
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.lifecycle_repo import LifecycleRepository
from app.infrastructure.persistence.repositories.role_repo import RoleRepository
from app.infrastructure.persistence.repositories.store import SqlLifecycleStore, SqlUnitOfWork
from app.infrastructure.persistence.repositories.user_repo import UserRepository
from app.infrastructure.persistence.repositories.user_role_repo import UserRoleRepository

__all__ = [
    "AuditLogRepository",
    "BaseRepository",
    "LifecycleRepository",
    "RoleRepository",
    "SqlLifecycleStore",
    "SqlUnitOfWork",
    "UserRepository",
    "UserRoleRepository",
]
