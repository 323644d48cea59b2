"""SQL lifecycle store: one AsyncSession transaction per unit of work.

Implements ILifecycleStore. The transaction commits when the block exits
normally and rolls back on any exception; SQLAlchemy errors (including a
failed commit) surface as TransactionFailureException so callers never see
driver types.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.domain.exceptions import TransactionFailureException
from app.infrastructure.persistence.repositories.audit_log_repo import AuditLogRepository
from app.infrastructure.persistence.repositories.lifecycle_repo import LifecycleRepository
from app.infrastructure.persistence.repositories.user_repo import UserRepository
from app.infrastructure.persistence.repositories.user_role_repo import UserRoleRepository
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class SqlUnitOfWork:
    """Repositories bound to one session (and therefore one transaction)."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.entities = LifecycleRepository(session)
        self.role_assignments = UserRoleRepository(session)
        self.users = UserRepository(session)
        self.audit_log = AuditLogRepository(session)


class SqlLifecycleStore:
    """Opens sessions from the shared session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def transaction(self, operation: str = "lifecycle") -> AsyncIterator[SqlUnitOfWork]:
        try:
            async with self._session_factory() as session, session.begin():
                yield SqlUnitOfWork(session)
        except SQLAlchemyError as exc:
            logger.error("Transaction for %s rolled back: %s", operation, exc, exc_info=True)
            raise TransactionFailureException(operation, type(exc).__name__) from exc
