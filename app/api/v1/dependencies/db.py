"""Store, audit and lifecycle service dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from app.application.services.audit_recorder import AuditRecorder
from app.application.services.authorization_service import AuthorizationEvaluator
from app.application.services.entity_graph import get_entity_graph_catalog
from app.application.services.lifecycle_coordinator import LifecycleCoordinator
from app.application.services.role_registry import get_role_registry
from app.infrastructure.persistence.database import get_session_factory
from app.infrastructure.persistence.repositories import SqlLifecycleStore


def get_lifecycle_store() -> SqlLifecycleStore:
    """SQL store over the shared session factory; 503 when DATABASE_URL is unusable."""
    return SqlLifecycleStore(get_session_factory())


def get_audit_recorder(
    store: Annotated[SqlLifecycleStore, Depends(get_lifecycle_store)],
) -> AuditRecorder:
    return AuditRecorder(store)


def get_authorization_evaluator() -> AuthorizationEvaluator:
    return AuthorizationEvaluator(get_role_registry())


def get_lifecycle_coordinator(
    store: Annotated[SqlLifecycleStore, Depends(get_lifecycle_store)],
    audit_recorder: Annotated[AuditRecorder, Depends(get_audit_recorder)],
) -> LifecycleCoordinator:
    """Coordinator over the process-wide catalog and registry."""
    return LifecycleCoordinator(
        store=store,
        audit_recorder=audit_recorder,
        catalog=get_entity_graph_catalog(),
        registry=get_role_registry(),
    )
