"""Application services: role registry, authorization, entity graph, lifecycle, audit."""

from app.application.services.audit_recorder import AuditRecorder
from app.application.services.authorization_service import AuthorizationEvaluator
from app.application.services.entity_graph import (
    CatalogError,
    EntityGraphCatalog,
    get_entity_graph_catalog,
)
from app.application.services.lifecycle_coordinator import LifecycleCoordinator
from app.application.services.role_registry import RoleRegistry, get_role_registry

__all__ = [
    "AuditRecorder",
    "AuthorizationEvaluator",
    "CatalogError",
    "EntityGraphCatalog",
    "LifecycleCoordinator",
    "RoleRegistry",
    "get_entity_graph_catalog",
    "get_role_registry",
]
