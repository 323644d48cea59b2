"""Application lifespan.

Startup configures logging and builds the Entity Graph Catalog and Role
Registry, so a broken relation table stops the process before it serves a
request. Shutdown disposes the SQL engine.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.application.services.entity_graph import get_entity_graph_catalog
from app.application.services.role_registry import get_role_registry
from app.core.config import get_settings
from app.domain.enums import RoleName
from app.infrastructure.persistence import database
from app.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    setup_logging()

    catalog = get_entity_graph_catalog()
    registry = get_role_registry()
    logger.info(
        "%s %s starting: %d relation(s), roots %s, %d protected role(s)",
        settings.app_name,
        settings.app_version,
        len(catalog.relations),
        ", ".join(sorted(t.value for t in catalog.root_types)),
        len(registry.protected_roles_in(RoleName)),
    )

    yield

    await database.dispose_engine()
