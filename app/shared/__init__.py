"""Shared utilities: request context, enums, telemetry, and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from app.shared.context import (
    clear_request_context,
    get_current_actor_id,
    get_current_ip_address,
    get_current_request_id,
    set_request_context,
    set_request_id,
)
from app.shared.enums import AuditAction, AuditSeverity
from app.shared.utils import ensure_utc, generate_cuid, utc_now

__all__ = [
    "set_request_context",
    "set_request_id",
    "clear_request_context",
    "get_current_actor_id",
    "get_current_ip_address",
    "get_current_request_id",
    "AuditAction",
    "AuditSeverity",
    "generate_cuid",
    "utc_now",
    "ensure_utc",
]
