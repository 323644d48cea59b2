"""Shared telemetry: logging setup and tracing helpers."""

from app.shared.telemetry.logging import (
    get_audit_fallback_logger,
    get_logger,
    setup_logging,
)
from app.shared.telemetry.tracing import add_span_attributes, traced

__all__ = [
    "setup_logging",
    "get_logger",
    "get_audit_fallback_logger",
    "traced",
    "add_span_attributes",
]
