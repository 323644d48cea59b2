"""Logging configuration for the application."""

import logging
import sys

from app.core.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Audit writes that fail land here instead of aborting the business call.
AUDIT_FALLBACK_LOGGER = "app.audit.fallback"


def setup_logging() -> None:
    """Configure stdout logging once per process.

    The app level is DEBUG when settings.debug is True, otherwise INFO.
    SQL statements are logged only when database_echo is set; the engine
    logs them itself in that case.
    """
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    if not settings.database_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    # The fallback channel must stay visible even when the app runs quiet.
    logging.getLogger(AUDIT_FALLBACK_LOGGER).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def get_audit_fallback_logger() -> logging.Logger:
    """Logger for audit records that could not be persisted."""
    return logging.getLogger(AUDIT_FALLBACK_LOGGER)
