"""Core: settings, exception handlers and the application lifespan."""

from app.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
