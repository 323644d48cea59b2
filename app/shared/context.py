"""Request context management using contextvars.

Async-safe storage for request-scoped data used by the audit trail:
who is calling and from where. Set by the authentication dependency;
read by the audit recorder when it builds SystemLog rows.

Usage:
    set_request_context(actor_id="user123", ip_address="10.0.0.1")
    actor_id = get_current_actor_id()
"""

from contextvars import ContextVar

_current_actor_id: ContextVar[str | None] = ContextVar("current_actor_id", default=None)
_current_ip_address: ContextVar[str | None] = ContextVar(
    "current_ip_address", default=None
)
_current_request_id: ContextVar[str | None] = ContextVar(
    "current_request_id", default=None
)


def set_request_context(
    actor_id: str | None,
    ip_address: str | None = None,
) -> None:
    """Set the caller for this request. Scoped to the current async task."""
    _current_actor_id.set(actor_id)
    _current_ip_address.set(ip_address)


def set_request_id(request_id: str | None) -> None:
    """Set the request correlation id (RequestIDMiddleware)."""
    _current_request_id.set(request_id)


def clear_request_context() -> None:
    """Reset actor, IP and request id to defaults."""
    _current_actor_id.set(None)
    _current_ip_address.set(None)
    _current_request_id.set(None)


def get_current_actor_id() -> str | None:
    """Return the authenticated caller id, or None outside a request."""
    return _current_actor_id.get()


def get_current_ip_address() -> str | None:
    """Return the client IP for the current request, if known."""
    return _current_ip_address.get()


def get_current_request_id() -> str | None:
    """Return the request id for the current request, if known."""
    return _current_request_id.get()
