"""Span helpers for lifecycle operations.

Spans go to whatever tracer provider the host process installs; with only
opentelemetry-api present they are no-ops. Only allowlisted keyword
arguments become span attributes, so snapshots and secrets never leave the
process this way.
"""

import inspect
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

_tracer = trace.get_tracer("app.lifecycle")

# Keyword arguments copied onto spans as arg.<name>.
SPAN_ARGUMENTS = frozenset({
    "root_type", "root_id", "actor_id", "scope_semester_id", "semester_id", "action",
})

AttributeValue = str | int | float | bool


def _argument_attributes(kwargs: dict[str, Any]) -> dict[str, AttributeValue]:
    attrs: dict[str, AttributeValue] = {}
    for key, value in kwargs.items():
        if key in SPAN_ARGUMENTS and value is not None:
            attrs[f"arg.{key}"] = getattr(value, "value", None) or str(value)
    return attrs


def traced(span_name: str) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[Any]]]:
    """Run a coroutine function inside a span named span_name.

    Domain errors mark the span as failed with their error_code; the
    exception itself always propagates.
    """

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"@traced expects a coroutine function, got {func.__qualname__}")

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            with _tracer.start_as_current_span(
                span_name,
                attributes=_argument_attributes(kwargs),
                record_exception=False,
                set_status_on_exception=False,
            ) as span:
                try:
                    return await func(*args, **kwargs)
                except Exception as exc:
                    code = getattr(exc, "error_code", type(exc).__name__)
                    span.set_status(Status(StatusCode.ERROR, code))
                    span.record_exception(exc)
                    raise

        return wrapper

    return decorator


def add_span_attributes(**attributes: AttributeValue) -> None:
    """Attach attributes to the current span if one is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attributes(attributes)
