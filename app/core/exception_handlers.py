"""Exception handlers: domain and framework errors to JSON responses.

Every error body has the shape {"error", "message", "details"}; domain
errors also carry "retryable" so clients know whether to try again.
Register once with register_exception_handlers(app).
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.exceptions import CapstoneException

logger = logging.getLogger(__name__)

# error_code -> HTTP status. Unlisted codes are client errors (400).
ERROR_STATUS: dict[str, int] = {
    "AUTHENTICATION_ERROR": 401,
    "PERMISSION_DENIED": 403,
    "PROTECTED_ENTITY": 403,
    "RESOURCE_NOT_FOUND": 404,
    "BLOCKED_BY_ACTIVE_CHILDREN": 409,
    "PARENT_DELETED": 409,
    "SCOPE_CONFLICT": 409,
    "TRANSACTION_FAILURE": 503,
    "SERVICE_UNAVAILABLE": 503,
}


def _error_body(error: str, message: Any, details: Any = None) -> dict[str, Any]:
    return {"error": error, "message": message, "details": details or {}}


def _domain_error(request: Request, exc: CapstoneException) -> JSONResponse:
    status = ERROR_STATUS.get(exc.error_code, 400)
    if status >= 500:
        logger.warning("%s %s -> %s: %s", request.method, request.url.path, status, exc.message)
    headers: dict[str, str] = {}
    if status == 401:
        headers["WWW-Authenticate"] = "Bearer"
    if exc.retryable:
        headers["Retry-After"] = "1"
    return JSONResponse(status_code=status, content=exc.to_dict(), headers=headers or None)


def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content=_error_body("VALIDATION_ERROR", "Request validation failed", exc.errors()),
    )


def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body("HTTP_ERROR", exc.detail),
        headers=getattr(exc, "headers", None),
    )


def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = str(exc) if get_settings().debug else "Internal server error"
    return JSONResponse(status_code=500, content=_error_body("INTERNAL_ERROR", message))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CapstoneException, _domain_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(Exception, _unhandled_error)
