"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to HTTP responses (SRP, OCP for adding new handlers).
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.exceptions import NutrigateException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "INVALID_ROLE": 400,
    "CONFLICT": 409,
    "INVALID_CREDENTIALS": 401,
    "INVALID_LICENSE": 401,
    "INVALID_ADMIN_KEY": 401,
    "NO_TOKEN": 401,
    "INVALID_FORMAT": 401,
    "TOKEN_EXPIRED": 401,
    "INVALID_TOKEN": 401,
    "INSUFFICIENT_ROLE": 403,
    "VERIFICATION_PENDING": 403,
    "VERIFICATION_REJECTED": 403,
    "RESOURCE_NOT_FOUND": 404,
    "PROFILE_NOT_FOUND": 404,
    "SAME_PASSWORD": 400,
    "INVALID_VERIFICATION_TRANSITION": 409,
    "SERVICE_UNAVAILABLE": 503,
}


def status_for(exc: NutrigateException) -> int:
    return _ERROR_CODE_STATUS.get(exc.error_code, 400)


def _nutrigate_exception_handler(
    request: Request, exc: NutrigateException
) -> JSONResponse:
    """Return JSON from NutrigateException.to_dict() with appropriate status code."""
    status = status_for(exc)
    if status >= 500:
        logger.error("%s: %s", exc.error_code, exc.message)
    elif status == 404 and exc.error_code == "PROFILE_NOT_FOUND":
        logger.error("Broken credential/profile link: %s", exc.details)
    return JSONResponse(
        status_code=status,
        content=exc.to_dict(),
    )


def _field_name(loc: tuple[Any, ...]) -> str:
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header", "form")]
    return ".".join(parts) or "request"


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400 VALIDATION_ERROR with ``errors: {field: message}``."""
    errors: dict[str, str] = {}
    for error in exc.errors():
        errors.setdefault(_field_name(tuple(error.get("loc", ()))), str(error.get("msg")))
    return JSONResponse(
        status_code=400,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "errors": errors,
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: NutrigateException (and
    subclasses), RequestValidationError, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(NutrigateException, _nutrigate_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
