"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps engine and framework
exceptions to HTTP responses.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.exceptions import DocAdminException
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

# Map error_code to HTTP status
ERROR_CODE_STATUS: dict[str, int] = {
    "RESOURCE_NOT_FOUND": 404,
    "AUTHENTICATION_ERROR": 401,
    "PERMISSION_DENIED": 403,
    "VALIDATION_ERROR": 422,
    "HEADER_MISMATCH": 422,
    "SCHEMA_LOAD_ERROR": 409,
    "ROLE_ALREADY_EXISTS": 409,
    "WRITE_ERROR": 502,
    "STORE_ERROR": 502,
    "AUDIT_WRITE_ERROR": 502,
}


def status_for(exc: DocAdminException) -> int:
    return ERROR_CODE_STATUS.get(exc.error_code, 400)


def _docadmin_exception_handler(
    request: Request, exc: DocAdminException
) -> JSONResponse:
    """Return JSON from DocAdminException.to_dict() with appropriate status code."""
    return JSONResponse(
        status_code=status_for(exc),
        content=exc.to_dict(),
    )


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": jsonable_errors(exc.errors()),
        },
    )


def jsonable_errors(errors: Any) -> list[dict[str, Any]]:
    """Drop non-serializable ``ctx`` values from pydantic error dicts."""
    out = []
    for err in errors:
        item = {k: v for k, v in err.items() if k != "ctx"}
        out.append(item)
    return out


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
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

    Call once after creating the app. Handlers: DocAdminException (and
    subclasses), RequestValidationError, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(DocAdminException, _docadmin_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
