"""Error Handlers - global exception handlers for the Whispr API.

Invariants:
    - WhisprError -> structured JSON with error code, message, severity
    - RequestValidationError -> field-level error details, 400
    - Exception (catch-all) -> never leaks internal details

Design Decisions:
    - Three-layer handler: domain (WhisprError), validation (Pydantic), catch-all (Exception)
    - Client mistakes (4xx) log at warning, server faults at error
    - Log messages carry codes and field locations only; ids and the request
      path travel as extras, submitted values are never logged
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from whispr.core.errors import WhisprError, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_whispr_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_whispr_error_handler(app: FastAPI) -> None:
    """Register Whispr domain/infrastructure error handler."""

    @app.exception_handler(WhisprError)
    async def whispr_error_handler(request: Request, exc: WhisprError):
        log = logger.warning if exc.http_status < 500 else logger.error
        log(
            f"WhisprError {exc.code} ({exc.category.value})",
            extra={
                "error_code": exc.code,
                "entity": exc.context.entity,
                "entity_id": exc.context.entity_id,
                "path": request.url.path,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error: {_error_locations(exc)}",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled {type(exc).__name__}",
            exc_info=True,
            extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _error_locations(exc: RequestValidationError) -> str:
    """Field locations and error types only; submitted values never reach the log."""
    return ", ".join(
        f"{'.'.join(str(loc) for loc in e['loc'])} ({e['type']})"
        for e in exc.errors()
    )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
