"""Error Handlers — every failure leaves the API in the same JSON envelope.

Invariants:
    - Body shape is always {"error": {code, message, category, severity, ...}}
    - TeamBuilderError → its own http_status and to_response()
    - RequestValidationError → 400 with field-level details
    - HTTPException (401 identity failures, unknown routes) → same envelope
    - Exception (catch-all) → 500, never leaks internal details

Design Decisions:
    - Domain rejections are logged at INFO/WARNING by severity; only
      infrastructure failures and crashes log at ERROR
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from teambuilder.core.errors import ErrorSeverity, TeamBuilderError

logger = logging.getLogger(__name__)

_HTTP_CODES = {
    status.HTTP_401_UNAUTHORIZED: ("UNAUTHENTICATED", "authorization"),
    status.HTTP_404_NOT_FOUND: ("ROUTE_NOT_FOUND", "resource_not_found"),
    status.HTTP_405_METHOD_NOT_ALLOWED: ("METHOD_NOT_ALLOWED", "validation"),
}


def error_body(
    code: str, message: str, category: str,
    severity: ErrorSeverity = ErrorSeverity.ERROR, **extra,
) -> dict:
    """Envelope for errors that do not originate from a TeamBuilderError."""
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category,
            "severity": severity.value,
            **extra,
        },
    }


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    app.add_exception_handler(TeamBuilderError, teambuilder_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)


def _log_level_for(exc: TeamBuilderError) -> int:
    if exc.retryable or exc.severity == ErrorSeverity.CRITICAL:
        return logging.ERROR
    if exc.severity == ErrorSeverity.INFO:
        return logging.INFO
    return logging.WARNING


async def teambuilder_error_handler(request: Request, exc: TeamBuilderError):
    logger.log(
        _log_level_for(exc),
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "team_id": exc.context.team_id,
            "user_id": exc.context.user_id,
            "invitation_id": exc.context.invitation_id,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            "VALIDATION_ERROR", "Invalid request data", "validation",
            details=details,
        ),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Pass through pre-built envelopes; wrap plain-string details."""
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        content = exc.detail
    else:
        code, category = _HTTP_CODES.get(exc.status_code, ("HTTP_ERROR", "validation"))
        content = error_body(
            code, str(exc.detail), category, ErrorSeverity.WARNING,
        )
    return JSONResponse(
        status_code=exc.status_code, content=content, headers=exc.headers,
    )


async def generic_error_handler(request: Request, exc: Exception):
    """Catch-all; never leaks internal details."""
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}",
        exc_info=True,
        extra={"path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(
            "INTERNAL_ERROR", "An unexpected error occurred", "internal",
            ErrorSeverity.CRITICAL,
        ),
    )
