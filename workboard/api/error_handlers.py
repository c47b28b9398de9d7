"""Error Handlers - every failure leaves the API as one JSON envelope.

Invariants:
    - Body shape is always {"error": {"code", "message", "category", "severity", ...}}
    - Taxonomy errors keep their own status and code; offending ids/fields go in "details"
    - Request validation failures are 400 INVALID_INPUT, never FastAPI's default 422
    - Unexpected exceptions are 500 INTERNAL_ERROR and never echo internals

Design Decisions:
    - 4xx logged at warning (caller mistakes), 5xx at error with traceback
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from workboard.core.errors import (
    DependencyNotSatisfiedError, ErrorCategory, ErrorSeverity, InvalidDependencySetError,
    InvalidInputError, InvalidTeamMemberError, WorkboardError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(WorkboardError, workboard_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)


def error_details(exc: WorkboardError) -> list[dict]:
    """Machine-readable pointers at what the caller got wrong."""
    if isinstance(exc, InvalidInputError):
        return [{"field": exc.field}]
    if isinstance(exc, (InvalidDependencySetError, InvalidTeamMemberError)):
        return [{"id": invalid_id} for invalid_id in exc.invalid_ids]
    if isinstance(exc, DependencyNotSatisfiedError):
        return [{"id": pending_id, "status": "pending"} for pending_id in exc.pending_ids]
    return []


async def workboard_error_handler(request: Request, exc: WorkboardError) -> JSONResponse:
    level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
    logger.log(
        level,
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "principal_id": exc.context.principal_id,
        },
    )
    body = exc.to_response()
    details = error_details(exc)
    if details:
        body["error"]["details"] = details
    return JSONResponse(status_code=exc.http_status, content=body)


async def validation_error_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.warning(
        f"Invalid request on {request.url.path}: {len(details)} problem(s)",
        extra={"error_code": "INVALID_INPUT", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "INVALID_INPUT",
                "message": "Invalid request data",
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.ERROR.value,
                "details": details,
            },
        },
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.url.path}",
        exc_info=exc,
        extra={"path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )
