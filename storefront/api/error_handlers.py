"""Error Handlers — map every failure reaching the API boundary onto the StorefrontError envelope.

Invariants:
    - StorefrontError → its http_status + to_response() envelope
    - 4xx errors logged at WARNING, 5xx at ERROR (with traceback for untagged ones)
    - RequestValidationError → 400 envelope with one detail per offending field
    - Untagged exceptions → 500 envelope with a fixed message; str(exc) stays in the log

Design Decisions:
    - Request validation and untagged failures are first converted to domain errors
      (ValidationError / InternalError) so a single envelope shape reaches clients
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from storefront.core.errors import (
    ErrorContext, InternalError, StorefrontError, ValidationError,
)

logger = logging.getLogger(__name__)

_GENERIC_MESSAGE = "An unexpected error occurred"


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    app.add_exception_handler(StorefrontError, _handle_storefront_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(Exception, _handle_unexpected)


async def _handle_storefront_error(request: Request, exc: StorefrontError):
    _log(request, exc)
    return _respond(exc)


async def _handle_request_validation(request: Request, exc: RequestValidationError):
    error = ValidationError("Invalid request data")
    _log(request, error, detail=str(exc.errors()))
    body = error.to_response()
    body["error"]["details"] = [
        {
            "field": ".".join(str(part) for part in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    return JSONResponse(status_code=error.http_status, content=body)


async def _handle_unexpected(request: Request, exc: Exception):
    error = InternalError(_GENERIC_MESSAGE, ErrorContext(operation=request.url.path))
    logger.error(
        f"Unhandled {exc.__class__.__name__} on {request.url.path}: {exc}",
        exc_info=exc,
        extra={"error_code": error.code, "path": request.url.path},
    )
    return _respond(error)


def _log(request: Request, exc: StorefrontError, detail: str | None = None) -> None:
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        f"{exc.__class__.__name__} on {request.url.path}: {detail or exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "entity": exc.context.entity,
            "record_id": exc.context.record_id,
        },
    )


def _respond(exc: StorefrontError) -> JSONResponse:
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())
