"""Error Handlers — global exception handlers for the Pet Provider API.

Invariants:
    - Every error body has the PetProviderError.to_response() envelope:
      code, message, category, severity, retryable, timestamp, context{uri, operation}
    - PetProviderError → its own http_status (400 caller errors, 503 storage)
    - RequestValidationError → 400 REQUEST_VALIDATION_ERROR with per-field details
      (field paths relative to the request body / query, e.g. "values", "selection.0.op")
    - Exception (catch-all) → 500 INTERNAL_ERROR, never leaks internal details

Design Decisions:
    - Request-shape and unexpected errors are wrapped in PetProviderError so clients
      parse one envelope shape
    - context.operation is the resolver verb from the path (query, insert, ...)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pet_provider.core.errors import (
    ErrorCategory, ErrorContext, ErrorSeverity, PetProviderError,
)

logger = logging.getLogger(__name__)

_REQUEST_PARTS = ("body", "query", "path")


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(PetProviderError)
    async def provider_error_handler(request: Request, exc: PetProviderError):
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"PetProviderError: {exc.message}",
            extra={
                "error_code": exc.code, "path": request.url.path,
                "uri": exc.context.uri, "operation": exc.context.operation,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        details = [_field_detail(e) for e in exc.errors()]
        logger.warning(
            f"Malformed request: {', '.join(d['field'] for d in details)}",
            extra={"error_code": "REQUEST_VALIDATION_ERROR", "path": request.url.path},
        )
        error = PetProviderError(
            "Invalid request data", "REQUEST_VALIDATION_ERROR",
            ErrorCategory.VALIDATION, ErrorSeverity.WARNING,
            _request_context(request), status.HTTP_400_BAD_REQUEST,
        )
        content = error.to_response()
        content["error"]["details"] = details
        return JSONResponse(status_code=error.http_status, content=content)

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True, extra={"path": request.url.path},
        )
        error = PetProviderError(
            "An unexpected error occurred", "INTERNAL_ERROR",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
            _request_context(request), status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
        return JSONResponse(status_code=error.http_status, content=error.to_response())


def _request_context(request: Request) -> ErrorContext:
    """Context from the request alone: the body may be the thing that is broken."""
    operation = request.url.path.rstrip("/").rsplit("/", 1)[-1] or None
    return ErrorContext(uri=request.query_params.get("uri"), operation=operation)


def _field_detail(error: dict) -> dict:
    loc = list(error["loc"])
    if loc and loc[0] in _REQUEST_PARTS:
        loc = loc[1:]
    return {
        "field": ".".join(str(part) for part in loc) or "request",
        "message": error["msg"],
        "type": error["type"],
    }
