"""
Error handlers — opaque error payloads keyed by a correlation id.

The caller only ever sees ``{"error": "internal_error", "status", "error_id"}``;
only the status varies. Query text, parameter values and store diagnostics go
to the log under the same id.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from movies_graph.shared.exceptions import (
    MoviesGraphError,
    NotFoundError,
    RequestTimeoutError,
    StoreError,
    ValidationError,
)
from movies_graph.shared.logging import generate_correlation_id, setup_logging

logger = setup_logging("gateway.errors", level="INFO")

ERROR_CODE = "internal_error"

# Most specific first.
_STATUS_MAP: tuple[tuple[type[Exception], int], ...] = (
    (ValidationError, 400),
    (RequestValidationError, 400),
    (NotFoundError, 404),
    (RequestTimeoutError, 504),
    (StoreError, 500),
)


def error_response(status: int, error_id: str | None = None) -> JSONResponse:
    """Build the opaque JSON error body."""
    return JSONResponse(
        status_code=status,
        content={
            "error": ERROR_CODE,
            "status": status,
            "error_id": error_id or generate_correlation_id(),
        },
    )


def classify(exc: Exception) -> int:
    for exc_type, status in _STATUS_MAP:
        if isinstance(exc, exc_type):
            return status
    return 500


async def handle_error(request: Request, exc: Exception) -> JSONResponse:
    status = classify(exc)
    error_id = generate_correlation_id()
    request_id = getattr(request.state, "request_id", None)
    if status >= 500:
        logger.error(
            "Request failed error_id=%s request_id=%s status=%d path=%s",
            error_id, request_id, status, request.url.path,
            exc_info=exc,
        )
    else:
        logger.info(
            "Request rejected error_id=%s request_id=%s status=%d path=%s: %s",
            error_id, request_id, status, request.url.path, exc,
        )
    return error_response(status, error_id)


def register_error_handlers(app: FastAPI) -> None:
    """Route service and request-validation errors to handle_error.

    Anything else is caught by ``UnhandledErrorMiddleware`` so the response
    still passes through the request-id and security-header middleware.
    """
    app.add_exception_handler(MoviesGraphError, handle_error)
    app.add_exception_handler(RequestValidationError, handle_error)
