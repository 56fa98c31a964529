"""
Gateway middleware — request ids, security headers, a concurrency cap
and the last-resort error boundary.
"""

import asyncio
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from movies_graph.gateway.errors import handle_error
from movies_graph.shared.logging import generate_correlation_id

REQUEST_ID_HEADER = "x-request-id"

SECURITY_HEADERS = {
    "x-content-type-options": "nosniff",
    "x-frame-options": "DENY",
    "referrer-policy": "no-referrer",
}


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's x-request-id or generate one, and echo it back."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_correlation_id()
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Set the static security headers unless a route already did."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


class ConcurrencyLimitMiddleware(BaseHTTPMiddleware):
    """Let at most ``max_concurrency`` requests run; the rest wait for a slot."""

    def __init__(self, app, max_concurrency: int = 512):
        super().__init__(app)
        self._slots = asyncio.Semaphore(max_concurrency)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        async with self._slots:
            return await call_next(request)


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Turn any exception that escaped the routes into the opaque 500 body.

    Installed innermost so the response still gets a request id and the
    security headers.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return await handle_error(request, exc)
