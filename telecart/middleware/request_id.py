"""
Request ID Middleware

Tags every request with an id and logs its outcome.

- Reuses the caller's X-Request-ID header when present, otherwise makes one
- Stores it on request.state.request_id (routers put it in response meta)
- Echoes it back in the X-Request-ID response header

Usage:
    from telecart.middleware.request_id import RequestIdMiddleware
    app.add_middleware(RequestIdMiddleware)
"""

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from telecart.logging import get_logger, sanitize_id_for_logging

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Assign a request id and log method, path, status and duration."""

    async def dispatch(self, request: Request, call_next):
        incoming = request.headers.get(REQUEST_ID_HEADER, "").strip()
        request_id = sanitize_id_for_logging(incoming, max_length=64) if incoming else str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({duration_ms:.1f}ms, request {request_id[:8]})"
        )
        return response


def get_request_id(request: Request) -> str:
    """Request id set by the middleware, or 'unknown' outside it."""
    return getattr(request.state, "request_id", None) or "unknown"
