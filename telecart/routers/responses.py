"""
Response helpers shared by the API routers.

Successful responses are wrapped as {"data": ..., "meta": {...}}.
Cart core errors are turned into HTTPException with a fixed status per kind.
"""
from datetime import datetime, timezone
from typing import Any, NoReturn

from fastapi import HTTPException, Request

from telecart.config import get_settings
from telecart.errors import ERROR_INTERNAL, BusinessRuleViolation, CartError, NotFoundError
from telecart.logging import get_logger
from telecart.middleware import get_request_id

logger = get_logger(__name__)


def envelope(request: Request, data: Any) -> dict:
    """Wrap a payload with request metadata."""
    return {
        "data": data,
        "meta": {
            "requestId": get_request_id(request),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": get_settings().api_version,
        },
    }


def raise_http_error(error: CartError) -> NoReturn:
    """Map a cart core error to its HTTP status."""
    if isinstance(error, NotFoundError):
        raise HTTPException(status_code=404, detail=error.message)
    if isinstance(error, BusinessRuleViolation):
        raise HTTPException(status_code=409, detail=error.message)
    logger.error(f"Unhandled cart error: {error.message}", exc_info=error)
    raise HTTPException(status_code=500, detail=ERROR_INTERNAL)
