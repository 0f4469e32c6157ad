"""
admin_identity.observability.middleware

Request-scoped logging context.

Responsibilities:
- Take the caller's `x-request-id` (or mint one) and echo it on the response.
- Bind request metadata into structlog contextvars.
- Log one `request_handled` line per request with status and duration.
"""

from __future__ import annotations

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from admin_identity.observability.logging import get_logger

log = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=request.url.path,
            http_method=request.method,
        )
        started = time.perf_counter()
        try:
            response: Response = await call_next(request)
            # For NDJSON streams this is time to headers, not time to the last line.
            log.info(
                "request_handled",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
        finally:
            structlog.contextvars.clear_contextvars()

        response.headers["x-request-id"] = request_id
        return response


# --- Module Notes -----------------------------------------------------------
# Streaming responses keep running after `dispatch` returns, so log lines emitted while
# a `get` stream is open carry no request id.
