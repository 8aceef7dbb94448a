"""Structured request logging middleware for FastAPI."""

import logging
import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class StructuredRequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one structured line per HTTP request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Time the request and log method, path, status and duration."""
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 2)

        extra_fields: dict[str, object] = {
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        }
        if request.url.query:
            extra_fields["query"] = str(request.url.query)
        if request.client:
            extra_fields["client_host"] = request.client.host

        log = logger.warning if response.status_code >= 500 else logger.info
        log("%s %s %s", request.method, request.url.path, response.status_code, extra=extra_fields)
        return response
