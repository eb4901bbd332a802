"""
CivicMap Backend — Request Logging Middleware
==============================================

What:  One access log line per HTTP request on the `civicmap.access` logger.
When:  Inside RequestIDMiddleware, so the request ID is already set.

Line format:
    GET /welcome/parkingspaces?x=1 200 12.3ms 48211B [a1b2c3d4] from 10.0.0.7

Structured fields (LogRecord extras, for JSON formatters):
    request_id, method, path, query, status, duration_ms, response_bytes, client_ip

Levels: 5xx → ERROR (a store or data fault), 4xx → WARNING, otherwise INFO.
Paths listed in ACCESS_LOG_SKIP_PATHS (default /health) are not logged.
"""

import logging
import time
from typing import Optional, Sequence

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from civicmap.middleware.request_id import request_id_var

logger = logging.getLogger("civicmap.access")


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access logging with per-path opt-out."""

    def __init__(self, app: ASGIApp, skip_paths: Optional[Sequence[str]] = None):
        super().__init__(app)
        self.skip_paths = frozenset(skip_paths or ())

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.skip_paths:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        query = request.url.query
        target = f"{path}?{query}" if query else path
        client_ip = request.client.host if request.client else "unknown"
        size = response.headers.get("content-length", "-")
        rid = request_id_var.get("")

        logger.log(
            _level_for(response.status_code),
            "%s %s %d %.1fms %sB [%s] from %s",
            request.method,
            target,
            response.status_code,
            duration_ms,
            size,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "query": query,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "response_bytes": size,
                "client_ip": client_ip,
            },
        )
        return response
