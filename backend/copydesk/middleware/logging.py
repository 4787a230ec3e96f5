"""
Copydesk Backend — Request Logging Middleware
===============================================

What:  One access-log line per HTTP request: method, path, status, duration.
Who:   Applied to every request via Starlette middleware.
When:  Inside RequestIDMiddleware, so the correlation ID is already set.

What we log vs what we DON'T log:
    ✅ Log: method, path, status, duration, client IP, request ID
    ❌ Don't log: request bodies (passwords, design text), Authorization headers

Typical durations:
    - POST /api/figma/auth:    ~250ms (bcrypt dominates)
    - GET  /api/figma/verify:  5-30ms (one indexed query)
    - POST /api/figma/analyze: several seconds (generation call dominates)
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from copydesk.middleware.request_id import request_id_var

logger = logging.getLogger("copydesk.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request at a level chosen by its response status class."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        path = request.url.path
        rid = request_id_var.get("")

        # Health probes run every few seconds; keep them out of the access log
        if path == "/health":
            return await call_next(request)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000

        # 5xx → ERROR, 4xx → WARNING, everything else → INFO
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
