"""
SkateMap Backend: Access Log Middleware
=========================================

What:  One log line per HTTP request on the "skatemap.access" logger.
How:   Measures wall time around call_next and picks the level from the
       status code (5xx ERROR, 4xx WARNING, else INFO).

Line format:
    GET /api/spots 200 12.3ms [a1b2c3d4] from 10.0.0.7

The same fields go into `extra` for handlers that emit structured records.
Request bodies are never logged: spot names and descriptions are user text.

Typical durations:
    - GET /api/spots:          10-50ms (one indexed query)
    - GET /api/places/nearby:  0.5-10s (Overpass dominates, plus retries)
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from skatemap.middleware.request_id import request_id_var

logger = logging.getLogger("skatemap.access")

# Probed every few seconds by the orchestrator
QUIET_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
        status = response.status_code

        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
