"""
FitGroup Backend — Request Logging Middleware
=============================================

What:  One access-log line per HTTP request.
Why:   Monitoring and debugging need method, path, status and latency for
       every call, correlated with the request ID.
How:   Measures wall time around the downstream handler and logs at a level
       chosen by status code on the `fitgroup.access` logger.

Example line:
    2024-03-31T12:00:00 [INFO] fitgroup.access: POST /groups/3/records 201 12.4ms [1f0c9a2b] from 127.0.0.1

Privacy:
    Request bodies are never logged; they carry participant passwords.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from fitgroup.middleware.request_id import request_id_var

logger = logging.getLogger("fitgroup.access")

# Probed every few seconds by orchestrators; logging them buries real traffic
QUIET_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    """5xx → ERROR, 4xx → WARNING, everything else → INFO."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status, duration and client address of each request.

    Duration covers validation, database work and serialization. Webhook
    background tasks run after the response and are not included.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
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
