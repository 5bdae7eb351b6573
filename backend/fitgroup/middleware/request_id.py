"""
FitGroup Backend — Request ID Middleware
========================================

What:  Assigns a short correlation ID to each request and echoes it back.
Why:   Every log line and every error body of one request share the same ID,
       so a client-reported `requestId` leads straight to the server logs.
How:   Reads X-Request-ID from the client or generates one, stores it in a
       ContextVar (coroutine-local) and in request.state, and sets the
       X-Request-ID response header.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Use the client's X-Request-ID header if present
        2. Otherwise generate an 8-character ID from a UUID4
        3. Store it for loggers and exception handlers
        4. Add it to the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
