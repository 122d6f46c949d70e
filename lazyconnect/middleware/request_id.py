"""
Lazy Controller Connector — Request ID Middleware
==================================================

What:  Assigns a short ID to each request and echoes it in X-Request-ID.
How:   Reuses a client-supplied X-Request-ID header, otherwise generates one.
       The value is stored in a ContextVar (for loggers and exception
       handlers) and in request.state (for controllers).
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Why a ContextVar: exception handlers and loggers have no Request in hand,
# and concurrent requests on one event loop must each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tags every request and response with an X-Request-ID."""

    header_name = "X-Request-ID"

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(self.header_name) or str(uuid.uuid4())[:8]

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[self.header_name] = rid
        return response
