"""
Lazy Controller Connector — Request Logging Middleware
=======================================================

What:  One access-log line per request: method, path, status, duration,
       request ID, client IP, and the route name the connector registered.
Who:   Installed by create_app() outside RequestIDMiddleware, so the ID is
       available once call_next() returns.

Log levels by status:
    5xx → ERROR
    4xx → WARNING
    else → INFO

Request and response bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("lazyconnect.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs structured information about each HTTP request and response.

    Paths in `quiet_paths` (health checks) are passed through unlogged.
    """

    quiet_paths = frozenset({"/health"})

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.quiet_paths:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        rid = response.headers.get("X-Request-ID", "")
        route = request.scope.get("route")
        route_name = getattr(route, "name", None) or "-"

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] route=%s from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            route_name,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "route": route_name,
                "client_ip": client_ip,
            },
        )

        return response
