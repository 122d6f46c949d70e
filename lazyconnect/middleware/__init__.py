# Middleware package init
"""
Lazy Controller Connector — Host Middleware
============================================

What:  App-wide Starlette middleware installed by the example application.
       Route-level middleware ("Class:method" references and inline
       callables) is handled by the connector itself as route dependencies.

Chain (outermost first):
    Request → [Logging] → [Request ID] → route dependencies → controller action
"""

from lazyconnect.middleware.logging import RequestLoggingMiddleware
from lazyconnect.middleware.request_id import RequestIDMiddleware, request_id_var

__all__ = ["RequestIDMiddleware", "RequestLoggingMiddleware", "request_id_var"]
