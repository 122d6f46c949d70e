"""
Lazy Controller Connector — Package Initializer
================================================

What: Binds FastAPI routes to controller classes that are built on first use.
Who:  Imported by host applications that want "Class:method" style routing.

Architecture Note:

    ┌─────────────────────────────────────┐
    │   Connector (connect / call_action) │  ← route + middleware wiring
    ├─────────────────────────────────────┤
    │   References (parsing, variants)    │  ← "Class:method", "GET|POST"
    ├─────────────────────────────────────┤
    │   Registry (lazy singletons)        │  ← factory per controller name
    ├─────────────────────────────────────┤
    │   Host app (FastAPI router)         │  ← owns matching and dispatch
    └─────────────────────────────────────┘

Usage:
    app = FastAPI()
    connector = LazyControllerConnector(app)
    connector.add_controller("Users", UsersController)
    connector.connect("GET|POST", "/users/:id", "Users:show", ["Auth:check"])
"""

from lazyconnect.connector import LazyControllerConnector
from lazyconnect.exceptions import (
    ConnectorError,
    ControllerNotRegisteredError,
    InvalidArgumentError,
    MissingParameterError,
)
from lazyconnect.references import (
    ControllerReference,
    DirectMiddleware,
    Middleware,
    NamedMiddleware,
)
from lazyconnect.registry import ControllerRegistry

__version__ = "1.0.0"

__all__ = [
    "ConnectorError",
    "ControllerNotRegisteredError",
    "ControllerReference",
    "ControllerRegistry",
    "DirectMiddleware",
    "InvalidArgumentError",
    "LazyControllerConnector",
    "Middleware",
    "MissingParameterError",
    "NamedMiddleware",
]
