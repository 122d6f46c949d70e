"""
Lazy Controller Connector — Exception Hierarchy
================================================

What:  Errors raised while wiring routes, middleware and controllers.
How:   Each exception carries a message and an optional context dict.
       The example app (main.py) maps them to JSON error responses.
When:  Almost always at configuration time (startup), when a reference string
       or route table is malformed. ControllerNotRegisteredError can also
       surface on the first request that needs an unknown controller.

Exception Hierarchy:
    ConnectorError (base)
    ├── InvalidArgumentError            → malformed "Class:method" / "GET|POST"
    │   └── ControllerNotRegisteredError → no factory registered for a name
    └── MissingParameterError           → route table entry lacks "action"

Errors raised by controller constructors or controller methods are NOT
wrapped; they propagate to the host framework unchanged.
"""

from typing import Any, Dict, Optional


class ConnectorError(Exception):
    """
    Base exception for all connector errors.

    Attributes:
        message:  Human-readable description
        context:  Extra debug info (logged, never returned to API clients)
    """

    def __init__(
        self,
        message: str = "Controller connector error",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class InvalidArgumentError(ConnectorError):
    """
    Raised when a reference or HTTP method string cannot be parsed.

    Examples:
        "UsersController"        → missing ":" separator
        "UsersController:"       → empty method segment
        "|"                      → no HTTP verb left after splitting
        42 (as a middleware)     → neither a callable nor a reference string
    """

    def __init__(
        self,
        message: str = "Invalid argument",
        argument: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if argument is not None:
            ctx["argument"] = argument
        super().__init__(message=message, context=ctx)
        self.argument = argument


class ControllerNotRegisteredError(InvalidArgumentError):
    """
    Raised when a controller name has no registered factory.

    Controllers are constructed from explicitly registered factories, never
    from a class looked up by its name, so an unknown name is a caller error.
    """

    def __init__(
        self,
        name: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["controller"] = name
        super().__init__(
            message=f"No controller factory registered for '{name}'",
            argument=name,
            context=ctx,
        )
        self.name = name


class MissingParameterError(ConnectorError):
    """
    Raised when a connect_routes() table entry lacks a required key.

    Only "action" is required. The error is raised before the offending
    route is handed to the router, and stops processing of the table.
    """

    def __init__(
        self,
        parameter: str,
        pattern: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"Route parameter '{parameter}' is required"
        if pattern is not None:
            message = f"Route '{pattern}': parameter '{parameter}' is required"
        ctx = context or {}
        ctx["parameter"] = parameter
        if pattern is not None:
            ctx["pattern"] = pattern
        super().__init__(message=message, context=ctx)
        self.parameter = parameter
        self.pattern = pattern
