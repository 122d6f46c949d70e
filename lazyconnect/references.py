"""
Lazy Controller Connector — Reference Parsing
==============================================

What:  Turns the connector's string mini-formats into typed values.
How:   Pure functions and frozen dataclasses; no registry or router access.

Formats:
    Controller reference   "UsersController:show"     → ControllerReference
    HTTP methods           "GET|POST"                  → ["GET", "POST"]
    Route pattern          "/users/:id"                → "/users/{id}"
                           "/files/:path+"             → "/files/{path:path}"

Middleware forms (tagged variant):
    DirectMiddleware(func)              attached to the route as-is
    NamedMiddleware(reference)          resolved through the registry when the
                                        route runs, called with no arguments
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, List, Union

from lazyconnect.exceptions import InvalidArgumentError

# Slim-style placeholder: ":name" or ":name+" (catch-all)
_SLIM_PARAM = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)(\+?)")

# Starlette placeholder, kept verbatim: "{name}" or "{name:convertor}"
_BRACE_PARAM = re.compile(r"(\{[^}]*\})")


@dataclass(frozen=True)
class ControllerReference:
    """A (controller, action) pair such as ("UsersController", "show")."""

    controller: str
    action: str

    @classmethod
    def parse(cls, text: Any, separator: str = ":") -> "ControllerReference":
        """
        Parse "Controller:action".

        Raises:
            InvalidArgumentError: not a string, separator missing or repeated,
                or either segment empty.
        """
        if not isinstance(text, str):
            raise InvalidArgumentError(
                message=f"Controller reference must be a string, got {type(text).__name__}",
                argument=repr(text),
            )

        controller, found, action = text.partition(separator)
        controller, action = controller.strip(), action.strip()

        if not found:
            raise InvalidArgumentError(
                message=f"Controller reference '{text}' is missing the '{separator}' separator",
                argument=text,
            )
        if not controller or not action:
            raise InvalidArgumentError(
                message=f"Controller reference '{text}' must look like 'Controller{separator}action'",
                argument=text,
            )
        if separator in action:
            raise InvalidArgumentError(
                message=f"Controller reference '{text}' has more than one '{separator}'",
                argument=text,
            )
        return cls(controller=controller, action=action)


def parse_http_methods(text: Any, separator: str = "|") -> List[str]:
    """
    Split "GET|POST" into ["GET", "POST"].

    Tokens are stripped and upper-cased; empty tokens are dropped and
    duplicates collapse, keeping first-seen order.

    Raises:
        InvalidArgumentError: not a string, or no verb left after splitting.
    """
    if not isinstance(text, str):
        raise InvalidArgumentError(
            message=f"HTTP methods must be a string, got {type(text).__name__}",
            argument=repr(text),
        )

    methods: List[str] = []
    for token in text.split(separator):
        verb = token.strip().upper()
        if verb and verb not in methods:
            methods.append(verb)

    if not methods:
        raise InvalidArgumentError(
            message=f"HTTP methods '{text}' contain no verb",
            argument=text,
        )
    return methods


def to_route_path(pattern: str) -> str:
    """
    Convert a Slim-style pattern to FastAPI path syntax.

    Placeholders already written with {braces}, convertor suffix included
    ("{id:int}", "{p:path}"), are left untouched; only the text between
    them is rewritten.
    """
    if not isinstance(pattern, str) or not pattern.startswith("/"):
        raise InvalidArgumentError(
            message=f"Route pattern {pattern!r} must be a string starting with '/'",
            argument=repr(pattern),
        )

    def _replace(match: "re.Match[str]") -> str:
        name, catch_all = match.group(1), match.group(2)
        return f"{{{name}:path}}" if catch_all else f"{{{name}}}"

    # re.split with a capture group: odd indexes are the {brace} placeholders
    parts = _BRACE_PARAM.split(pattern)
    return "".join(
        part if index % 2 else _SLIM_PARAM.sub(_replace, part)
        for index, part in enumerate(parts)
    )


# ══════════════════════════════════════════════════════════════════════════
# Middleware Variant
# ══════════════════════════════════════════════════════════════════════════

class Middleware:
    """
    Base of the two middleware forms.

    Build one explicitly with Middleware.direct() / Middleware.named(), or let
    the connector coerce raw values at its public boundary.
    """

    @staticmethod
    def direct(func: Callable[..., Any]) -> "DirectMiddleware":
        return DirectMiddleware(func)

    @staticmethod
    def named(reference: str, separator: str = ":") -> "NamedMiddleware":
        return NamedMiddleware(ControllerReference.parse(reference, separator))

    @staticmethod
    def coerce(value: Any, separator: str = ":") -> "MiddlewareSpec":
        """
        Turn a raw middleware value into one of the two forms.

        Accepted:
            Middleware instance    returned unchanged
            "Class:method"         → NamedMiddleware (parsed now, resolved later)
            any other callable     → DirectMiddleware
        """
        if isinstance(value, Middleware):
            return value  # type: ignore[return-value]
        if isinstance(value, str):
            return Middleware.named(value, separator)
        if callable(value):
            return DirectMiddleware(value)
        raise InvalidArgumentError(
            message=(
                f"Middleware must be a callable or a 'Class{separator}method' string, "
                f"got {type(value).__name__}"
            ),
            argument=repr(value),
        )


@dataclass(frozen=True)
class DirectMiddleware(Middleware):
    """An inline middleware callable."""

    func: Callable[..., Any]


@dataclass(frozen=True)
class NamedMiddleware(Middleware):
    """A middleware addressed as "Class:method" and resolved lazily."""

    reference: ControllerReference


MiddlewareSpec = Union[DirectMiddleware, NamedMiddleware]
