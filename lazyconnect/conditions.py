"""
Lazy Controller Connector — Route Conditions
=============================================

What:  Turns connect_routes() "conditions" ({"id": r"\\d+"}) into Starlette
       path convertors, so the constraint is part of the route's own regex.
How:   Each distinct expression is registered once as a url convertor named
       after its hash, and "{id}" in the path becomes "{id:cond_<hash>}".

Why convertors (not a check inside the endpoint):
    A value that fails its condition must leave the route unmatched, so the
    router moves on to the next route with the same shape. Only the router's
    own pattern can do that.

    /items/{id:cond_1a2b}   ← GET /items/42   matches
    /items/{slug}           ← GET /items/abc  falls through to here
"""

import hashlib
import re
from typing import Dict, Mapping

from starlette.convertors import CONVERTOR_TYPES, Convertor, register_url_convertor

from lazyconnect.exceptions import InvalidArgumentError

# "{name}" or "{name:convertor}"
_PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)(?::([A-Za-z_][A-Za-z0-9_]*))?\}")


class ConditionConvertor(Convertor):
    """Matches one condition expression; values stay strings."""

    def __init__(self, expression: str):
        # Non-capturing group keeps "a|b" from splitting the whole route regex
        self.regex = f"(?:{expression})"

    def convert(self, value: str) -> str:
        return value

    def to_string(self, value) -> str:
        return str(value)


def convertor_for(expression: str) -> str:
    """Register (once) and return the convertor name for `expression`."""
    try:
        re.compile(expression)
    except (re.error, TypeError) as e:
        raise InvalidArgumentError(
            message=f"Condition {expression!r} is not a valid regular expression: {e}",
            argument=repr(expression),
        ) from e

    name = "cond_" + hashlib.sha1(expression.encode("utf-8")).hexdigest()[:12]
    if name not in CONVERTOR_TYPES:
        register_url_convertor(name, ConditionConvertor(expression))
    return name


def apply_conditions(path: str, conditions: Mapping[str, str]) -> str:
    """
    Attach a convertor to every placeholder named in `conditions`.

    Condition keys with no matching placeholder are ignored, as the router
    would never see a value for them.

    Raises:
        InvalidArgumentError: invalid expression, or the placeholder already
            carries a convertor ("{id:int}").
    """
    names: Dict[str, str] = {key: convertor_for(expr) for key, expr in conditions.items()}

    def _replace(match: "re.Match[str]") -> str:
        param, existing = match.group(1), match.group(2)
        if param not in names:
            return match.group(0)
        if existing:
            raise InvalidArgumentError(
                message=f"Path parameter '{param}' already uses the '{existing}' convertor",
                argument=match.group(0),
            )
        return f"{{{param}:{names[param]}}}"

    return _PLACEHOLDER.sub(_replace, path)
