"""
Lazy Controller Connector — Route Wiring
=========================================

What:  Binds HTTP routes on a FastAPI app to "Controller:action" references.
How:   For every route a dispatch endpoint is built that, when FastAPI calls it,
       resolves the controller through the registry (constructing it on first
       use) and forwards the path parameter values as positional arguments.
       Middleware becomes ordered route dependencies.
Who:   Created once per host application, usually inside create_app().

Request flow for connect("GET", "/users/:id", "Users:show", ["Auth:check"]):

    FastAPI router matches GET /users/42
        │
        ├── dependency: Auth:check   → registry.resolve("Auth").check()
        │
        └── endpoint:   Users:show   → registry.resolve("Users").show("42")

Matching, verb dispatch and the order in which dependencies run all belong to
FastAPI; the connector only configures routes before handing them over.
"""

import inspect
import logging
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence

from fastapi import Depends, FastAPI, Request
from fastapi.routing import APIRoute
from starlette.concurrency import run_in_threadpool

from lazyconnect.conditions import apply_conditions
from lazyconnect.config import Settings, settings as default_settings
from lazyconnect.exceptions import InvalidArgumentError, MissingParameterError
from lazyconnect.references import (
    ControllerReference,
    DirectMiddleware,
    Middleware,
    MiddlewareSpec,
    NamedMiddleware,
    parse_http_methods,
    to_route_path,
)
from lazyconnect.registry import ControllerFactory, ControllerRegistry

logger = logging.getLogger(__name__)


async def _invoke(method: Callable[..., Any], args: Sequence[Any]) -> Any:
    """Await coroutine methods; run plain ones in Starlette's thread pool."""
    if inspect.iscoroutinefunction(method):
        return await method(*args)
    result = await run_in_threadpool(method, *args)
    if inspect.isawaitable(result):
        return await result
    return result


class LazyControllerConnector:
    """
    Connects routes to lazily constructed, shared controller instances.

    Args:
        app:       Host FastAPI application. Passed to every controller
                   factory and used for route registration (app.router).
        settings:  Optional Settings; defaults to the module singleton.
        registry:  Optional pre-built ControllerRegistry.
    """

    def __init__(
        self,
        app: FastAPI,
        settings: Optional[Settings] = None,
        registry: Optional[ControllerRegistry] = None,
    ):
        self.app = app
        self.settings = settings or default_settings
        self.registry = registry or ControllerRegistry(
            app,
            namespace_prefix=self.settings.namespace_prefix,
            thread_safe=self.settings.thread_safe,
        )

    # ══════════════════════════════════════════════════════════════════════
    # Controller Registration
    # ══════════════════════════════════════════════════════════════════════

    def add_controller(self, name: str, factory: ControllerFactory) -> None:
        """Register a factory taking the host app and returning a controller."""
        self.registry.add(name, factory)

    def controller(self, name: Optional[str] = None) -> Callable[[Any], Any]:
        """Class decorator: register the class (or `name`) as a controller."""
        return self.registry.factory(name)

    def set_namespace_prefix(self, prefix: str) -> None:
        """
        Qualify controller names given to later calls as "{prefix}.{name}".

        Routes bound earlier keep the name they were bound with.
        """
        self.registry.namespace_prefix = (prefix or "").strip().strip(".")

    def register(self, name: str) -> Any:
        """
        Return the shared instance of controller `name`, building it on first use.

        Idempotent: the factory runs at most once per connector.
        """
        return self.registry.register(name)

    # ══════════════════════════════════════════════════════════════════════
    # Route Binding
    # ══════════════════════════════════════════════════════════════════════

    def connect(
        self,
        methods: str,
        pattern: str,
        controller: str,
        middlewares: Optional[Iterable[Any]] = None,
    ) -> APIRoute:
        """
        Connect one route to a "Controller:action" reference.

        Examples:
            connect("GET", "/", "Home:index")
            connect("GET|POST", "/foo/bar/:id", "Foo:bar")
            connect("GET", "/foo", "Foo:index", [lambda: audit.append("hit")])
            connect("POST", "/foo/:id", "Foo:save", ["Auth:check", "Csrf:verify"])

        Returns:
            The APIRoute added to the host router.

        Raises:
            InvalidArgumentError: malformed reference, methods or middleware.
                Raised before the router is touched.
        """
        reference = ControllerReference.parse(controller, self.settings.reference_separator)
        verbs = parse_http_methods(methods, self.settings.method_separator)
        resolved = self._coerce_middlewares(middlewares or [])

        return self._add_route(
            pattern=pattern,
            controller=self.registry.qualify(reference.controller),
            action=reference.action,
            methods=verbs,
            middlewares=resolved,
        )

    def connect_routes(
        self,
        controller: str,
        routes: Mapping[str, Mapping[str, Any]],
        *global_middlewares: Any,
    ) -> None:
        """
        Connect one controller to several routes.

        Usage:
            connector.connect_routes(
                "Users",
                {
                    "/users": {"action": "index"},
                    "/users/:id": {
                        "action": "show",
                        "method": "GET|POST",
                        "name": "users.show",
                        "conditions": {"id": r"\\d+"},
                        "middlewares": ["Auth:check"],
                    },
                },
                "Session:start",        # global middlewares, run first
            )

        Raises:
            MissingParameterError: an entry has no "action". Routes of earlier
                entries stay registered; later entries are not processed.
            InvalidArgumentError: malformed methods or middleware.
        """
        qualified = self.registry.qualify(controller)
        shared = self._coerce_middlewares(global_middlewares)

        for pattern, params in routes.items():
            if params is None:
                params = {}
            if not isinstance(params, Mapping):
                raise InvalidArgumentError(
                    message=(
                        f"Route '{pattern}': parameters must be a mapping, "
                        f"got {type(params).__name__}"
                    ),
                    argument=pattern,
                )
            if "action" not in params or params["action"] is None:
                raise MissingParameterError("action", pattern=pattern)

            method = params.get("method")
            if isinstance(method, str):
                verbs = parse_http_methods(method, self.settings.method_separator)
            else:
                verbs = [self.settings.default_http_method]

            name = params.get("name")
            conditions = params.get("conditions")

            per_route = params.get("middlewares")
            middlewares = list(shared)
            if isinstance(per_route, (list, tuple)):
                middlewares.extend(self._coerce_middlewares(per_route))

            self._add_route(
                pattern=pattern,
                controller=qualified,
                action=str(params["action"]),
                methods=verbs,
                middlewares=middlewares,
                name=name if isinstance(name, str) else None,
                conditions=conditions if isinstance(conditions, Mapping) else None,
            )

    def call_action(
        self,
        controller: str,
        method: str,
        args: Optional[Sequence[Any]] = None,
    ) -> Any:
        """
        Call `method` on the shared `controller` instance and return its result.

        Example:
            connector.call_action("Mailer", "send", ["to@example.com"])
        """
        instance = self.register(controller)
        return getattr(instance, method)(*(args or ()))

    # ══════════════════════════════════════════════════════════════════════
    # Internals
    # ══════════════════════════════════════════════════════════════════════

    def _coerce_middlewares(self, values: Iterable[Any]) -> List[MiddlewareSpec]:
        separator = self.settings.reference_separator
        return [Middleware.coerce(value, separator) for value in values]

    def _add_route(
        self,
        pattern: str,
        controller: str,
        action: str,
        methods: List[str],
        middlewares: List[MiddlewareSpec],
        name: Optional[str] = None,
        conditions: Optional[Mapping[str, str]] = None,
    ) -> APIRoute:
        path = to_route_path(pattern)
        if conditions:
            # Constraint lives in the route regex: a rejected value leaves the
            # route unmatched and the router tries the next one
            path = apply_conditions(path, conditions)

        # Why use_cache=False: FastAPI runs a cached dependency once per
        # request, but a middleware listed twice must run twice
        dependencies = [
            Depends(self._middleware_callable(mw), use_cache=False) for mw in middlewares
        ]

        router = self.app.router
        router.add_api_route(
            path,
            self._dispatcher(controller, action),
            methods=methods,
            name=name,
            dependencies=dependencies,
        )
        route = router.routes[-1]

        logger.info(
            "Route connected: %s %s → %s:%s (%d middleware)",
            "|".join(methods),
            path,
            controller,
            action,
            len(middlewares),
        )
        return route

    def _dispatcher(self, controller: str, action: str) -> Callable[..., Any]:
        registry = self.registry

        async def dispatch(request: Request):
            # Why thread pool: the constructor may block, and the registry lock
            # may be held by a call_action() on another thread
            instance = await run_in_threadpool(registry.resolve, controller)
            args = list(request.path_params.values())
            return await _invoke(getattr(instance, action), args)

        dispatch.__name__ = f"{controller.replace('.', '_')}_{action}"
        dispatch.__qualname__ = dispatch.__name__
        return dispatch

    def _middleware_callable(self, middleware: MiddlewareSpec) -> Callable[..., Any]:
        if isinstance(middleware, DirectMiddleware):
            return middleware.func

        if isinstance(middleware, NamedMiddleware):
            registry = self.registry
            qualified = registry.qualify(middleware.reference.controller)
            action = middleware.reference.action

            async def run_middleware() -> None:
                instance = await run_in_threadpool(registry.resolve, qualified)
                await _invoke(getattr(instance, action), ())

            run_middleware.__name__ = f"{qualified.replace('.', '_')}_{action}"
            return run_middleware

        raise InvalidArgumentError(
            message=f"Unsupported middleware form: {type(middleware).__name__}",
            argument=repr(middleware),
        )

