"""
Lazy Controller Connector — Controller Registry
================================================

What:  Maps controller names to factories and memoizes one instance per name.
How:   Factories are registered explicitly (add / decorator). The first
       register(name) call invokes the factory with the host application as
       its only argument; the result is cached for the registry's lifetime.
Who:   Owned by LazyControllerConnector; one registry per connector, so two
       connectors in one process never share controller instances.

Lifecycle of an entry:
    add("Users", UsersController)      factory stored, nothing constructed
    register("Users")                  UsersController(app) built and cached
    register("Users")                  cached instance returned

Thread Safety:
    FastAPI runs sync endpoints and dependencies in a thread pool, so the
    check-then-create sequence is guarded by an RLock. Re-entrant because a
    controller constructor may itself resolve another controller.
"""

import contextlib
import logging
import threading
from typing import Any, Callable, ContextManager, Dict, List, Optional

from lazyconnect.exceptions import ControllerNotRegisteredError, InvalidArgumentError

logger = logging.getLogger(__name__)

ControllerFactory = Callable[[Any], Any]


class ControllerRegistry:
    """
    Lazily-initialized singleton store keyed by qualified controller name.

    Attributes:
        app:               Host application passed to every factory
        namespace_prefix:  Applied by qualify(); "" disables qualification
    """

    def __init__(
        self,
        app: Any,
        namespace_prefix: str = "",
        thread_safe: bool = True,
    ):
        self.app = app
        self.namespace_prefix = namespace_prefix
        self._factories: Dict[str, ControllerFactory] = {}
        self._instances: Dict[str, Any] = {}
        self._lock: Optional[threading.RLock] = threading.RLock() if thread_safe else None

    # ── Names ─────────────────────────────────────────────────────────────

    def qualify(self, name: str) -> str:
        """Prefix `name` with the namespace, if one is set."""
        if not self.namespace_prefix:
            return name
        return f"{self.namespace_prefix}.{name}"

    # ── Factory Registration ──────────────────────────────────────────────

    def add(self, name: str, factory: ControllerFactory) -> None:
        """
        Register `factory` under `name` (used verbatim, never qualified).

        A name may be re-registered until its controller is constructed.
        After that the shared instance is fixed and re-registering raises.
        """
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError(
                message="Controller name must be a non-empty string",
                argument=repr(name),
            )
        if not callable(factory):
            raise InvalidArgumentError(
                message=f"Factory for '{name}' is not callable",
                argument=name,
            )
        with self._guard():
            if name in self._instances:
                raise InvalidArgumentError(
                    message=f"Controller '{name}' is already constructed; its factory can no longer change",
                    argument=name,
                )
            self._factories[name] = factory
        logger.debug("Controller factory registered: %s", name)

    def factory(self, name: Optional[str] = None) -> Callable[[Any], Any]:
        """
        Decorator form of add().

            @registry.factory()
            class Users: ...            # registered as "Users"

            @registry.factory("admin.Users")
            class AdminUsers: ...
        """

        def decorator(target: Any) -> Any:
            self.add(name or target.__name__, target)
            return target

        return decorator

    def has(self, name: str) -> bool:
        """True if a factory exists for the (already qualified) name."""
        return name in self._factories

    def names(self) -> List[str]:
        return sorted(self._factories)

    # ── Resolution ────────────────────────────────────────────────────────

    def register(self, name: str) -> Any:
        """Qualify `name` and return its shared instance, building it if needed."""
        return self.resolve(self.qualify(name))

    def resolve(self, qualified_name: str) -> Any:
        """
        Return the shared instance for an already-qualified name.

        Raises:
            ControllerNotRegisteredError: no factory for the name.
        """
        # Fast path: no lock once the instance exists
        instance = self._instances.get(qualified_name)
        if instance is not None:
            return instance

        with self._guard():
            if qualified_name in self._instances:
                return self._instances[qualified_name]

            factory = self._factories.get(qualified_name)
            if factory is None:
                raise ControllerNotRegisteredError(
                    qualified_name,
                    context={"registered": self.names()},
                )

            logger.debug("Constructing controller: %s", qualified_name)
            instance = factory(self.app)
            self._instances[qualified_name] = instance
            return instance

    def is_constructed(self, name: str) -> bool:
        """True once the (already qualified) name has a cached instance."""
        return name in self._instances

    def _guard(self) -> ContextManager[Any]:
        return self._lock if self._lock is not None else contextlib.nullcontext()
