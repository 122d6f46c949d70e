"""
Lazy Controller Connector — Registry Unit Tests
================================================

What we test:
    ✅ One instance per name; the factory runs exactly once
    ✅ Nothing is constructed until first resolution
    ✅ Unknown names, decorator registration, namespace qualification
    ✅ Concurrent first resolution builds a single instance
"""

import time
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from lazyconnect.exceptions import ControllerNotRegisteredError, InvalidArgumentError
from lazyconnect.registry import ControllerRegistry


class Widget:
    def __init__(self, app):
        self.app = app


class TestRegistrySingleton:
    """register() memoizes one instance per controller name."""

    def setup_method(self):
        self.app = object()
        self.registry = ControllerRegistry(self.app)

    def test_register_returns_identical_instance(self):
        factory = MagicMock(side_effect=lambda app: Widget(app))
        self.registry.add("Widget", factory)

        first = self.registry.register("Widget")
        second = self.registry.register("Widget")

        assert first is second
        factory.assert_called_once_with(self.app)

    def test_factory_receives_host_app(self):
        self.registry.add("Widget", Widget)
        assert self.registry.register("Widget").app is self.app

    def test_add_does_not_construct(self):
        factory = MagicMock()
        self.registry.add("Widget", factory)

        factory.assert_not_called()
        assert self.registry.is_constructed("Widget") is False

    def test_unknown_name_raises(self):
        with pytest.raises(ControllerNotRegisteredError) as exc_info:
            self.registry.register("Ghost")
        assert exc_info.value.name == "Ghost"
        assert isinstance(exc_info.value, InvalidArgumentError)

    def test_factory_errors_propagate_unchanged(self):
        def broken(app):
            raise RuntimeError("constructor failed")

        self.registry.add("Broken", broken)
        with pytest.raises(RuntimeError, match="constructor failed"):
            self.registry.register("Broken")
        assert self.registry.is_constructed("Broken") is False

    def test_re_adding_before_construction_replaces_factory(self):
        self.registry.add("Widget", lambda app: "old")
        self.registry.add("Widget", lambda app: "new")
        assert self.registry.register("Widget") == "new"

    def test_re_adding_after_construction_rejected(self):
        self.registry.add("Widget", Widget)
        instance = self.registry.register("Widget")

        with pytest.raises(InvalidArgumentError, match="already constructed"):
            self.registry.add("Widget", Widget)
        assert self.registry.register("Widget") is instance

        self.registry.add("Widget", Widget)
        assert self.registry.register("Widget") is not old

    def test_invalid_factory_rejected(self):
        with pytest.raises(InvalidArgumentError):
            self.registry.add("Widget", "not callable")
        with pytest.raises(InvalidArgumentError):
            self.registry.add("", Widget)

    def test_names_sorted(self):
        self.registry.add("b", Widget)
        self.registry.add("a", Widget)
        assert self.registry.names() == ["a", "b"]


class TestRegistryDecorator:
    def test_registers_under_class_name(self):
        registry = ControllerRegistry(app=None)

        @registry.factory()
        class Reports:
            def __init__(self, app):
                pass

        assert registry.has("Reports")
        assert isinstance(registry.register("Reports"), Reports)

    def test_registers_under_explicit_name(self):
        registry = ControllerRegistry(app=None)

        @registry.factory("admin.Reports")
        class Reports:
            def __init__(self, app):
                pass

        assert registry.has("admin.Reports")
        assert not registry.has("Reports")


class TestNamespacePrefix:
    def test_qualify_without_prefix(self):
        assert ControllerRegistry(app=None).qualify("Users") == "Users"

    def test_register_uses_prefix(self):
        registry = ControllerRegistry(app=None, namespace_prefix="admin")
        registry.add("admin.Users", Widget)

        assert registry.qualify("Users") == "admin.Users"
        assert isinstance(registry.register("Users"), Widget)

    def test_resolve_ignores_prefix(self):
        registry = ControllerRegistry(app=None, namespace_prefix="admin")
        registry.add("Users", Widget)

        with pytest.raises(ControllerNotRegisteredError):
            registry.register("Users")
        assert isinstance(registry.resolve("Users"), Widget)


class TestRegistryConcurrency:
    def test_concurrent_first_resolution_builds_once(self):
        built = []

        class Slow:
            def __init__(self, app):
                time.sleep(0.05)
                built.append(self)

        registry = ControllerRegistry(app=None)
        registry.add("Slow", Slow)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: registry.register("Slow"), range(16)))

        assert len(built) == 1
        assert all(r is built[0] for r in results)

    def test_factory_may_resolve_other_controllers(self):
        registry = ControllerRegistry(app=None)
        registry.add("Widget", Widget)

        class Composite:
            def __init__(self, app):
                self.widget = registry.register("Widget")

        registry.add("Composite", Composite)
        composite = registry.register("Composite")

        assert composite.widget is registry.register("Widget")

    def test_lock_can_be_disabled(self):
        registry = ControllerRegistry(app=None, thread_safe=False)
        registry.add("Widget", Widget)

        assert registry.register("Widget") is registry.register("Widget")
        assert registry._lock is None
