"""
Lazy Controller Connector — Test Configuration (conftest.py)
=============================================================

What:  Shared pytest fixtures for the whole suite.

Fixture Overview (all function-scoped):
    ├── host_app:     Bare FastAPI app acting as the host application
    ├── connector:    LazyControllerConnector bound to host_app, own Settings
    ├── events:       List the recording controllers append to
    ├── http_client:  HTTPX AsyncClient talking to host_app via ASGITransport
    └── app_client:   HTTPX AsyncClient for the example app from create_app()
"""

import os

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

# Before any lazyconnect import, so the settings singleton picks them up
os.environ["LAZYCONNECT_LOG_LEVEL"] = "WARNING"
os.environ["LAZYCONNECT_NAMESPACE_PREFIX"] = ""

from lazyconnect.config import Settings  # noqa: E402
from lazyconnect.connector import LazyControllerConnector  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Test Controllers
# ══════════════════════════════════════════════════════════════════════════

class CountingController:
    """Records how many times it was constructed, across all instances."""

    constructed = 0

    def __init__(self, app):
        type(self).constructed += 1
        self.app = app
        self.calls = []

    def show(self, *args):
        self.calls.append(args)
        return {"args": list(args), "instance": id(self)}

    async def show_async(self, *args):
        self.calls.append(args)
        return {"args": list(args), "async": True}

    def add(self, a, b, c):
        return a + b + c


class RecorderController:
    """Middleware target: appends to the shared `events` list."""

    def __init__(self, app):
        self.app = app
        self.events = app.state.events

    def first(self):
        self.events.append("first")

    def third(self):
        self.events.append("M3")

    async def audit(self):
        self.events.append("audit")

    def handle(self, *args):
        self.events.append("handler")
        return {"events": list(self.events)}


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def events():
    return []


@pytest.fixture
def host_app(events):
    """Fresh FastAPI app per test; `events` is reachable from controllers."""
    app = FastAPI()
    app.state.events = events
    return app


@pytest.fixture
def connector(host_app):
    """
    Connector with CountingController and RecorderController registered.

    CountingController.constructed is reset so each test counts from zero.
    """
    CountingController.constructed = 0
    conn = LazyControllerConnector(host_app, settings=Settings())
    conn.add_controller("Counting", CountingController)
    conn.add_controller("Recorder", RecorderController)
    return conn


@pytest_asyncio.fixture
async def http_client(host_app):
    transport = ASGITransport(app=host_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def example_app():
    from lazyconnect.main import create_app
    return create_app(Settings())


@pytest_asyncio.fixture
async def app_client(example_app):
    """
    Client for the example application.

    Usage:
        async def test_health(app_client):
            response = await app_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=example_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
