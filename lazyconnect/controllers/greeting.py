"""
Lazy Controller Connector — Greeting Controller
================================================

What:  Example controller bound through connect_routes(). Path parameter values
       arrive as positional arguments, in the order they appear in the pattern.
"""

import threading

from lazyconnect.schemas import GreetingResponse


class GreetingController:
    """Counts calls per instance, which makes the shared-singleton visible."""

    def __init__(self, app):
        self.app = app
        self.calls = 0
        self._lock = threading.Lock()

    def _count(self) -> int:
        # Sync actions run in the thread pool
        with self._lock:
            self.calls += 1
            return self.calls

    def hello(self, name: str) -> GreetingResponse:
        return GreetingResponse(message=f"Hello, {name}!", name=name, calls=self._count())

    async def echo(self, name: str) -> GreetingResponse:
        return GreetingResponse(message=name, name=name, calls=self._count())
