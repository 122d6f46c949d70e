"""
Lazy Controller Connector — Health Controller
==============================================

What:  GET /health, wired as "HealthController:check".
How:   Reports registry state so a monitor can see which controllers have been
       lazily constructed so far.
"""

import time

from lazyconnect import __version__
from lazyconnect.schemas import HealthResponse


class HealthController:
    """Liveness endpoint; constructed on the first /health request."""

    def __init__(self, app):
        self.app = app
        self._started = time.time()

    async def check(self) -> HealthResponse:
        registry = self.app.state.connector.registry
        return HealthResponse(
            status="healthy",
            version=__version__,
            controllers=registry.names(),
            constructed=[name for name in registry.names() if registry.is_constructed(name)],
            uptime_seconds=round(time.time() - self._started, 2),
        )
