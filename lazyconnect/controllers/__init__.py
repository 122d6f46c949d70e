# Controllers package init
"""
Example controllers wired by lazyconnect.main.create_app().

Each controller takes the host FastAPI app as its only constructor argument
and is built by the connector on first use.
"""

from lazyconnect.controllers.audit import AuditController
from lazyconnect.controllers.greeting import GreetingController
from lazyconnect.controllers.health import HealthController

__all__ = ["AuditController", "GreetingController", "HealthController"]
