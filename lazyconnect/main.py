"""
Lazy Controller Connector — Example Application Factory
========================================================

What:  A FastAPI app whose routes are all wired through LazyControllerConnector.
How:   create_app() returns a configured FastAPI instance; no controller is
       constructed until the first request that needs it.
Who:   uvicorn lazyconnect.main:app, and the HTTP-level tests.

Application Layout:
    ┌─────────────────────────────────────────────────────────┐
    │  Middleware: Logging → Request ID                       │
    │                                                         │
    │  GET       /health               HealthController:check │
    │                                  + AuditController:mark │
    │  GET       /greetings/{name}     GreetingController     │
    │  GET|POST  /greetings/{name}/echo      (connect_routes) │
    │                                                         │
    │  ConnectorError → 500 JSON with request_id              │
    └─────────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from lazyconnect import __version__
from lazyconnect.config import Settings, settings as default_settings
from lazyconnect.connector import LazyControllerConnector
from lazyconnect.controllers import AuditController, GreetingController, HealthController
from lazyconnect.exceptions import ConnectorError, InvalidArgumentError
from lazyconnect.middleware import RequestIDMiddleware, RequestLoggingMiddleware, request_id_var
from lazyconnect.schemas import ErrorResponse

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure root logging for the whole application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log the wiring on startup; nothing to release on shutdown."""
    cfg: Settings = app.state.settings
    setup_logging(cfg.log_level)

    registry = app.state.connector.registry
    logger.info("%s %s starting up", cfg.app_title, __version__)
    logger.info("Controllers registered (not yet built): %s", ", ".join(registry.names()))
    logger.info("Server ready at http://%s:%d", cfg.backend_host, cfg.backend_port)

    yield

    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map connector errors to JSON responses.

    Handler hierarchy:
        InvalidArgumentError    → 500 (bad reference, unknown controller)
        ConnectorError (base)   → 500

    MissingParameterError is raised while routes are bound, before the app
    serves anything, so the ConnectorError handler is enough for it.

    Why: the context can hold registered controller names, so it is logged
    server-side and never sent to the client.
    """

    def _error_response(code: str, exc: ConnectorError) -> JSONResponse:
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s | Context: %s", rid, code, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error=code,
                message=exc.message,
                request_id=rid,
            ).model_dump(),
        )

    @app.exception_handler(InvalidArgumentError)
    async def handle_invalid_argument(request: Request, exc: InvalidArgumentError):
        return _error_response("invalid_argument", exc)

    @app.exception_handler(ConnectorError)
    async def handle_connector_error(request: Request, exc: ConnectorError):
        return _error_response("connector_error", exc)


# ══════════════════════════════════════════════════════════════════════════
# Route Wiring
# ══════════════════════════════════════════════════════════════════════════

def connect_routes(connector: LazyControllerConnector) -> None:
    """Register the example controllers and bind their routes."""
    connector.add_controller("HealthController", HealthController)
    connector.add_controller("GreetingController", GreetingController)
    connector.add_controller("AuditController", AuditController)

    connector.connect("GET", "/health", "HealthController:check", ["AuditController:mark"])

    connector.connect_routes(
        "GreetingController",
        {
            "/greetings/:name": {
                "action": "hello",
                "name": "greetings.hello",
                "conditions": {"name": r"[A-Za-z]+"},
            },
            "/greetings/:name/echo": {
                "action": "echo",
                "method": "GET|POST",
                "name": "greetings.echo",
                "conditions": {"name": r"[A-Za-z]+"},
            },
        },
        "AuditController:mark",
    )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the example FastAPI application.

    Returns: FastAPI instance with app.state.connector holding the connector.
    """
    cfg = settings or default_settings

    app = FastAPI(
        title=cfg.app_title,
        description="Routes bound to lazily constructed controllers.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = cfg

    # Last added runs first: Logging wraps Request ID
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    connector = LazyControllerConnector(app, settings=cfg)
    app.state.connector = connector
    connect_routes(connector)

    return app


app = create_app()
