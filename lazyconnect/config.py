"""
Lazy Controller Connector — Configuration
==========================================

What:  Centralized configuration using Pydantic Settings.
How:   Values are read from LAZYCONNECT_* environment variables (or a .env
       file), validated, and exposed through the `settings` singleton.
Who:   Imported by the connector (separators, defaults, locking) and by the
       example application (logging, server address).

Every LazyControllerConnector accepts its own Settings instance, so tests can
build connectors with different separators without touching the singleton.
"""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator


class Settings(BaseSettings):
    """
    Connector and example-app settings.

    All settings have working defaults; nothing is required.
    """

    # ── Reference Parsing ─────────────────────────────────────────────────
    # What: Delimiter between controller and method ("Users:show")
    reference_separator: str = Field(default=":", min_length=1, max_length=4)

    # What: Delimiter between HTTP verbs ("GET|POST")
    method_separator: str = Field(default="|", min_length=1, max_length=4)

    # What: Verb used by connect_routes() when a route entry has no "method"
    default_http_method: str = Field(default="GET")

    # What: Prefix applied to every controller name ("admin" → "admin.Users")
    # Empty string disables qualification.
    namespace_prefix: str = Field(default="")

    # ── Concurrency ───────────────────────────────────────────────────────
    # What: Guard lazy construction with a lock. FastAPI runs sync endpoints
    # and dependencies in a thread pool, so two first requests can race.
    thread_safe: bool = Field(default=True)

    # ── Example Application ───────────────────────────────────────────────
    app_title: str = Field(default="Lazy Controller Connector")
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("default_http_method")
    @classmethod
    def validate_default_http_method(cls, v: str) -> str:
        """A single upper-case verb; "GET|POST" is not a valid default."""
        verb = v.strip().upper()
        if not verb.isalpha():
            raise ValueError(f"Invalid default_http_method '{v}'. Must be a single HTTP verb")
        return verb

    @field_validator("namespace_prefix")
    @classmethod
    def strip_namespace_prefix(cls, v: str) -> str:
        # "admin." and "admin" mean the same prefix
        return v.strip().strip(".")

    model_config = {
        "env_prefix": "LAZYCONNECT_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Singleton instance, used when a connector is built without its own Settings
settings = Settings()
