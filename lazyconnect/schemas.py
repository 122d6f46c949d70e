"""
Lazy Controller Connector — Example App Schemas
================================================

What:  Pydantic models returned by the example controllers and error handlers.
"""

from typing import List

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Returned by HealthController.check (GET /health)."""

    status: str = Field(description="Overall status: healthy")
    version: str = Field(description="Package version")
    controllers: List[str] = Field(description="Registered controller names")
    constructed: List[str] = Field(description="Controllers built so far (lazy)")
    uptime_seconds: float = Field(description="Seconds since the controller was built")


class GreetingResponse(BaseModel):
    """Returned by GreetingController actions."""

    message: str = Field(description="Greeting text")
    name: str = Field(description="Path parameter echoed back")
    calls: int = Field(description="Calls served by this controller instance")


class ErrorResponse(BaseModel):
    """Body of every connector error response."""

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable description")
    request_id: str = Field(default="")
