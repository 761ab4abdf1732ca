"""
Configuration Schemas for agentmcp.

Pydantic models for application settings.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class AppSettings(BaseModel):
    """
    Application settings model.

    Used for type-safe settings access.

    Timeouts:
        request_timeout applies to outbound tool calls. None means no
        internal timeout; the hosting platform is expected to impose one.
        discovery_timeout applies to the manifest fetch only.
    """

    # Service identity
    service_name: str = "agentmcp"
    environment: str = "development"
    debug: bool = False
    log_level: str = Field(default="INFO", description="Root logging level")

    # Discovery
    url_scheme: str = Field(default="https", description="Scheme used to reach agent hosts")
    manifest_path: str = Field(
        default="/.well-known/ai-plugin.json",
        description="Well-known manifest location under the agent host",
    )
    discovery_timeout: float = Field(default=30.0, gt=0, description="Manifest fetch timeout")

    # Tool execution
    request_timeout: float | None = Field(
        default=None, description="Outbound tool request timeout in seconds (None = no timeout)"
    )

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 8000
