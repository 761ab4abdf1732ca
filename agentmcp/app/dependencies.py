"""
Dependency wiring for agentmcp.

Provides the settings singleton and builds one AgentSession per request.
Sessions are not cached: every request re-discovers the agent, so a
changed manifest is picked up immediately.
"""
from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from agentmcp.config.schemas import AppSettings
from agentmcp.discovery import fetch_agent_data
from agentmcp.mcp import AgentSession

logger = logging.getLogger(__name__)


def _optional_float(value: str | None) -> float | None:
    if value is None or value.strip() == "":
        return None
    return float(value)


@lru_cache()
def get_settings() -> AppSettings:
    """
    Get application settings from environment.

    Uses lru_cache for singleton pattern.
    """
    return AppSettings(
        # Service
        service_name=os.getenv("AGENTMCP_SERVICE_NAME", "agentmcp"),
        environment=os.getenv("AGENTMCP_ENVIRONMENT", "development"),
        debug=os.getenv("AGENTMCP_DEBUG", "false").lower() == "true",
        log_level=os.getenv("AGENTMCP_LOG_LEVEL", "INFO"),
        # Discovery
        url_scheme=os.getenv("AGENTMCP_URL_SCHEME", "https"),
        manifest_path=os.getenv("AGENTMCP_MANIFEST_PATH", "/.well-known/ai-plugin.json"),
        discovery_timeout=float(os.getenv("AGENTMCP_DISCOVERY_TIMEOUT", "30")),
        # Tool execution
        request_timeout=_optional_float(os.getenv("AGENTMCP_REQUEST_TIMEOUT")),
        # HTTP server
        host=os.getenv("AGENTMCP_HOST", "0.0.0.0"),
        port=int(os.getenv("AGENTMCP_PORT", "8000")),
    )


async def create_session(
    agent_id: str | None,
    caller_headers: Mapping[str, Any],
    settings: AppSettings | None = None,
) -> AgentSession:
    """
    Discover an agent and open a session for it.

    Raises:
        DiscoveryError: If the manifest cannot be used
    """
    settings = settings or get_settings()

    agent = await fetch_agent_data(
        agent_id,
        scheme=settings.url_scheme,
        manifest_path=settings.manifest_path,
        timeout=settings.discovery_timeout,
    )
    return AgentSession(
        agent,
        caller_headers=caller_headers,
        timeout=settings.request_timeout,
    )
