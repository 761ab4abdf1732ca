"""
Agent Manifest Discovery.

Fetches the manifest an agent host publishes at a well-known location
and turns it into AgentData:

    https://{agent_id}/.well-known/ai-plugin.json

The manifest is an OpenAPI document carrying an "x-mb" extension:

    {
        "openapi": "3.0.0",
        "paths": {...},
        "x-mb": {
            "name": "...",
            "description": "...",
            "assistant": {"instructions": "..."}
        }
    }

The same document is the source of the agent's tools (see
agentmcp.adapters.openapi_adapter).

Every failure (network, status, JSON, missing fields, unusable paths)
is raised as one DiscoveryError. Nothing is registered for an agent
whose manifest fails discovery.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from agentmcp.adapters.openapi_adapter import OpenAPISpecImporter
from agentmcp.adapters.schemas import ToolDefinition
from agentmcp.errors import DiscoveryError

logger = logging.getLogger(__name__)

MANIFEST_PATH = "/.well-known/ai-plugin.json"
MARKER_FIELD = "x-mb"

DEFAULT_NAME = "Unknown Agent"
DEFAULT_DESCRIPTION = "No description available"


@dataclass(frozen=True, slots=True)
class AgentData:
    """
    Everything a session needs from the discovery layer.

    Attributes:
        name: Agent display name
        description: Agent description
        instructions: Assistant instructions (exposed verbatim as a prompt)
        tools: Tool definitions generated from the manifest
        manifest_url: Where the manifest was fetched from
        base_url: Origin tool requests are resolved against
    """

    name: str
    description: str
    instructions: str
    manifest_url: str
    base_url: str
    tools: tuple[ToolDefinition, ...] = field(default_factory=tuple)


def parse_manifest(
    document: Any,
    *,
    manifest_url: str,
    base_url: str,
    importer: OpenAPISpecImporter | None = None,
) -> AgentData:
    """
    Validate a manifest document and build AgentData.

    Raises:
        DiscoveryError: If marker fields or instructions are missing, or
            the document yields no tool list
    """
    if not isinstance(document, dict):
        raise DiscoveryError("Invalid agent data: manifest is not a JSON object")

    marker = document.get(MARKER_FIELD)
    if not marker or not isinstance(marker, dict):
        raise DiscoveryError(f"Invalid agent data: missing {MARKER_FIELD} field")

    assistant = marker.get("assistant")
    if not isinstance(assistant, dict) or not assistant.get("instructions"):
        raise DiscoveryError("Invalid agent data: missing assistant instructions")

    importer = importer or OpenAPISpecImporter()
    try:
        tools = importer.import_spec(document)
    except Exception as e:
        raise DiscoveryError(f"Failed to fetch OpenAPI tools: {e}") from e

    return AgentData(
        name=marker.get("name") or DEFAULT_NAME,
        description=marker.get("description") or DEFAULT_DESCRIPTION,
        instructions=str(assistant["instructions"]),
        manifest_url=manifest_url,
        base_url=base_url,
        tools=tuple(tools),
    )


async def fetch_agent_data(
    agent_id: str | None,
    *,
    scheme: str = "https",
    manifest_path: str = MANIFEST_PATH,
    timeout: float = 30.0,
    http_client: httpx.AsyncClient | None = None,
) -> AgentData:
    """
    Fetch and validate the manifest of an agent host.

    Args:
        agent_id: Agent host name (e.g. "agent.example.com")
        scheme: URL scheme of the agent host
        manifest_path: Well-known manifest path
        timeout: Fetch timeout in seconds
        http_client: Optional shared client (caller manages lifecycle)

    Returns:
        AgentData for the host

    Raises:
        DiscoveryError: On any failure, with a single descriptive message
    """
    if not agent_id:
        raise DiscoveryError("Agent ID is required")

    base_url = f"{scheme}://{agent_id}"
    manifest_url = f"{base_url}{manifest_path}"

    logger.info(f"[discovery] Fetching manifest: {manifest_url}")

    try:
        if http_client is not None:
            response = await http_client.get(manifest_url)
        else:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.get(manifest_url)

        if response.status_code < 200 or response.status_code >= 300:
            raise DiscoveryError(
                f"Failed to fetch agent data: {response.status_code} {response.reason_phrase}"
            )

        try:
            document = response.json()
        except ValueError as e:
            raise DiscoveryError(f"Invalid agent data: {e}") from e

        agent = parse_manifest(document, manifest_url=manifest_url, base_url=base_url)

    except (DiscoveryError, httpx.HTTPError) as e:
        logger.warning(f"[discovery] {agent_id}: {e}")
        raise DiscoveryError(f"Error fetching agent data: {e}") from e

    logger.info(f"[discovery] {agent.name}: {len(agent.tools)} tools")
    return agent
