"""
Agent MCP Session.

One session exposes one discovered agent over MCP:

    - tools: one OpenAPIOperationTool per ToolDefinition
    - resource "agentMetadata": the manifest location
    - prompt "instructions": the assistant instructions, verbatim

The session is built once from AgentData and the caller's headers, and
serves JSON-RPC 2.0 messages through handle()/handle_payload().

Tool failures never surface as JSON-RPC errors: tools/call always
returns a result whose isError flag tells success from failure.
Protocol problems (unknown method, unknown tool, bad params) are
JSON-RPC errors.

Usage:
    agent = await fetch_agent_data("agent.example.com")
    session = AgentSession(agent, caller_headers={"Authorization": "..."})

    response = await session.handle({
        "jsonrpc": "2.0", "id": 1, "method": "tools/list",
    })
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import ValidationError

from agentmcp import __version__
from agentmcp.discovery import AgentData
from agentmcp.tools import OpenAPIOperationTool, ToolRegistry, ToolRegistryError, ToolResult

from .jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    JSONRPCException,
    JSONRPCRequest,
    MCPMethods,
    error_response,
    success_response,
)

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2025-06-18"

METADATA_RESOURCE_NAME = "agentMetadata"
METADATA_RESOURCE_TEXT = "The agent's OpenAPI specification and metadata"

INSTRUCTIONS_PROMPT_NAME = "instructions"
INSTRUCTIONS_PROMPT_DESCRIPTION = "Instructions for how to use the agent"


@dataclass(frozen=True, slots=True)
class Resource:
    """Read-only resource exposed by a session."""

    name: str
    uri: str
    text: str
    mime_type: str = "application/json"

    def to_listing(self) -> dict[str, Any]:
        return {"name": self.name, "uri": self.uri, "mimeType": self.mime_type}

    def to_contents(self) -> dict[str, Any]:
        return {"uri": self.uri, "text": self.text, "mimeType": self.mime_type}


@dataclass(frozen=True, slots=True)
class Prompt:
    """Static prompt exposed by a session."""

    name: str
    description: str
    text: str
    role: str = "assistant"

    def to_listing(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description, "arguments": []}

    def to_result(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "messages": [
                {"role": self.role, "content": {"type": "text", "text": self.text}},
            ],
        }


class AgentSession:
    """MCP session for one discovered agent."""

    def __init__(
        self,
        agent: AgentData,
        *,
        caller_headers: Mapping[str, Any] | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Build the session and register its tools.

        Args:
            agent: Discovered agent
            caller_headers: Headers of the request that opened the session;
                forwarded (filtered) with every tool call
            timeout: Outbound request timeout (None = no timeout)
            http_client: Optional shared client for tool calls
        """
        self._agent = agent
        self.registry = ToolRegistry()

        for definition in agent.tools:
            tool = OpenAPIOperationTool(
                definition,
                agent.base_url,
                caller_headers=caller_headers,
                timeout=timeout,
                http_client=http_client,
            )
            try:
                self.registry.register(tool)
            except ToolRegistryError as e:
                logger.warning(f"[mcp_session] Skipping tool: {e}")

        self.resource = Resource(
            name=METADATA_RESOURCE_NAME,
            uri=agent.manifest_url,
            text=METADATA_RESOURCE_TEXT,
        )
        self.prompt = Prompt(
            name=INSTRUCTIONS_PROMPT_NAME,
            description=INSTRUCTIONS_PROMPT_DESCRIPTION,
            text=agent.instructions,
        )

        logger.info(
            f"[mcp_session] Initialized {agent.name} with {len(self.registry)} tools"
        )

    @property
    def agent(self) -> AgentData:
        return self._agent

    # ==================== Tools ====================

    def list_tools(self) -> list[dict[str, Any]]:
        return self.registry.to_mcp_schemas()

    async def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
        """
        Invoke a registered tool.

        Raises:
            ToolRegistryError: If no tool has this name
        """
        tool = self.registry.get_required(name)
        return await tool.execute(arguments or {})

    # ==================== Resources & Prompts ====================

    def list_resources(self) -> list[dict[str, Any]]:
        return [self.resource.to_listing()]

    def read_resource(self, uri: str) -> dict[str, Any]:
        if uri != self.resource.uri:
            raise JSONRPCException(INVALID_PARAMS, f"Resource {uri} not found")
        return {"contents": [self.resource.to_contents()]}

    def list_prompts(self) -> list[dict[str, Any]]:
        return [self.prompt.to_listing()]

    def get_prompt(self, name: str) -> dict[str, Any]:
        if name != self.prompt.name:
            raise JSONRPCException(INVALID_PARAMS, f"Prompt {name} not found")
        return self.prompt.to_result()

    # ==================== JSON-RPC ====================

    def server_info(self, protocol_version: str | None = None) -> dict[str, Any]:
        return {
            "protocolVersion": protocol_version or PROTOCOL_VERSION,
            "capabilities": {"tools": {}, "resources": {}, "prompts": {}},
            "serverInfo": {"name": self._agent.name, "version": __version__},
        }

    async def handle_payload(self, payload: Any) -> Any:
        """
        Handle a single JSON-RPC message or a batch.

        Returns:
            A response dict, a list of responses, or None when the payload
            held only notifications
        """
        if isinstance(payload, list):
            if not payload:
                return error_response(None, INVALID_REQUEST, "Empty batch")
            responses = [await self.handle(message) for message in payload]
            responses = [r for r in responses if r is not None]
            return responses or None

        return await self.handle(payload)

    async def handle(self, message: Any) -> dict[str, Any] | None:
        """Handle one JSON-RPC message. Notifications return None."""
        try:
            request = JSONRPCRequest.model_validate(message)
        except ValidationError as e:
            request_id = message.get("id") if isinstance(message, dict) else None
            if not isinstance(request_id, (str, int)):
                request_id = None
            return error_response(request_id, INVALID_REQUEST, f"Invalid request: {e}")

        try:
            result = await self._dispatch(request)
        except JSONRPCException as e:
            if request.is_notification:
                return None
            return error_response(request.id, e.code, e.message, e.data)
        except Exception as e:
            logger.error(f"[mcp_session] {request.method} failed: {e}", exc_info=True)
            if request.is_notification:
                return None
            return error_response(request.id, INTERNAL_ERROR, str(e))

        if request.is_notification:
            return None
        return success_response(request.id, result)

    async def _dispatch(self, request: JSONRPCRequest) -> Any:
        method = request.method
        params = request.params or {}

        if method == MCPMethods.INITIALIZE:
            return self.server_info(params.get("protocolVersion"))
        if method in (MCPMethods.PING, MCPMethods.INITIALIZED):
            return {}

        if method == MCPMethods.TOOLS_LIST:
            return {"tools": self.list_tools()}
        if method == MCPMethods.TOOLS_CALL:
            name = params.get("name")
            if not isinstance(name, str) or name not in self.registry:
                raise JSONRPCException(INVALID_PARAMS, f"Tool {name} not found")
            arguments = params.get("arguments") or {}
            if not isinstance(arguments, dict):
                raise JSONRPCException(INVALID_PARAMS, "Tool arguments must be an object")
            result = await self.call_tool(name, arguments)
            return result.to_dict()

        if method == MCPMethods.RESOURCES_LIST:
            return {"resources": self.list_resources()}
        if method == MCPMethods.RESOURCES_READ:
            return self.read_resource(str(params.get("uri", "")))

        if method == MCPMethods.PROMPTS_LIST:
            return {"prompts": self.list_prompts()}
        if method == MCPMethods.PROMPTS_GET:
            return self.get_prompt(str(params.get("name", "")))

        raise JSONRPCException(METHOD_NOT_FOUND, f"Method not found: {method}")

    def __repr__(self) -> str:
        return f"<AgentSession agent={self._agent.name!r} tools={len(self.registry)}>"
