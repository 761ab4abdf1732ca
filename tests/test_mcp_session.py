"""
Tests for AgentSession (MCP surface).

Tests cover:
- Tool registration from AgentData
- Metadata resource and instructions prompt
- JSON-RPC dispatch (tools, resources, prompts, errors, notifications, batches)
- Tool failures reported in results, never as protocol errors
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from agentmcp.discovery import parse_manifest
from agentmcp.mcp import AgentSession
from agentmcp.mcp.jsonrpc import INVALID_PARAMS, INVALID_REQUEST, METHOD_NOT_FOUND
from agentmcp.tools import ToolRegistry, ToolRegistryError
from agentmcp.tools.generic.openapi import OpenAPIOperationTool

MANIFEST_URL = "https://coin.example.com/.well-known/ai-plugin.json"


@pytest.fixture
def agent(manifest):
    return parse_manifest(
        manifest,
        manifest_url=MANIFEST_URL,
        base_url="https://coin.example.com",
    )


@pytest.fixture
def http_client():
    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.text = '{"symbol": "BTC", "price": 1}'

    client = AsyncMock()
    client.request = AsyncMock(return_value=mock_response)
    return client


@pytest.fixture
def session(agent, http_client):
    return AgentSession(
        agent,
        caller_headers={"host": "bridge.local", "authorization": "Bearer t"},
        http_client=http_client,
    )


def rpc(method, params=None, request_id=1):
    message = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        message["params"] = params
    return message


# =============================================================================
# Registration
# =============================================================================


class TestRegistration:
    """Tests for session setup."""

    def test_registers_one_tool_per_definition(self, session):
        assert session.registry.list_names() == ["getCoin", "createAlert"]

    def test_compiled_schema_advertised(self, session):
        tools = {t["name"]: t for t in session.list_tools()}

        # channels (array) is not supported and is not advertised
        assert list(tools["createAlert"]["inputSchema"]["properties"]) == [
            "X-Request-Id",
            "symbol",
            "threshold",
        ]
        assert tools["createAlert"]["inputSchema"]["required"] == ["symbol", "threshold"]

    def test_duplicate_tool_names_skipped(self, agent, http_client):
        duplicated = agent.__class__(
            name=agent.name,
            description=agent.description,
            instructions=agent.instructions,
            manifest_url=agent.manifest_url,
            base_url=agent.base_url,
            tools=agent.tools + agent.tools[:1],
        )

        session = AgentSession(duplicated, http_client=http_client)

        assert len(session.registry) == 2

    def test_repr(self, session):
        assert repr(session) == "<AgentSession agent='coin-agent' tools=2>"


# =============================================================================
# JSON-RPC
# =============================================================================


class TestJSONRPC:
    """Tests for JSON-RPC dispatch."""

    @pytest.mark.asyncio
    async def test_initialize(self, session):
        response = await session.handle(rpc("initialize", {"protocolVersion": "2025-03-26"}))

        result = response["result"]
        assert result["protocolVersion"] == "2025-03-26"
        assert result["serverInfo"]["name"] == "coin-agent"
        assert set(result["capabilities"]) == {"tools", "resources", "prompts"}

    @pytest.mark.asyncio
    async def test_ping(self, session):
        assert await session.handle(rpc("ping")) == {"jsonrpc": "2.0", "id": 1, "result": {}}

    @pytest.mark.asyncio
    async def test_notification_has_no_response(self, session):
        message = {"jsonrpc": "2.0", "method": "notifications/initialized"}

        assert await session.handle(message) is None

    @pytest.mark.asyncio
    async def test_tools_list(self, session):
        response = await session.handle(rpc("tools/list"))

        names = [t["name"] for t in response["result"]["tools"]]
        assert names == ["getCoin", "createAlert"]

    @pytest.mark.asyncio
    async def test_tools_call_success(self, session, http_client):
        response = await session.handle(
            rpc("tools/call", {"name": "getCoin", "arguments": {"symbol": "BTC"}})
        )

        result = response["result"]
        assert "isError" not in result
        assert result["content"][0]["type"] == "text"
        assert result["content"][0]["text"] == '{\n  "symbol": "BTC",\n  "price": 1\n}'

        call_args = http_client.request.call_args
        assert call_args.kwargs["url"] == "https://coin.example.com/api/coins/BTC"
        assert call_args.kwargs["headers"] == {
            "authorization": "Bearer t",
            "Content-Type": "application/json",
        }

    @pytest.mark.asyncio
    async def test_tools_call_body_and_header_parameters(self, session, http_client):
        await session.handle(
            rpc(
                "tools/call",
                {
                    "name": "createAlert",
                    "arguments": {"symbol": "ETH", "threshold": 2500, "X-Request-Id": "r-1"},
                },
            )
        )

        call_args = http_client.request.call_args
        assert call_args.kwargs["method"] == "POST"
        assert call_args.kwargs["headers"]["X-Request-Id"] == "r-1"
        assert call_args.kwargs["content"] == '{"symbol":"ETH","threshold":2500}'

    @pytest.mark.asyncio
    async def test_tools_call_http_error_is_a_result(self, session, http_client):
        http_client.request.return_value.status_code = 503
        http_client.request.return_value.text = "unavailable"

        response = await session.handle(
            rpc("tools/call", {"name": "getCoin", "arguments": {"symbol": "BTC"}})
        )

        assert response["result"]["isError"] is True
        assert response["result"]["content"][0]["text"] == "HTTP Error 503: unavailable"

    @pytest.mark.asyncio
    async def test_tools_call_invalid_arguments_is_a_result(self, session):
        response = await session.handle(rpc("tools/call", {"name": "getCoin", "arguments": {}}))

        assert response["result"]["isError"] is True

    @pytest.mark.asyncio
    async def test_tools_call_unknown_tool(self, session):
        response = await session.handle(rpc("tools/call", {"name": "nope"}))

        assert response["error"]["code"] == INVALID_PARAMS

    @pytest.mark.asyncio
    async def test_tools_call_arguments_must_be_object(self, session):
        response = await session.handle(
            rpc("tools/call", {"name": "getCoin", "arguments": ["BTC"]})
        )

        assert response["error"]["code"] == INVALID_PARAMS

    @pytest.mark.asyncio
    async def test_resources(self, session):
        listing = await session.handle(rpc("resources/list"))
        read = await session.handle(rpc("resources/read", {"uri": MANIFEST_URL}))

        assert listing["result"]["resources"] == [
            {"name": "agentMetadata", "uri": MANIFEST_URL, "mimeType": "application/json"}
        ]
        assert read["result"]["contents"] == [
            {
                "uri": MANIFEST_URL,
                "text": "The agent's OpenAPI specification and metadata",
                "mimeType": "application/json",
            }
        ]

    @pytest.mark.asyncio
    async def test_unknown_resource(self, session):
        response = await session.handle(rpc("resources/read", {"uri": "https://elsewhere"}))

        assert response["error"]["code"] == INVALID_PARAMS

    @pytest.mark.asyncio
    async def test_prompts(self, session):
        listing = await session.handle(rpc("prompts/list"))
        prompt = await session.handle(rpc("prompts/get", {"name": "instructions"}))

        assert listing["result"]["prompts"][0]["name"] == "instructions"
        assert prompt["result"]["messages"] == [
            {
                "role": "assistant",
                "content": {"type": "text", "text": "Always quote prices in USD."},
            }
        ]

    @pytest.mark.asyncio
    async def test_unknown_method(self, session):
        response = await session.handle(rpc("sampling/createMessage"))

        assert response["error"]["code"] == METHOD_NOT_FOUND

    @pytest.mark.asyncio
    async def test_invalid_request(self, session):
        response = await session.handle({"jsonrpc": "2.0", "id": 9})

        assert response["id"] == 9
        assert response["error"]["code"] == INVALID_REQUEST

    @pytest.mark.asyncio
    async def test_batch(self, session):
        responses = await session.handle_payload(
            [
                rpc("ping", request_id=1),
                {"jsonrpc": "2.0", "method": "notifications/initialized"},
                rpc("tools/list", request_id=2),
            ]
        )

        assert [r["id"] for r in responses] == [1, 2]

    @pytest.mark.asyncio
    async def test_batch_of_notifications(self, session):
        payload = [{"jsonrpc": "2.0", "method": "notifications/initialized"}]

        assert await session.handle_payload(payload) is None

    @pytest.mark.asyncio
    async def test_empty_batch(self, session):
        response = await session.handle_payload([])

        assert response["error"]["code"] == INVALID_REQUEST


# =============================================================================
# ToolRegistry
# =============================================================================


class TestToolRegistry:
    """Tests for ToolRegistry."""

    def test_register_and_lookup(self, get_item_tool):
        registry = ToolRegistry()
        tool = OpenAPIOperationTool(get_item_tool, "https://agent.example.com")

        registry.register(tool)

        assert "getItem" in registry
        assert registry.get("getItem") is tool
        assert registry.get_required("getItem") is tool

    def test_duplicate_raises(self, get_item_tool):
        registry = ToolRegistry()
        registry.register(OpenAPIOperationTool(get_item_tool, "https://a"))

        with pytest.raises(ToolRegistryError, match="already registered"):
            registry.register(OpenAPIOperationTool(get_item_tool, "https://a"))

    def test_unknown_raises(self):
        with pytest.raises(ToolRegistryError, match="not found"):
            ToolRegistry().get_required("missing")
