"""
OpenAPI Operation Tool.

A Tool that calls one HTTP operation of a remote API, built from a
ToolDefinition.

The tool:
    1. Compiles the definition's input schema once (see tools.schema)
    2. Validates invocation arguments against the compiled signature
    3. Translates the arguments into an HTTP request (see tools.request)
    4. Executes the request and normalizes the response

Every failure (invalid arguments, request construction, network) is
returned as an error ToolResult; execute() never raises.

HTTP Client Lifecycle:
    By default a fresh httpx.AsyncClient is created for each execute()
    call and closed afterward. Pass a shared client via the constructor
    to reuse connections; the caller then manages its lifecycle.

Example:
    definition = ToolDefinition(
        name="getItem",
        description="Get an item",
        input_schema={
            "type": "object",
            "properties": {"id": {"type": "string"}},
            "required": ["id"],
        },
        method="get",
        path_template="/items/{id}",
        parameters=[{"name": "id", "in": "path"}],
    )

    tool = OpenAPIOperationTool(definition, "https://api.example.com")
    result = await tool.execute({"id": "42"})
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import ValidationError

from agentmcp.adapters.schemas.tool import ToolDefinition
from agentmcp.tools.base import Tool, ToolAnnotations, ToolResult
from agentmcp.tools.request import execute_request, translate_request
from agentmcp.tools.schema import (
    CompiledParameter,
    build_arguments_model,
    compile_schema,
    signature_to_json_schema,
    validate_arguments,
)

logger = logging.getLogger(__name__)


class OpenAPIOperationTool(Tool):
    """A Tool generated from a single HTTP operation definition."""

    def __init__(
        self,
        definition: ToolDefinition,
        base_url: str,
        *,
        caller_headers: Mapping[str, Any] | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
        log: logging.Logger | None = None,
    ):
        """
        Initialize the tool.

        Args:
            definition: Operation definition
            base_url: Origin of the remote API
            caller_headers: Headers forwarded (filtered) with every call
            timeout: Request timeout in seconds (None = no timeout)
            http_client: Optional shared HTTP client (caller manages lifecycle)
            log: Logger used for request tracing (defaults to module logger)
        """
        self._definition = definition
        self._base_url = base_url
        self._caller_headers = dict(caller_headers or {})
        self._timeout = timeout
        self._shared_client = http_client
        self._log = log or logger

        self._signature = compile_schema(definition.input_schema, log=self._log)
        self._arguments_model = build_arguments_model(definition.name, self._signature)

    @property
    def name(self) -> str:
        return self._definition.name

    @property
    def description(self) -> str:
        return self._definition.description

    @property
    def definition(self) -> ToolDefinition:
        return self._definition

    @property
    def signature(self) -> dict[str, CompiledParameter]:
        """Compiled parameter signature (name -> CompiledParameter)."""
        return dict(self._signature)

    @property
    def input_schema(self) -> dict[str, Any]:
        """JSON Schema of the compiled signature (unsupported types omitted)."""
        return signature_to_json_schema(self._signature)

    @property
    def annotations(self) -> ToolAnnotations:
        """Tool annotations based on HTTP method."""
        method = self._definition.method.upper()
        return ToolAnnotations(
            title=self._definition.operation_id or self._definition.name,
            read_only_hint=method in ("GET", "HEAD", "OPTIONS"),
            destructive_hint=method == "DELETE",
            idempotent_hint=method in ("GET", "PUT", "DELETE"),
            open_world_hint=True,
        )

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        """
        Execute the API call.

        Args:
            arguments: Dict matching input_schema

        Returns:
            ToolResult with the pretty-printed response, or an error
        """
        self._log.info(f"[openapi_tool:{self.name}] Executing with arguments: {list(arguments or {})}")

        try:
            validated = validate_arguments(self._arguments_model, arguments)
        except ValidationError as e:
            self._log.warning(f"[openapi_tool:{self.name}] Invalid arguments: {e}")
            return ToolResult.error(f"Error: Invalid arguments for tool {self.name}: {e}")

        if self._shared_client is not None:
            client = self._shared_client
            close_after = False
        else:
            client = httpx.AsyncClient(timeout=self._timeout)
            close_after = True

        try:
            request = translate_request(
                self._definition,
                validated,
                self._base_url,
                self._caller_headers,
                log=self._log,
            )
            self._log.info(f"[openapi_tool:{self.name}] {request.method} {request.url}")

            result = await execute_request(client, request)

            if result.is_error:
                self._log.warning(f"[openapi_tool:{self.name}] {result.text[:500]}")
            return result

        except Exception as e:
            self._log.error(f"[openapi_tool:{self.name}] Request failed: {e}")
            return ToolResult.error(f"Error: {e}")

        finally:
            if close_after:
                await client.aclose()
