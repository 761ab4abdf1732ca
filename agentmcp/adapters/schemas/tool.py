"""
Tool Definition Schema.

JSON-serializable description of one HTTP operation exposed as a tool.

A ToolDefinition contains everything needed to:
    1. Present the tool to an agent (name, description, input_schema)
    2. Turn an invocation back into an HTTP request (method, path_template,
       parameters, request_body_content_type)

Definitions are produced by the OpenAPI generator (see
agentmcp.adapters.openapi_adapter) and are immutable afterwards. Both the
snake_case field names and the camelCase wire names are accepted:

    ToolDefinition.model_validate({
        "name": "getItem",
        "description": "Get an item",
        "inputSchema": {
            "type": "object",
            "properties": {"id": {"type": "string"}},
            "required": ["id"],
        },
        "method": "get",
        "pathTemplate": "/items/{id}",
        "parameters": [{"name": "id", "in": "path"}],
    })
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CONTENT_TYPE = "application/json"

PATH = "path"
QUERY = "query"
HEADER = "header"

# Locations that consume an argument; everything else ends up in the body
REQUEST_LOCATIONS = frozenset({PATH, QUERY, HEADER})


class ParamSpec(BaseModel):
    """
    Where one named argument goes in the outbound request.

    Attributes:
        name: Argument name
        location: "path", "query" or "header" (wire name: "in")
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str = Field(..., description="Argument name")
    location: str = Field(..., alias="in", description="path | query | header")


class ToolDefinition(BaseModel):
    """One HTTP operation exposed as a tool."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    # Core identity
    name: str = Field(..., description="Unique tool name")
    description: str = Field(default="", description="Human-readable description for LLM")

    # Agent interface
    input_schema: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}, "required": []},
        alias="inputSchema",
        description="JSON Schema for the tool arguments",
    )

    # HTTP transport
    method: str = Field(..., description="HTTP method")
    path_template: str = Field(..., alias="pathTemplate", description="Path with {name} tokens")
    parameters: tuple[ParamSpec, ...] = Field(
        default=(), description="Path, query and header parameter locations"
    )
    request_body_content_type: str = Field(
        default=DEFAULT_CONTENT_TYPE,
        alias="requestBodyContentType",
        description="Content type used to serialize the body",
    )

    operation_id: str | None = Field(default=None, alias="operationId")

    def consumes(self, name: str) -> bool:
        """True if some ParamSpec places this argument in path, query or header."""
        return any(
            p.name == name and p.location in REQUEST_LOCATIONS for p in self.parameters
        )
