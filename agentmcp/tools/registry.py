"""
Tool Registry.

The registry holds the tools of one agent session:
- Registration with validation
- Lookup by name
- Schema export for tools/list

Tools are registered once when the session is set up and are not
modified afterwards.

Usage:
    registry = ToolRegistry()
    registry.register(OpenAPIOperationTool(definition, base_url))

    tool = registry.get_required("getItem")
    schemas = registry.to_mcp_schemas()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .base import Tool

logger = logging.getLogger(__name__)


class ToolRegistryError(Exception):
    """Error in tool registry operations."""

    pass


class ToolRegistry:
    """Registry of the tools exposed by one session."""

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """
        Register a tool.

        Raises:
            ToolRegistryError: If the name is taken or the tool is invalid
        """
        if tool.name in self._tools:
            raise ToolRegistryError(
                f"Tool '{tool.name}' already registered"
            )

        self._validate_tool(tool)

        self._tools[tool.name] = tool
        logger.debug(f"[tool_registry] Registered tool: {tool.name}")

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def get_required(self, name: str) -> Tool:
        """
        Get a tool by name, raising if not found.

        Raises:
            ToolRegistryError: If tool not found
        """
        tool = self._tools.get(name)
        if tool is None:
            available = list(self._tools.keys())
            raise ToolRegistryError(f"Tool '{name}' not found. Available tools: {available}")
        return tool

    def list_tools(self) -> list[Tool]:
        return list(self._tools.values())

    def list_names(self) -> list[str]:
        return list(self._tools.keys())

    def to_mcp_schemas(self) -> list[dict[str, Any]]:
        """Get all tool schemas in MCP format."""
        return [tool.to_mcp_schema() for tool in self._tools.values()]

    def _validate_tool(self, tool: Tool) -> None:
        """
        Validate tool has required properties.

        Raises:
            ToolRegistryError: If tool is invalid
        """
        if not tool.name or not isinstance(tool.name, str):
            raise ToolRegistryError(f"Tool must have a valid name: {tool}")

        if not isinstance(tool.description, str):
            raise ToolRegistryError(f"Tool '{tool.name}' description must be a string")

        schema = tool.input_schema
        if not isinstance(schema, dict):
            raise ToolRegistryError(f"Tool '{tool.name}' input_schema must be a dict")

        if schema.get("type") != "object":
            raise ToolRegistryError(f"Tool '{tool.name}' input_schema must have type: 'object'")

        if "properties" not in schema:
            raise ToolRegistryError(f"Tool '{tool.name}' input_schema must have 'properties'")

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __repr__(self) -> str:
        return f"<ToolRegistry tools={list(self._tools.keys())}>"
