"""
Generic Tools.

Universal adapter that calls any HTTP operation described by a
ToolDefinition, without a hand-written tool per endpoint.

Usage:
    from agentmcp.tools.generic import OpenAPIOperationTool

    tool = OpenAPIOperationTool(definition, base_url="https://api.example.com")
    result = await tool.execute({"id": "42"})
"""

from .openapi import OpenAPIOperationTool

__all__ = ["OpenAPIOperationTool"]
