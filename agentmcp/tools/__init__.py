"""
agentmcp Tools.

Tools are the callable units exposed to an agent host.

MCP Alignment:
    Tool interface follows Model Context Protocol standards.
    See: https://modelcontextprotocol.io/specification/

Layout:
    - base: Tool, ToolResult, ToolAnnotations, ContentBlock
    - registry: ToolRegistry
    - schema: schema compiler (input schema -> validated signature)
    - request: request translator (arguments -> HTTP request -> ToolResult)
    - generic: OpenAPIOperationTool (one tool per HTTP operation)
"""

from .base import (
    ContentBlock,
    Tool,
    ToolAnnotations,
    ToolResult,
)
from .generic import OpenAPIOperationTool
from .registry import ToolRegistry, ToolRegistryError
from .request import OutboundRequest, normalize_response, translate_request
from .schema import CompiledParameter, ParamKind, compile_schema

__all__ = [
    # Core Tool Protocol
    "Tool",
    "ToolResult",
    "ToolAnnotations",
    "ContentBlock",
    "ToolRegistry",
    "ToolRegistryError",
    # Schema compiler
    "CompiledParameter",
    "ParamKind",
    "compile_schema",
    # Request translator
    "OutboundRequest",
    "translate_request",
    "normalize_response",
    # Generic Tools
    "OpenAPIOperationTool",
]
