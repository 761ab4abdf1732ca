"""
Adapter layer: turns API descriptions into ToolDefinitions.

Usage:
    from agentmcp.adapters import OpenAPISpecImporter

    definitions = OpenAPISpecImporter().import_spec(spec)
"""

from .openapi_adapter import OpenAPISpecImporter
from .schemas import DEFAULT_CONTENT_TYPE, ParamSpec, ToolDefinition

__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "OpenAPISpecImporter",
    "ParamSpec",
    "ToolDefinition",
]
