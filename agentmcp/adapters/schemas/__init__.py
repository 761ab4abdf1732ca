"""
Schemas for the adapter layer.
"""

from .tool import DEFAULT_CONTENT_TYPE, ParamSpec, ToolDefinition

__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "ParamSpec",
    "ToolDefinition",
]
