"""
Error types for agentmcp.

Error taxonomy:
    - DiscoveryError: manifest could not be fetched or is invalid.
      Fatal to session setup; no tools are registered.
    - SchemaError: a declared parameter type is not supported.
      Non-fatal; the compiler drops the single parameter.
    - TransportError: building or executing an outbound request failed.
      Non-fatal; converted to an error ToolResult for that call only.

Response bodies that are not JSON are never an error: the raw text is used.
"""

from __future__ import annotations


class AgentMCPError(Exception):
    """Base class for all agentmcp errors."""

    pass


class DiscoveryError(AgentMCPError):
    """Manifest unreachable, non-success status, invalid JSON or missing fields."""

    pass


class SchemaError(AgentMCPError):
    """Declared parameter type is not supported by the schema compiler."""

    def __init__(self, name: str, declared_type: object):
        self.name = name
        self.declared_type = declared_type
        super().__init__(f"Unsupported type {declared_type!r} for parameter '{name}'")


class TransportError(AgentMCPError):
    """Outbound request could not be built or executed."""

    pass
