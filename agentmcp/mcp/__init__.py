"""
MCP surface: JSON-RPC envelopes and the per-agent session.
"""

from .jsonrpc import JSONRPCException, MCPMethods
from .session import AgentSession, Prompt, Resource

__all__ = [
    "AgentSession",
    "JSONRPCException",
    "MCPMethods",
    "Prompt",
    "Resource",
]
