"""
agentmcp - expose manifest-described HTTP APIs as MCP tools.

An agent host publishes a manifest (an OpenAPI document with an "x-mb"
extension) at /.well-known/ai-plugin.json. agentmcp discovers it, compiles
every operation into a typed tool, and serves the tools over MCP. Each
tool call is translated back into an HTTP request against the agent host.

Quick Start:
    >>> from agentmcp.discovery import fetch_agent_data
    >>> from agentmcp.mcp import AgentSession
    >>>
    >>> agent = await fetch_agent_data("agent.example.com")
    >>> session = AgentSession(agent)
    >>> result = await session.call_tool("getItem", {"id": "42"})
"""

__version__ = "0.1.0"
__license__ = "MIT"

__all__ = [
    "__version__",
    "__license__",
]
