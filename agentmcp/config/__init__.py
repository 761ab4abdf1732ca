"""
Configuration for agentmcp.

Settings are plain pydantic models populated from AGENTMCP_* environment
variables by agentmcp.app.dependencies.get_settings().
"""

from .schemas import AppSettings

__all__ = ["AppSettings"]
