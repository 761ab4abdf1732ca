"""
Manifest discovery for agent hosts.
"""

from .manifest import AgentData, fetch_agent_data, parse_manifest

__all__ = ["AgentData", "fetch_agent_data", "parse_manifest"]
