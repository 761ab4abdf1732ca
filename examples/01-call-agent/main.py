"""
Call Agent Example

This example discovers an agent from its manifest and talks to it
through an MCP session, without running the HTTP server:
1. Fetch the manifest from https://<agent-id>/.well-known/ai-plugin.json
2. Open an AgentSession
3. List tools, read the instructions prompt, call a tool

Run: python -m examples.01-call-agent.main <agent-id> [tool] [json-arguments]
"""

import asyncio
import json
import sys

from agentmcp.discovery import fetch_agent_data
from agentmcp.errors import DiscoveryError
from agentmcp.mcp import AgentSession


async def main(agent_id: str, tool_name: str | None, arguments: dict) -> None:
    try:
        agent = await fetch_agent_data(agent_id)
    except DiscoveryError as e:
        print(f"Discovery failed: {e}")
        return

    session = AgentSession(agent)

    print(f"Agent: {agent.name} - {agent.description}")
    print("\nTools:")
    for tool in session.list_tools():
        required = ", ".join(tool["inputSchema"]["required"]) or "-"
        print(f"  {tool['name']:<30} required: {required}")

    prompt = session.get_prompt("instructions")
    print(f"\nInstructions:\n  {prompt['messages'][0]['content']['text']}")

    if tool_name is None:
        return

    response = await session.handle(
        {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "tools/call",
            "params": {"name": tool_name, "arguments": arguments},
        }
    )
    print(f"\n{tool_name}:")
    print(json.dumps(response, indent=2))


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    asyncio.run(
        main(
            sys.argv[1],
            sys.argv[2] if len(sys.argv) > 2 else None,
            json.loads(sys.argv[3]) if len(sys.argv) > 3 else {},
        )
    )
