"""
agentmcp - MCP bridge for manifest-described agents

FastAPI application entry point.

Every request names the agent host in the agentId query parameter:

    POST /mcp?agentId=agent.example.com   JSON-RPC message or batch

The transport is stateless Streamable HTTP: responses are plain JSON,
there is no server-initiated stream and no session to terminate, so
GET and DELETE are answered with 405.

The incoming request headers are forwarded (filtered) with every tool call
made in that request.
"""

from __future__ import annotations

import json
import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from agentmcp import __version__
from agentmcp.app.dependencies import create_session, get_settings
from agentmcp.errors import DiscoveryError
from agentmcp.mcp.jsonrpc import PARSE_ERROR, SERVER_ERROR, error_response

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="agentmcp",
    description="Expose manifest-described HTTP APIs as MCP tools",
    version=__version__,
    debug=settings.debug,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request with its duration and status."""
    start = time.perf_counter()
    method = request.method
    url = str(request.url)

    logger.info(f"Incoming {method} request to {url}")
    logger.info(f"  User-Agent: {request.headers.get('user-agent', 'unknown')}")
    logger.info(f"  Content-Type: {request.headers.get('content-type', 'unknown')}")
    logger.debug(f"  Headers: {dict(request.headers)}")

    response = await call_next(request)

    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(f"{method} {url} - {response.status_code} ({duration_ms:.0f}ms)")
    return response


@app.api_route("/{path:path}", methods=["GET", "POST", "DELETE"])
async def handle_mcp(request: Request, path: str = "") -> Response:
    """Route any request to the MCP session of the agent named by agentId."""
    if request.method != "POST":
        return JSONResponse(
            status_code=405,
            content=error_response(None, SERVER_ERROR, "Method not allowed."),
            headers={"Allow": "POST"},
        )

    agent_id = request.query_params.get("agentId")
    caller_headers = dict(request.headers)

    try:
        session = await create_session(agent_id, caller_headers, settings)
    except DiscoveryError as e:
        logger.error(f"Failed to open session for {agent_id!r}: {e}")
        return JSONResponse(
            status_code=502,
            content=error_response(None, SERVER_ERROR, str(e)),
        )

    try:
        payload = json.loads(await request.body())
    except ValueError as e:
        return JSONResponse(
            status_code=400,
            content=error_response(None, PARSE_ERROR, f"Parse error: {e}"),
        )

    result = await session.handle_payload(payload)
    if result is None:
        return Response(status_code=202)
    return JSONResponse(result)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "agentmcp.app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
