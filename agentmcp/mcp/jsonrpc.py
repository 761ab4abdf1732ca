"""
JSON-RPC 2.0 envelopes for MCP.

All MCP messages are JSON-RPC 2.0 requests, notifications or responses.

Reference: https://www.jsonrpc.org/specification
"""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel

JSONRPC_VERSION = "2.0"

# Standard JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Server-defined
SERVER_ERROR = -32000

RequestId = Union[str, int]


class JSONRPCError(BaseModel):
    """JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any | None = None


class JSONRPCRequest(BaseModel):
    """JSON-RPC 2.0 request, or a notification when id is None."""

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: RequestId | None = None
    method: str
    params: dict[str, Any] | None = None

    @property
    def is_notification(self) -> bool:
        return self.id is None


class JSONRPCResponse(BaseModel):
    """JSON-RPC 2.0 response message (success)."""

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: RequestId
    result: Any


class JSONRPCErrorResponse(BaseModel):
    """JSON-RPC 2.0 response message (error)."""

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: RequestId | None
    error: JSONRPCError


class MCPMethods:
    """MCP method names served by a session."""

    INITIALIZE = "initialize"
    INITIALIZED = "notifications/initialized"
    PING = "ping"

    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"

    RESOURCES_LIST = "resources/list"
    RESOURCES_READ = "resources/read"

    PROMPTS_LIST = "prompts/list"
    PROMPTS_GET = "prompts/get"


class JSONRPCException(Exception):
    """Raised by method handlers to produce a JSON-RPC error response."""

    def __init__(self, code: int, message: str, data: Any | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


def success_response(request_id: RequestId, result: Any) -> dict[str, Any]:
    return JSONRPCResponse(id=request_id, result=result).model_dump()


def error_response(
    request_id: RequestId | None,
    code: int,
    message: str,
    data: Any | None = None,
) -> dict[str, Any]:
    error = JSONRPCError(code=code, message=message, data=data)
    return JSONRPCErrorResponse(id=request_id, error=error).model_dump(exclude_none=False)
