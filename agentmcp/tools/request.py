"""
Request Translator.

Turns a validated tool invocation back into an HTTP request and turns the
HTTP response into a ToolResult.

translate_request distributes arguments according to the tool's ParamSpecs:

    1. Caller headers are copied, minus transport-framing headers
       (host, content-length, connection, upgrade, expect; any casing).
       Content-Type is then set to the tool's declared content type.
    2. {name} tokens in the path template are replaced with the
       percent-encoded argument value.
    3. Query parameters are appended in ParamSpec order (repeats kept).
    4. Header parameters are set by exact key, overriding copied headers.
    5. For POST/PUT/PATCH, arguments not consumed by 2-4 form the body:
       JSON when the content type contains application/json, URL-encoded
       form data otherwise.
    6. The path is resolved against the base URL and the query appended.

normalize_response never raises: a body that is not JSON is used as raw
text, and non-2xx statuses become error results carrying the raw text.

Both functions are pure. execute_request performs the single round trip.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from urllib.parse import quote, urlencode, urljoin, urlsplit, urlunsplit

import httpx

from agentmcp.adapters.schemas.tool import HEADER, PATH, QUERY
from agentmcp.errors import TransportError

from .base import ToolResult

if TYPE_CHECKING:
    from agentmcp.adapters.schemas.tool import ToolDefinition

logger = logging.getLogger(__name__)

SKIPPED_HEADERS = frozenset({"host", "content-length", "connection", "upgrade", "expect"})

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})

CONTENT_TYPE = "Content-Type"

# encodeURIComponent leaves these unescaped in addition to A-Z a-z 0-9 - _ . ~
_URI_COMPONENT_SAFE = "!'()*"


@dataclass(frozen=True, slots=True)
class OutboundRequest:
    """
    Fully-formed HTTP request for one tool invocation.

    Attributes:
        method: Upper-case HTTP method
        url: Absolute URL including the query string
        headers: Header map (case-sensitive keys)
        body: Serialized body or None
    """

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None


def stringify(value: Any) -> str:
    """Render a primitive argument the way it appears on the wire."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _stringify_float(value)
    return str(value)


def _stringify_float(value: float) -> str:
    # Plain notation for 1e-6 <= |value| < 1e21, exponent form outside
    if not math.isfinite(value):
        return "NaN" if math.isnan(value) else ("Infinity" if value > 0 else "-Infinity")
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))

    text = repr(value)
    if "e" not in text:
        return text

    mantissa, exponent = text.split("e")
    power = int(exponent)
    if -7 < power < 21:
        return format(Decimal(text), "f")
    return f"{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"


def seed_headers(caller_headers: Mapping[str, Any] | None, content_type: str) -> dict[str, str]:
    """Copy forwardable caller headers and set the declared Content-Type."""
    headers: dict[str, str] = {}

    for key, value in (caller_headers or {}).items():
        lower_key = key.lower()
        if lower_key in SKIPPED_HEADERS or lower_key == "content-type":
            continue
        if isinstance(value, str):
            headers[key] = value

    headers[CONTENT_TYPE] = content_type
    return headers


def translate_request(
    tool: ToolDefinition,
    arguments: Mapping[str, Any],
    base_url: str,
    caller_headers: Mapping[str, Any] | None = None,
    *,
    log: logging.Logger | None = None,
) -> OutboundRequest:
    """
    Build the outbound request for one invocation.

    Args:
        tool: Definition of the operation
        arguments: Validated arguments
        base_url: Origin of the remote API (e.g. "https://agent.example.com")
        caller_headers: Headers of the request that opened the session
        log: Logger (defaults to the module logger)

    Returns:
        OutboundRequest ready to execute
    """
    log = log or logger
    content_type = tool.request_body_content_type
    method = tool.method.upper()

    headers = seed_headers(caller_headers, content_type)

    path = tool.path_template
    query: list[tuple[str, str]] = []

    for param in tool.parameters:
        value = arguments.get(param.name)
        if value is None:
            continue

        if param.location == PATH:
            encoded = quote(stringify(value), safe=_URI_COMPONENT_SAFE)
            path = path.replace(f"{{{param.name}}}", encoded, 1)
        elif param.location == QUERY:
            query.append((param.name, stringify(value)))
        elif param.location == HEADER:
            headers[param.name] = stringify(value)

    body: str | None = None
    if method in BODY_METHODS:
        body_params = {
            key: value
            for key, value in arguments.items()
            if value is not None and not tool.consumes(key)
        }
        log.debug(f"[request_translator:{tool.name}] Body parameters: {list(body_params)}")

        if body_params:
            if "application/json" in content_type:
                body = json.dumps(body_params, separators=(",", ":"), ensure_ascii=False)
            else:
                body = urlencode([(key, stringify(value)) for key, value in body_params.items()])

    url = urljoin(base_url, path)
    if query:
        # The query goes before any #fragment of the template
        parts = urlsplit(url)
        encoded = urlencode(query)
        url = urlunsplit(parts._replace(query=f"{parts.query}&{encoded}" if parts.query else encoded))

    log.debug(f"[request_translator:{tool.name}] {method} {url}")

    return OutboundRequest(method=method, url=url, headers=headers, body=body)


def normalize_response(status_code: int, text: str) -> ToolResult:
    """
    Convert an HTTP response into a ToolResult.

    Error results carry the raw text, even when it is valid JSON.
    Success results carry the value pretty-printed as JSON.
    """
    if not 200 <= status_code < 300:
        return ToolResult.error(
            f"HTTP Error {status_code}: {text}",
            structured={"status_code": status_code},
        )

    try:
        data: Any = json.loads(text)
    except ValueError:
        data = text

    return ToolResult.success(json.dumps(data, indent=2, ensure_ascii=False))


async def execute_request(client: httpx.AsyncClient, request: OutboundRequest) -> ToolResult:
    """
    Issue the request exactly as constructed and normalize the response.

    Raises:
        TransportError: If the round trip fails
    """
    try:
        response = await client.request(
            method=request.method,
            url=request.url,
            headers=request.headers,
            content=request.body,
        )
        text = response.text
    except httpx.HTTPError as e:
        raise TransportError(str(e) or e.__class__.__name__) from e

    logger.debug(f"[request_translator] Response status: {response.status_code}")
    return normalize_response(response.status_code, text)
