"""
Pytest configuration and fixtures for agentmcp tests.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add the repository root to path for imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from agentmcp.adapters.schemas import ToolDefinition  # noqa: E402


@pytest.fixture
def quiet_logger():
    """Logger that discards everything (stands in for the injected logger)."""
    log = logging.getLogger("agentmcp.tests.quiet")
    log.addHandler(logging.NullHandler())
    log.propagate = False
    return log


@pytest.fixture
def item_schema():
    """Input schema with supported and unsupported property types."""
    return {
        "type": "object",
        "properties": {
            "id": {"type": "string", "description": "Item ID"},
            "limit": {"type": "integer"},
            "price": {"type": "number", "description": "Item price"},
            "tags": {"type": "array", "items": {"type": "string"}},
        },
        "required": ["id", "tags", "missing"],
    }


@pytest.fixture
def get_item_tool():
    """GET /items/{id} with a path parameter."""
    return ToolDefinition(
        name="getItem",
        description="Get an item by ID",
        input_schema={
            "type": "object",
            "properties": {"id": {"type": "string"}},
            "required": ["id"],
        },
        method="GET",
        path_template="/items/{id}",
        parameters=[{"name": "id", "in": "path"}],
    )


@pytest.fixture
def annotate_item_tool():
    """POST /items/{id}/notes with a path parameter and a body field."""
    return ToolDefinition(
        name="annotateItem",
        description="Add a note to an item",
        input_schema={
            "type": "object",
            "properties": {
                "id": {"type": "string"},
                "note": {"type": "string"},
            },
            "required": ["id"],
        },
        method="post",
        path_template="/items/{id}/notes",
        parameters=[{"name": "id", "in": "path"}],
    )


@pytest.fixture
def manifest():
    """Agent manifest: an OpenAPI document with the x-mb extension."""
    return {
        "openapi": "3.0.0",
        "info": {"title": "Coin Agent", "version": "1.0.0"},
        "x-mb": {
            "name": "coin-agent",
            "description": "Looks up coin prices",
            "assistant": {"instructions": "Always quote prices in USD."},
        },
        "paths": {
            "/api/coins/{symbol}": {
                "get": {
                    "operationId": "getCoin",
                    "summary": "Get a coin",
                    "parameters": [
                        {
                            "name": "symbol",
                            "in": "path",
                            "required": True,
                            "schema": {"type": "string"},
                            "description": "Ticker symbol",
                        },
                        {
                            "name": "currency",
                            "in": "query",
                            "schema": {"type": "string"},
                        },
                    ],
                },
            },
            "/api/alerts": {
                "post": {
                    "operationId": "createAlert",
                    "description": "Create a price alert",
                    "parameters": [
                        {"$ref": "#/components/parameters/RequestId"},
                    ],
                    "requestBody": {
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/Alert"},
                            }
                        }
                    },
                },
            },
        },
        "components": {
            "parameters": {
                "RequestId": {
                    "name": "X-Request-Id",
                    "in": "header",
                    "schema": {"type": "string"},
                },
            },
            "schemas": {
                "Alert": {
                    "type": "object",
                    "properties": {
                        "symbol": {"type": "string"},
                        "threshold": {"type": "number"},
                        "channels": {"type": "array", "items": {"type": "string"}},
                    },
                    "required": ["symbol", "threshold"],
                },
            },
        },
    }
