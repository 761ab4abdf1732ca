"""
Tool Base Classes (MCP-Aligned).

Every operation of a discovered agent is exposed as a Tool. A call
always completes with a ToolResult carrying one text block:

    {"content": [{"type": "text", "text": "..."}], "isError": true}

isError is present only on failure and is the one signal the host
reads to tell success from failure. Tools never raise to the host.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ContentBlock:
    """Text content block of a tool result."""

    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "text", "text": self.text}


@dataclass(frozen=True, slots=True)
class ToolAnnotations:
    """
    Advisory hints derived from the HTTP method of an operation.

    Attributes:
        title: Display title (the operationId when declared)
        read_only_hint: Safe methods (GET, HEAD, OPTIONS)
        destructive_hint: DELETE
        idempotent_hint: GET, PUT, DELETE
        open_world_hint: The tool reaches a remote host
    """

    title: str | None = None
    read_only_hint: bool = False
    destructive_hint: bool = True
    idempotent_hint: bool = False
    open_world_hint: bool = False

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}

        if self.title is not None:
            result["title"] = self.title
        if self.read_only_hint:
            result["readOnlyHint"] = True
        if not self.destructive_hint:
            result["destructiveHint"] = False
        if self.idempotent_hint:
            result["idempotentHint"] = True
        if self.open_world_hint:
            result["openWorldHint"] = True

        return result

@dataclass(frozen=True, slots=True)
class ToolResult:
    """
    Outcome of one tool call.

    Example:
        ToolResult.success('{\\n  "a": 1\\n}')
        ToolResult.error("HTTP Error 404: not found")
    """

    content: tuple[ContentBlock, ...]
    is_error: bool = False
    structured_content: dict[str, Any] | None = None

    @classmethod
    def success(cls, text: str, *, structured: dict[str, Any] | None = None) -> ToolResult:
        return cls(content=(ContentBlock(text),), structured_content=structured)

    @classmethod
    def error(cls, message: str, *, structured: dict[str, Any] | None = None) -> ToolResult:
        """
        Create an error result.

        The message is used verbatim as the text content, so callers
        decide the wording (e.g. "HTTP Error 500: ..." or "Error: ...").
        """
        return cls(content=(ContentBlock(message),), is_error=True, structured_content=structured)

    @property
    def text(self) -> str:
        """Text of the first content block."""
        return self.content[0].text if self.content else ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize as a tools/call result."""
        result: dict[str, Any] = {"content": [block.to_dict() for block in self.content]}

        if self.is_error:
            result["isError"] = True
        if self.structured_content is not None:
            result["structuredContent"] = self.structured_content

        return result


class Tool(ABC):
    """
    A callable exposed through tools/list and tools/call.

    Subclasses provide the name, description and input schema that are
    advertised, and execute() which must report failures in the result.
    """

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def description(self) -> str: ...

    @property
    @abstractmethod
    def input_schema(self) -> dict[str, Any]:
        """Object JSON Schema with properties and required."""
        ...

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations()

    @abstractmethod
    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        """
        Run the tool.

        Returns:
            ToolResult; failures set is_error instead of raising
        """
        ...

    def to_mcp_schema(self) -> dict[str, Any]:
        """Entry for the tools/list response."""
        schema: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }

        annotations = self.annotations.to_dict()
        if annotations:
            schema["annotations"] = annotations

        return schema

    def __repr__(self) -> str:
        return f"<Tool {self.name}>"
