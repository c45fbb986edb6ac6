"""Response models for the advisor operations.

A ToolResult carries plain text content plus an error flag, so failures
travel through the normal response channel as readable explanations.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class TextContent(BaseModel):
    """A single text block of a tool result."""

    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Result of an advisor operation.

    Serialized with the ``isError`` key expected by tool hosts.
    """

    model_config = ConfigDict(populate_by_name=True)

    content: list[TextContent] = Field(default_factory=list)
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def text(cls, text: str) -> ToolResult:
        """Build a successful single-block result."""
        return cls(content=[TextContent(text=text)])

    @classmethod
    def error(cls, text: str) -> ToolResult:
        """Build an error result carrying a readable explanation."""
        return cls(content=[TextContent(text=text)], is_error=True)


class ToolDescriptor(BaseModel):
    """Name and description of an operation exposed to tool hosts."""

    name: str
    description: str
