"""Message-level models for normalized session data."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class MessageRole(StrEnum):
    """Canonical speaker of a message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    TOOL = "tool"


class MessageTokens(BaseModel):
    """Token usage reported for a single message."""

    input: int = 0
    output: int = 0
    cache_read: int | None = None
    cache_creation: int | None = None


class ToolCall(BaseModel):
    """A model-issued request to run a tool."""

    id: str
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class ToolResult(BaseModel):
    """Outcome of a tool call, joined to the call by id."""

    tool_call_id: str
    success: bool = True
    content: str = ""


class Message(BaseModel):
    """A normalized message in log order."""

    id: str
    parent_id: str | None = None
    role: MessageRole
    content: str = ""
    timestamp: str = ""
    model: str | None = None
    tokens: MessageTokens | None = None
    tool_calls: list[ToolCall] | None = None
    tool_result: ToolResult | None = None
