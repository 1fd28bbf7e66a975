"""Pydantic models for CAH."""

from cah.models.messages import Message, MessageRole, MessageTokens, ToolCall, ToolResult
from cah.models.sessions import (
    ChangeKind,
    SessionChange,
    SessionDetail,
    SessionSource,
    SessionStats,
    SessionSummary,
    TokenStats,
    ToolUsageSummary,
)

__all__ = [
    "ChangeKind",
    "Message",
    "MessageRole",
    "MessageTokens",
    "SessionChange",
    "SessionDetail",
    "SessionSource",
    "SessionStats",
    "SessionSummary",
    "TokenStats",
    "ToolCall",
    "ToolResult",
    "ToolUsageSummary",
]
