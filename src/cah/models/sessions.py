"""Session-level models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

from cah.models.messages import Message


class SessionSource(StrEnum):
    """Tool that produced a session log."""

    CLAUDE = "claude"
    COPILOT = "copilot"


class ToolUsageSummary(BaseModel):
    """Per-tool call count and success rate within one session."""

    name: str
    count: int = 0
    success_rate: float = 0.0


class TokenStats(BaseModel):
    """Token totals and per-message series.

    The three series only have entries for messages that carried usage data,
    so they may be shorter than the message list.
    """

    total_input: int = 0
    total_output: int = 0
    total_cache_read: int = 0
    total_cache_creation: int = 0
    input_per_message: list[int] = Field(default_factory=list)
    output_per_message: list[int] = Field(default_factory=list)
    cumulative_tokens: list[int] = Field(default_factory=list)


class SessionStats(BaseModel):
    """Aggregated statistics for a session."""

    message_count: int = 0
    user_messages: int = 0
    assistant_messages: int = 0
    tokens: TokenStats | None = None
    tools: list[ToolUsageSummary] = Field(default_factory=list)
    duration: int = 0
    average_turn_duration: float | None = None


class SessionSummary(BaseModel):
    """Summary of a session for list views."""

    id: str
    source: SessionSource
    project: str = ""
    project_path: str = ""
    start_time: str
    last_activity: str
    message_count: int = 0
    total_tokens: int | None = None
    model: str | None = None


class SessionDetail(SessionSummary):
    """Full session detail including messages and statistics."""

    messages: list[Message] = Field(default_factory=list)
    stats: SessionStats = Field(default_factory=SessionStats)
    tool_usage: list[ToolUsageSummary] = Field(default_factory=list)


class ChangeKind(StrEnum):
    """What happened to a session log on disk."""

    CREATED = "session_created"
    UPDATED = "session_updated"
    DELETED = "session_deleted"


class SessionChange(BaseModel):
    """Notification emitted after a watched log file changes."""

    kind: ChangeKind
    source: SessionSource
    session_id: str
    summary: SessionSummary | None = None
