"""Parser for Claude Code session logs (``~/.claude/projects/<encoded>/<id>.jsonl``)."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

from cah.data.decoder import RawEvent, read_events
from cah.data.stats import (
    TokenAccumulator,
    ToolUsageCounter,
    as_dict,
    as_int,
    as_optional_str,
    as_str,
    count_roles,
    project_name_from_path,
    session_bounds,
)
from cah.models.messages import Message, MessageRole, MessageTokens, ToolCall
from cah.models.sessions import SessionDetail, SessionSource, SessionStats, SessionSummary

logger = logging.getLogger(__name__)

_DRIVE_PREFIX = re.compile(r"^([A-Z])--")
_ROLES = {role.value for role in MessageRole}


def decode_project_path(folder_name: str, sep: str = os.sep) -> str:
    """Reverse Claude's project folder encoding.

    ``-home-me-src-app`` becomes ``/home/me/src/app`` and ``E--git-App``
    becomes ``E:\\git\\App`` (with ``sep="\\"``). Every dash is treated as a
    separator, so paths that really contain dashes come back split, e.g.
    ``my-app`` decodes to ``my/app``.
    """
    decoded = _DRIVE_PREFIX.sub(lambda m: f"{m.group(1)}:{sep}", folder_name)
    return decoded.replace("-", sep)


def parse_claude_session(path: Path) -> SessionDetail | None:
    """Parse a Claude session log into a ``SessionDetail``.

    Returns None when the file is unreadable or holds no decodable entries.
    """
    try:
        entries = read_events(path)
        if not entries:
            return None
        return _build_detail(path, entries)
    except Exception:
        logger.exception("Error parsing Claude session file %s", path)
        return None


def summarize_claude_session(detail: SessionDetail) -> SessionSummary:
    return SessionSummary(
        id=detail.id,
        source=detail.source,
        project=detail.project,
        project_path=detail.project_path,
        start_time=detail.start_time,
        last_activity=detail.last_activity,
        message_count=detail.message_count,
        total_tokens=detail.total_tokens,
        model=detail.model,
    )


def _build_detail(path: Path, entries: list[RawEvent]) -> SessionDetail:
    session_id = as_str(entries[0].get("sessionId")) or path.stem
    project_path = decode_project_path(path.parent.name)

    messages: list[Message] = []
    tokens = TokenAccumulator()
    tools = ToolUsageCounter()
    turn_durations: list[int] = []
    model: str | None = None

    for entry in entries:
        entry_type = as_str(entry.get("type"))
        if entry_type == "system" and entry.get("subtype") == "turn_duration":
            duration = as_int(entry.get("durationMs"))
            if duration:
                turn_durations.append(duration)
            continue
        if entry_type == "file-history-snapshot":
            continue

        body = entry.get("message")
        if not isinstance(body, dict):
            continue

        role = _resolve_role(as_str(body.get("role")), entry_type)
        if role is None:
            continue

        blocks = _normalize_content(body.get("content"))
        tool_calls = _extract_tool_calls(blocks)
        message_model = as_optional_str(body.get("model"))
        if message_model and model is None:
            model = message_model

        usage = _parse_usage(body.get("usage"))
        if usage is not None:
            tokens.add(usage)

        for call in tool_calls:
            # No per-call success signal in this format.
            tools.record(call.name)

        messages.append(
            Message(
                id=as_str(entry.get("uuid")) or f"{session_id}:msg:{len(messages)}",
                parent_id=as_optional_str(entry.get("parentUuid")),
                role=role,
                content=_extract_text(blocks),
                timestamp=as_str(entry.get("timestamp")),
                model=message_model,
                tokens=usage,
                tool_calls=tool_calls or None,
            )
        )

    tool_usage = tools.summaries()
    user_count, assistant_count = count_roles(messages)
    start_time, last_activity = session_bounds(messages)

    stats = SessionStats(
        message_count=len(messages),
        user_messages=user_count,
        assistant_messages=assistant_count,
        tokens=tokens.to_stats(),
        tools=[summary.model_copy() for summary in tool_usage],
        duration=sum(turn_durations),
        average_turn_duration=(
            sum(turn_durations) / len(turn_durations) if turn_durations else None
        ),
    )

    return SessionDetail(
        id=session_id,
        source=SessionSource.CLAUDE,
        project=project_name_from_path(project_path),
        project_path=project_path,
        start_time=start_time,
        last_activity=last_activity,
        message_count=len(messages),
        total_tokens=tokens.total,
        model=model,
        messages=messages,
        stats=stats,
        tool_usage=tool_usage,
    )


def _resolve_role(message_role: str, entry_type: str) -> MessageRole | None:
    if message_role in _ROLES:
        return MessageRole(message_role)
    if entry_type in _ROLES:
        return MessageRole(entry_type)
    return None


def _normalize_content(content: object) -> list[dict[str, Any]]:
    if isinstance(content, str):
        return [{"type": "text", "text": content}]
    if not isinstance(content, list):
        return []
    blocks: list[dict[str, Any]] = []
    for block in content:
        if isinstance(block, str):
            blocks.append({"type": "text", "text": block})
        elif isinstance(block, dict):
            blocks.append(block)
    return blocks


def _extract_text(blocks: list[dict[str, Any]]) -> str:
    return "\n".join(
        as_str(block.get("text"))
        for block in blocks
        if block.get("type") == "text" and as_str(block.get("text"))
    )


def _extract_tool_calls(blocks: list[dict[str, Any]]) -> list[ToolCall]:
    calls: list[ToolCall] = []
    for block in blocks:
        if block.get("type") != "tool_use":
            continue
        tool_id = as_str(block.get("id"))
        name = as_str(block.get("name"))
        if not tool_id or not name:
            continue
        calls.append(ToolCall(id=tool_id, name=name, arguments=as_dict(block.get("input"))))
    return calls


def _parse_usage(usage: object) -> MessageTokens | None:
    if not isinstance(usage, dict):
        return None
    cache_read = usage.get("cache_read_input_tokens")
    cache_creation = usage.get("cache_creation_input_tokens")
    return MessageTokens(
        input=as_int(usage.get("input_tokens")),
        output=as_int(usage.get("output_tokens")),
        cache_read=as_int(cache_read) if cache_read is not None else None,
        cache_creation=as_int(cache_creation) if cache_creation is not None else None,
    )
