"""Parser for Copilot CLI session logs (``~/.copilot/session-state/<id>/events.jsonl``)."""

from __future__ import annotations

import logging
from pathlib import Path

from cah.data.decoder import RawEvent, read_events
from cah.data.stats import (
    ToolUsageCounter,
    as_dict,
    as_optional_str,
    as_str,
    count_roles,
    project_name_from_path,
    session_bounds,
    timestamp_delta_ms,
)
from cah.models.messages import Message, MessageRole, ToolCall, ToolResult
from cah.models.sessions import SessionDetail, SessionSource, SessionStats, SessionSummary

logger = logging.getLogger(__name__)


def parse_copilot_session(path: Path) -> SessionDetail | None:
    """Parse a Copilot ``events.jsonl`` log into a ``SessionDetail``.

    Returns None when the file is unreadable or holds no decodable events.
    """
    try:
        events = read_events(path)
        if not events:
            return None
        return _build_detail(path, events)
    except Exception:
        logger.exception("Error parsing Copilot session file %s", path)
        return None


def summarize_copilot_session(detail: SessionDetail) -> SessionSummary:
    return SessionSummary(
        id=detail.id,
        source=detail.source,
        project=detail.project,
        project_path=detail.project_path,
        start_time=detail.start_time,
        last_activity=detail.last_activity,
        message_count=detail.message_count,
        model=detail.model,
    )


def _build_detail(path: Path, events: list[RawEvent]) -> SessionDetail:
    start_data = next(
        (as_dict(e.get("data")) for e in events if e.get("type") == "session.start"),
        {},
    )
    session_id = as_str(start_data.get("sessionId")) or path.parent.name
    project_path = as_str(as_dict(start_data.get("context")).get("cwd")) or str(path.parent)

    # Results are indexed before any message references them.
    results_by_call_id: dict[str, ToolResult] = {}
    tools = ToolUsageCounter()
    model: str | None = None

    for event in events:
        event_type = event.get("type")
        data = as_dict(event.get("data"))
        if event_type == "tool.execution_complete":
            call_id = as_str(data.get("toolCallId"))
            if not call_id:
                continue
            success = data.get("success")
            results_by_call_id[call_id] = ToolResult(
                tool_call_id=call_id,
                success=success if isinstance(success, bool) else True,
                content=as_str(as_dict(data.get("result")).get("content")),
            )
            tools.record(as_str(data.get("toolName")) or "unknown", success=success is not False)
        elif event_type == "session.model_change":
            new_model = as_optional_str(data.get("newModel"))
            if new_model:
                model = new_model

    messages: list[Message] = []
    for event in events:
        message = _event_to_message(event, results_by_call_id, model, len(messages), session_id)
        if message is not None:
            messages.append(message)

    tool_usage = tools.summaries()
    user_count, assistant_count = count_roles(messages)
    start_time, last_activity = session_bounds(messages)

    duration = 0
    if len(messages) >= 2:
        duration = timestamp_delta_ms(messages[0].timestamp, messages[-1].timestamp)

    stats = SessionStats(
        message_count=len(messages),
        user_messages=user_count,
        assistant_messages=assistant_count,
        tools=[summary.model_copy() for summary in tool_usage],
        duration=duration,
    )

    return SessionDetail(
        id=session_id,
        source=SessionSource.COPILOT,
        project=project_name_from_path(project_path),
        project_path=project_path,
        start_time=start_time,
        last_activity=last_activity,
        message_count=len(messages),
        model=model,
        messages=messages,
        stats=stats,
        tool_usage=tool_usage,
    )


def _event_to_message(
    event: RawEvent,
    results_by_call_id: dict[str, ToolResult],
    model: str | None,
    seq: int,
    session_id: str,
) -> Message | None:
    event_type = as_str(event.get("type"))
    data = as_dict(event.get("data"))
    base = {
        "id": as_str(event.get("id")) or f"{session_id}:msg:{seq}",
        "parent_id": as_optional_str(event.get("parentId")),
        "timestamp": as_str(event.get("timestamp")),
    }

    match event_type:
        case "user.message":
            content = as_str(data.get("content")) or as_str(data.get("transformedContent"))
            return Message(role=MessageRole.USER, content=content, **base)
        case "assistant.message":
            tool_calls = _tool_requests(data.get("toolRequests"))
            return Message(
                role=MessageRole.ASSISTANT,
                content=as_str(data.get("reasoningText")),
                model=model,
                tool_calls=tool_calls or None,
                **base,
            )
        case "tool.execution_complete":
            result = results_by_call_id.get(as_str(data.get("toolCallId")))
            if result is None:
                return None
            return Message(
                role=MessageRole.TOOL,
                content=result.content,
                tool_result=result,
                **base,
            )
        case "session.error":
            error_type = as_str(data.get("errorType")) or "Unknown"
            content = f"Error: {error_type} - {as_str(data.get('message'))}"
            return Message(role=MessageRole.SYSTEM, content=content, **base)
        case _:
            return None


def _tool_requests(value: object) -> list[ToolCall]:
    if not isinstance(value, list):
        return []
    calls: list[ToolCall] = []
    for request in value:
        if not isinstance(request, dict):
            continue
        call_id = as_str(request.get("toolCallId"))
        name = as_str(request.get("name"))
        if not call_id or not name:
            continue
        calls.append(ToolCall(id=call_id, name=name, arguments=as_dict(request.get("arguments"))))
    return calls
