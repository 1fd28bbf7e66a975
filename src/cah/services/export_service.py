"""Export service — CSV/JSON export of normalized sessions."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from result import Err, Ok, Result

if TYPE_CHECKING:
    from cah.models.messages import Message
    from cah.models.sessions import SessionDetail, SessionSource
    from cah.services.session_service import SessionService

EXPORT_FORMATS = ("csv", "json", "summary")

_CSV_HEADERS = (
    "timestamp",
    "role",
    "content",
    "input_tokens",
    "output_tokens",
    "cache_read",
    "cache_creation",
    "tool_name",
    "tool_success",
)


class ExportService:
    """Service for exporting session data."""

    def __init__(self, session_service: SessionService) -> None:
        self._sessions = session_service

    def export_session(
        self, source: SessionSource, session_id: str, fmt: str = "json"
    ) -> Result[str, str]:
        """Export a session in one of ``EXPORT_FORMATS``."""
        match fmt:
            case "csv":
                return self.export_session_csv(source, session_id)
            case "json":
                return self.export_session_json(source, session_id)
            case "summary":
                return self.export_session_summary_json(source, session_id)
            case _:
                return Err(f"Invalid format {fmt!r}. Must be one of: {', '.join(EXPORT_FORMATS)}")

    def export_session_csv(self, source: SessionSource, session_id: str) -> Result[str, str]:
        """Export session messages as CSV, one row per message."""
        detail_result = self._sessions.get_session_detail(source, session_id)
        if isinstance(detail_result, Err):
            return detail_result
        return Ok(session_to_csv(detail_result.ok_value))

    def export_session_json(self, source: SessionSource, session_id: str) -> Result[str, str]:
        """Export the full session as JSON."""
        detail_result = self._sessions.get_session_detail(source, session_id)
        if isinstance(detail_result, Err):
            return detail_result

        detail = detail_result.ok_value
        return Ok(json.dumps(detail.model_dump(exclude_none=True), indent=2, default=str))

    def export_session_summary_json(
        self, source: SessionSource, session_id: str
    ) -> Result[str, str]:
        """Export header fields, stats and tool usage without the messages."""
        detail_result = self._sessions.get_session_detail(source, session_id)
        if isinstance(detail_result, Err):
            return detail_result

        detail = detail_result.ok_value
        summary = detail.model_dump(exclude={"messages"}, exclude_none=True)
        summary["session_id"] = summary.pop("id")
        return Ok(json.dumps(summary, indent=2, default=str))


def session_to_csv(detail: SessionDetail) -> str:
    lines = [",".join(_CSV_HEADERS)]
    for msg in detail.messages:
        lines.append(",".join(_csv_row(msg)))
    return "\n".join(lines)


def _csv_row(msg: Message) -> list[str]:
    tokens = msg.tokens
    tool_name = ""
    if msg.tool_calls:
        tool_name = msg.tool_calls[0].name
    elif msg.tool_result is not None:
        tool_name = msg.tool_result.tool_call_id
    tool_success = ""
    if msg.tool_result is not None:
        tool_success = "true" if msg.tool_result.success else "false"

    return [
        msg.timestamp,
        str(msg.role),
        _escape_csv(msg.content),
        str(tokens.input if tokens else 0),
        str(tokens.output if tokens else 0),
        str((tokens.cache_read or 0) if tokens else 0),
        str((tokens.cache_creation or 0) if tokens else 0),
        tool_name,
        tool_success,
    ]


def _escape_csv(value: str) -> str:
    escaped = value.replace("\n", " ").replace('"', '""')
    if "," in escaped or '"' in escaped:
        return f'"{escaped}"'
    return escaped
