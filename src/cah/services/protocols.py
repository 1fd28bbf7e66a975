"""Protocol definitions for services."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from result import Result

from cah.models.messages import Message
from cah.models.sessions import SessionDetail, SessionSource, SessionStats, SessionSummary


class SessionServiceProtocol(Protocol):
    """Interface for session operations."""

    def list_sessions(
        self, source: SessionSource | None = None
    ) -> Result[list[SessionSummary], str]: ...

    def get_session_detail(
        self, source: SessionSource, session_id: str
    ) -> Result[SessionDetail, str]: ...

    def get_session_messages(
        self,
        source: SessionSource,
        session_id: str,
        *,
        offset: int = 0,
        limit: int = 50,
    ) -> Result[list[Message], str]: ...

    def get_session_stats(
        self, source: SessionSource, session_id: str
    ) -> Result[SessionStats, str]: ...

    def delete_session(self, source: SessionSource, session_id: str) -> Result[Path, str]: ...


class ExportServiceProtocol(Protocol):
    """Interface for export operations."""

    def export_session(
        self, source: SessionSource, session_id: str, fmt: str = "json"
    ) -> Result[str, str]: ...
