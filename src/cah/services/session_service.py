"""Session service — listing and lookups over the session cache."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from result import Err, Ok, Result

from cah.data.parser import get_session_summary
from cah.data.stats import parse_timestamp
from cah.models.sessions import SessionSource

if TYPE_CHECKING:
    from pathlib import Path

    from cah.data.cache import SessionCache
    from cah.data.protocols import SessionDirectoryProtocol
    from cah.models.messages import Message
    from cah.models.sessions import SessionDetail, SessionStats, SessionSummary

logger = logging.getLogger(__name__)


class SessionService:
    """Service for session queries."""

    def __init__(self, cache: SessionCache, directory: SessionDirectoryProtocol) -> None:
        self._cache = cache
        self._directory = directory

    def list_sessions(
        self, source: SessionSource | None = None
    ) -> Result[list[SessionSummary], str]:
        """List sessions from one source, or all when ``source`` is None.

        Returns:
            Ok with summaries ordered by most recent activity first.
        """
        sources = [source] if source is not None else list(SessionSource)
        sessions: list[SessionSummary] = []
        try:
            for src in sources:
                for session_id, file_path in self._directory.find_session_files(src).items():
                    detail = self._cache.load(src, session_id, file_path)
                    if detail is not None:
                        sessions.append(get_session_summary(detail))
        except Exception as exc:
            logger.exception("Failed to list sessions")
            return Err(f"Failed to list sessions: {exc}")

        sessions.sort(key=_activity_sort_key, reverse=True)
        return Ok(sessions)

    def get_session_detail(
        self, source: SessionSource, session_id: str
    ) -> Result[SessionDetail, str]:
        """Get full session detail.

        Returns:
            Ok with SessionDetail or Err if not found.
        """
        detail = self._cache.get(source, session_id)
        if detail is None:
            return Err(f"Session {source}:{session_id} not found")
        return Ok(detail)

    def get_session_messages(
        self,
        source: SessionSource,
        session_id: str,
        *,
        offset: int = 0,
        limit: int = 50,
    ) -> Result[list[Message], str]:
        """Get one page of a session's messages."""
        detail_result = self.get_session_detail(source, session_id)
        if isinstance(detail_result, Err):
            return detail_result

        start = max(offset, 0)
        end = start + max(limit, 0)
        return Ok(detail_result.ok_value.messages[start:end])

    def get_session_stats(
        self, source: SessionSource, session_id: str
    ) -> Result[SessionStats, str]:
        detail_result = self.get_session_detail(source, session_id)
        if isinstance(detail_result, Err):
            return detail_result
        return Ok(detail_result.ok_value.stats)

    def delete_session(self, source: SessionSource, session_id: str) -> Result[Path, str]:
        """Delete a session's log file and drop it from the cache."""
        file_path = self._directory.find_session_files(source).get(session_id)
        if file_path is None:
            return Err(f"Session {source}:{session_id} not found")
        try:
            file_path.unlink()
        except OSError as exc:
            logger.exception("Failed to delete session file %s", file_path)
            return Err(f"Failed to delete session file: {exc}")
        self._cache.invalidate(source, session_id)
        logger.info("Deleted session file: %s", file_path)
        return Ok(file_path)


def _activity_sort_key(summary: SessionSummary) -> float:
    parsed = parse_timestamp(summary.last_activity)
    return parsed.timestamp() if parsed is not None else 0.0
