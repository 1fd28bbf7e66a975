"""In-memory cache of parsed sessions keyed by (source, session id)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cah.data.parser import parse_session_file

if TYPE_CHECKING:
    from pathlib import Path

    from cah.data.protocols import SessionDirectoryProtocol, SessionParser
    from cah.models.sessions import SessionDetail, SessionSource

logger = logging.getLogger(__name__)

type CacheKey = tuple[str, str]


class SessionCache:
    """Lazily populated session cache.

    Entries live until ``invalidate``/``clear``; there is no TTL or size bound,
    so freshness depends on the file watcher reporting every change. Two
    concurrent misses for the same key may both parse; the last store wins.
    """

    def __init__(
        self,
        directory: SessionDirectoryProtocol,
        parse: SessionParser = parse_session_file,
    ) -> None:
        self._directory = directory
        self._parse = parse
        self._entries: dict[CacheKey, SessionDetail] = {}

    @staticmethod
    def key(source: SessionSource, session_id: str) -> CacheKey:
        return (str(source), session_id)

    def get(self, source: SessionSource, session_id: str) -> SessionDetail | None:
        """Return the cached session, parsing it from disk on a miss.

        Returns None when the directory has no file for the id or the file
        does not parse.
        """
        detail = self._entries.get(self.key(source, session_id))
        if detail is not None:
            return detail

        file_path = self._directory.find_session_files(source).get(session_id)
        if file_path is None:
            return None
        return self.load(source, session_id, file_path)

    def load(self, source: SessionSource, session_id: str, file_path: Path) -> SessionDetail | None:
        """Return the cached session, parsing ``file_path`` on a miss."""
        cache_key = self.key(source, session_id)
        detail = self._entries.get(cache_key)
        if detail is not None:
            return detail

        detail = self._parse(file_path, source)
        if detail is not None:
            self._entries[cache_key] = detail
        return detail

    def peek(self, source: SessionSource, session_id: str) -> SessionDetail | None:
        return self._entries.get(self.key(source, session_id))

    def put(self, source: SessionSource, session_id: str, detail: SessionDetail) -> None:
        self._entries[self.key(source, session_id)] = detail

    def invalidate(self, source: SessionSource, session_id: str) -> None:
        """Drop a session so the next ``get`` re-parses it."""
        if self._entries.pop(self.key(source, session_id), None) is not None:
            logger.debug("Invalidated cached session %s:%s", source, session_id)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
