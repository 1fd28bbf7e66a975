"""Turns file-watcher events into cache invalidations and change notices."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

from cah.data.discovery import session_id_for_path, source_for_path
from cah.data.parser import get_session_summary
from cah.models.sessions import ChangeKind, SessionChange

if TYPE_CHECKING:
    from pathlib import Path

    from cah.config import Config
    from cah.data.cache import SessionCache

logger = logging.getLogger(__name__)

type FileEvent = Literal["add", "change", "unlink"]

_CHANGE_KINDS: dict[str, ChangeKind] = {
    "add": ChangeKind.CREATED,
    "change": ChangeKind.UPDATED,
    "unlink": ChangeKind.DELETED,
}


class WatchService:
    """Consumes ``add``/``change``/``unlink`` events for session log files.

    The watching mechanism itself lives outside this package; callers feed
    each event to ``handle`` and broadcast the returned notice.
    """

    def __init__(self, cache: SessionCache, config: Config) -> None:
        self._cache = cache
        self._config = config

    def handle(self, event: FileEvent, path: Path) -> SessionChange | None:
        """Invalidate the affected session and describe the change.

        Returns None for paths outside the configured session roots or for
        unknown event kinds.
        """
        kind = _CHANGE_KINDS.get(event)
        if kind is None:
            logger.warning("Ignoring unknown file event %r for %s", event, path)
            return None

        source = source_for_path(self._config, path)
        if source is None:
            return None
        session_id = session_id_for_path(path, source)
        if not session_id:
            return None

        logger.info("File %s: %s (%s:%s)", event, path, source, session_id)
        self._cache.invalidate(source, session_id)

        summary = None
        if kind != ChangeKind.DELETED:
            detail = self._cache.get(source, session_id)
            if detail is not None:
                summary = get_session_summary(detail)

        return SessionChange(kind=kind, source=source, session_id=session_id, summary=summary)
