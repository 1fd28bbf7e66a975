"""Discover Claude/Copilot session log files under the configured roots."""

from __future__ import annotations

import logging
from pathlib import Path

from cah.config import Config
from cah.models.sessions import SessionSource

logger = logging.getLogger(__name__)

_COPILOT_EVENTS_FILE = "events.jsonl"
_FALLBACK_MARKERS: tuple[tuple[str, SessionSource], ...] = (
    (".claude/projects", SessionSource.CLAUDE),
    (".copilot/session-state", SessionSource.COPILOT),
)


def find_session_files(config: Config, source: SessionSource) -> dict[str, Path]:
    """Map session id -> log file for one source.

    Rescans the filesystem on every call. Claude logs live at
    ``<root>/<encoded-project>/<session-id>.jsonl``; Copilot logs at
    ``<root>/<session-id>/events.jsonl``.
    """
    files: dict[str, Path] = {}
    for base_path in config.paths_for(source):
        if not base_path.is_dir():
            logger.info("%s sessions directory not found: %s", source.value.title(), base_path)
            continue
        try:
            if source == SessionSource.CLAUDE:
                _find_claude_session_files(base_path, files)
            else:
                _find_copilot_session_files(base_path, files)
        except OSError:
            logger.exception("Error scanning %s sessions at %s", source.value, base_path)
    return files


def _find_claude_session_files(base_path: Path, files: dict[str, Path]) -> None:
    for project_dir in sorted(base_path.iterdir()):
        if not project_dir.is_dir():
            continue
        for jsonl_path in sorted(project_dir.glob("*.jsonl")):
            files[jsonl_path.stem] = jsonl_path


def _find_copilot_session_files(base_path: Path, files: dict[str, Path]) -> None:
    for session_dir in sorted(base_path.iterdir()):
        if not session_dir.is_dir():
            continue
        events_file = session_dir / _COPILOT_EVENTS_FILE
        if events_file.is_file():
            files[session_dir.name] = events_file


class SessionDirectory:
    """Filesystem-backed session directory bound to a config."""

    def __init__(self, config: Config) -> None:
        self._config = config

    def find_session_files(self, source: SessionSource) -> dict[str, Path]:
        return find_session_files(self._config, source)


def source_for_path(config: Config, path: Path) -> SessionSource | None:
    """Work out which source a changed log file belongs to."""
    normalized = path.as_posix().replace("\\", "/")
    for source in SessionSource:
        for base_path in config.paths_for(source):
            if base_path.as_posix().replace("\\", "/") in normalized:
                return source
    for marker, source in _FALLBACK_MARKERS:
        if marker in normalized:
            return source
    return None


def session_id_for_path(path: Path, source: SessionSource) -> str:
    """Session id implied by a log file's location."""
    if source == SessionSource.CLAUDE:
        return path.stem
    return path.parent.name
