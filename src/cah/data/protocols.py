"""Protocol definitions for data access."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from cah.models.sessions import SessionDetail, SessionSource


class SessionDirectoryProtocol(Protocol):
    """Maps session ids to log files for a source."""

    def find_session_files(self, source: SessionSource) -> dict[str, Path]: ...


class SessionParser(Protocol):
    """Callable that turns a log file into a session detail."""

    def __call__(self, path: Path, source: SessionSource) -> SessionDetail | None: ...
