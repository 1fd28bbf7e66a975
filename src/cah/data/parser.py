"""Source-aware dispatch to the Claude and Copilot session parsers."""

from __future__ import annotations

import logging
from pathlib import Path

from cah.data.claude_parser import parse_claude_session, summarize_claude_session
from cah.data.copilot_parser import parse_copilot_session, summarize_copilot_session
from cah.models.sessions import SessionDetail, SessionSource, SessionSummary

logger = logging.getLogger(__name__)


def parse_session_file(path: Path, source: SessionSource | str) -> SessionDetail | None:
    """Parse one session log into the canonical model.

    Returns None for unreadable or empty logs and for unknown sources.
    """
    match source:
        case SessionSource.CLAUDE:
            return parse_claude_session(path)
        case SessionSource.COPILOT:
            return parse_copilot_session(path)
        case _:
            logger.error("Unknown session source: %s", source)
            return None


def get_session_summary(detail: SessionDetail) -> SessionSummary:
    """Project a detail down to its listing fields."""
    match detail.source:
        case SessionSource.CLAUDE:
            return summarize_claude_session(detail)
        case SessionSource.COPILOT:
            return summarize_copilot_session(detail)
