"""Shared fixtures for CAH tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from cah.config import Config
from tests.samples import (
    CLAUDE_ENTRIES,
    CLAUDE_SESSION_ID,
    COPILOT_EVENTS,
    COPILOT_SESSION_ID,
    write_jsonl,
)


@pytest.fixture
def claude_root(tmp_path: Path) -> Path:
    """A Claude projects directory holding one sample session."""
    root = tmp_path / ".claude" / "projects"
    write_jsonl(root / "-tmp-test-project" / f"{CLAUDE_SESSION_ID}.jsonl", CLAUDE_ENTRIES)
    return root


@pytest.fixture
def copilot_root(tmp_path: Path) -> Path:
    """A Copilot session-state directory holding one sample session."""
    root = tmp_path / ".copilot" / "session-state"
    write_jsonl(root / COPILOT_SESSION_ID / "events.jsonl", COPILOT_EVENTS)
    return root


@pytest.fixture
def claude_session_path(claude_root: Path) -> Path:
    return claude_root / "-tmp-test-project" / f"{CLAUDE_SESSION_ID}.jsonl"


@pytest.fixture
def copilot_session_path(copilot_root: Path) -> Path:
    return copilot_root / COPILOT_SESSION_ID / "events.jsonl"


@pytest.fixture
def test_config(claude_root: Path, copilot_root: Path) -> Config:
    """Config pointing at temporary test data."""
    return Config(claude_paths=(claude_root,), copilot_paths=(copilot_root,))
