"""Configuration for CAH."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from cah.models.sessions import SessionSource


def _default_claude_paths() -> tuple[Path, ...]:
    return (Path.home() / ".claude" / "projects",)


def _default_copilot_paths() -> tuple[Path, ...]:
    return (Path.home() / ".copilot" / "session-state",)


def _parse_path_list(value: str | None, default: tuple[Path, ...]) -> tuple[Path, ...]:
    """Split a comma-separated path list, falling back to ``default`` when blank."""
    if not value or not value.strip():
        return default
    return tuple(Path(part.strip()) for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    claude_paths: tuple[Path, ...] = field(default_factory=_default_claude_paths)
    copilot_paths: tuple[Path, ...] = field(default_factory=_default_copilot_paths)
    host: str = "localhost"
    port: int = 3000
    watch_enabled: bool = True
    watch_debounce_ms: int = 500

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Config:
        """Build a config from ``CLAUDE_PATHS``, ``COPILOT_PATHS``, ``PORT`` etc."""
        env = os.environ if environ is None else environ
        return cls(
            claude_paths=_parse_path_list(env.get("CLAUDE_PATHS"), _default_claude_paths()),
            copilot_paths=_parse_path_list(env.get("COPILOT_PATHS"), _default_copilot_paths()),
            host=env.get("HOST") or "localhost",
            port=int(env.get("PORT") or 3000),
            watch_enabled=env.get("WATCH_ENABLED") != "false",
            watch_debounce_ms=int(env.get("WATCH_DEBOUNCE_MS") or 500),
        )

    def paths_for(self, source: SessionSource) -> tuple[Path, ...]:
        if source == SessionSource.CLAUDE:
            return self.claude_paths
        return self.copilot_paths
