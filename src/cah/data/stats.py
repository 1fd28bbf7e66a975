"""Statistics accumulation and value coercion shared by the source parsers."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from cah.models.messages import Message, MessageRole, MessageTokens
from cah.models.sessions import TokenStats, ToolUsageSummary


@dataclass
class _ToolTally:
    count: int = 0
    successes: int = 0


@dataclass
class ToolUsageCounter:
    """Per-tool attempt and success counts, kept in first-seen order."""

    _tallies: dict[str, _ToolTally] = field(default_factory=dict)

    def record(self, name: str, *, success: bool = True) -> None:
        tally = self._tallies.setdefault(name, _ToolTally())
        tally.count += 1
        if success:
            tally.successes += 1

    def summaries(self) -> list[ToolUsageSummary]:
        return [
            ToolUsageSummary(
                name=name,
                count=tally.count,
                success_rate=tally.successes / tally.count if tally.count > 0 else 0.0,
            )
            for name, tally in self._tallies.items()
        ]


@dataclass
class TokenAccumulator:
    """Running token totals plus the per-message series.

    Only messages that carried usage data append to the series.
    """

    total_input: int = 0
    total_output: int = 0
    total_cache_read: int = 0
    total_cache_creation: int = 0
    input_per_message: list[int] = field(default_factory=list)
    output_per_message: list[int] = field(default_factory=list)
    cumulative_tokens: list[int] = field(default_factory=list)
    _running: int = field(default=0, init=False, repr=False)

    def add(self, tokens: MessageTokens) -> None:
        self.total_input += tokens.input
        self.total_output += tokens.output
        self.total_cache_read += tokens.cache_read or 0
        self.total_cache_creation += tokens.cache_creation or 0
        self.input_per_message.append(tokens.input)
        self.output_per_message.append(tokens.output)
        self._running += tokens.input + tokens.output
        self.cumulative_tokens.append(self._running)

    @property
    def total(self) -> int:
        return self.total_input + self.total_output

    def to_stats(self) -> TokenStats:
        return TokenStats(
            total_input=self.total_input,
            total_output=self.total_output,
            total_cache_read=self.total_cache_read,
            total_cache_creation=self.total_cache_creation,
            input_per_message=list(self.input_per_message),
            output_per_message=list(self.output_per_message),
            cumulative_tokens=list(self.cumulative_tokens),
        )


def count_roles(messages: Sequence[Message]) -> tuple[int, int]:
    """Return ``(user_messages, assistant_messages)``."""
    users = sum(1 for m in messages if m.role == MessageRole.USER)
    assistants = sum(1 for m in messages if m.role == MessageRole.ASSISTANT)
    return users, assistants


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z``."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def timestamp_delta_ms(start: str, end: str) -> int:
    """Milliseconds from ``start`` to ``end``; 0 when either is unparsable."""
    start_dt = parse_timestamp(start)
    end_dt = parse_timestamp(end)
    if start_dt is None or end_dt is None:
        return 0
    return max(int((end_dt - start_dt).total_seconds() * 1000), 0)


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def session_bounds(messages: Sequence[Message]) -> tuple[str, str]:
    """Return ``(start_time, last_activity)`` from the first and last messages.

    An empty session falls back to the current time. ``last_activity`` never
    precedes ``start_time``.
    """
    start_time = (messages[0].timestamp if messages else "") or utc_now_iso()
    last_activity = (messages[-1].timestamp if messages else "") or start_time
    start_dt = parse_timestamp(start_time)
    last_dt = parse_timestamp(last_activity)
    if start_dt is not None and last_dt is not None and last_dt < start_dt:
        last_activity = start_time
    return start_time, last_activity


def project_name_from_path(project_path: str) -> str:
    """Last component of a project path, using either separator style."""
    parts = re.split(r"[\\/]", project_path.rstrip("\\/"))
    return parts[-1] if parts else ""


def as_str(value: object) -> str:
    return value if isinstance(value, str) else ""


def as_optional_str(value: object) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def as_dict(value: object) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_int(val: object) -> int:
    if isinstance(val, bool):
        return int(val)
    if isinstance(val, int):
        return val
    if isinstance(val, float):
        return int(val)
    if isinstance(val, str):
        try:
            return int(float(val))
        except ValueError:
            return 0
    return 0
