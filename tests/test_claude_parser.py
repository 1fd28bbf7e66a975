"""Tests for the Claude session parser."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from cah.data.claude_parser import (
    decode_project_path,
    parse_claude_session,
    summarize_claude_session,
)
from cah.models.messages import MessageRole
from cah.models.sessions import SessionSource, SessionSummary
from tests.samples import CLAUDE_ENTRIES, CLAUDE_SESSION_ID, write_jsonl


class TestDecodeProjectPath:
    def test_unix_path(self) -> None:
        assert decode_project_path("-Users-foo-src-myproject", sep="/") == "/Users/foo/src/myproject"

    def test_drive_letter(self) -> None:
        assert decode_project_path("E--git-MyProject", sep="\\") == "E:\\git\\MyProject"

    def test_lowercase_letter_is_not_a_drive(self) -> None:
        assert decode_project_path("e--git", sep="/") == "e//git"

    def test_dashes_in_names_are_lost(self) -> None:
        assert decode_project_path("-home-me-my-app", sep="/") == "/home/me/my/app"

    def test_default_separator(self) -> None:
        assert decode_project_path("-a-b") == f"{os.sep}a{os.sep}b"


class TestParseClaudeSession:
    def test_session_fields(self, claude_session_path: Path) -> None:
        detail = parse_claude_session(claude_session_path)
        assert detail is not None
        assert detail.id == CLAUDE_SESSION_ID
        assert detail.source == SessionSource.CLAUDE
        assert detail.project_path == os.sep + os.sep.join(["tmp", "test", "project"])
        assert detail.project == "project"
        assert detail.start_time == "2026-01-15T10:00:00.000Z"
        assert detail.last_activity == "2026-01-15T10:00:10.000Z"

    def test_messages(self, claude_session_path: Path) -> None:
        detail = parse_claude_session(claude_session_path)
        assert detail is not None
        assert detail.message_count == len(detail.messages) == 4
        assert [m.id for m in detail.messages] == ["uuid-001", "uuid-002", "uuid-003", "uuid-004"]
        assert [m.role for m in detail.messages] == [
            MessageRole.USER,
            MessageRole.ASSISTANT,
            MessageRole.USER,
            MessageRole.ASSISTANT,
        ]
        assert detail.messages[0].content == "Please help me fix a bug in main.py"
        assert detail.messages[0].parent_id is None
        assert detail.messages[1].parent_id == "uuid-001"
        # thinking blocks and tool results are not text
        assert detail.messages[1].content == "I'll look at the file."
        assert detail.messages[2].content == ""
        assert detail.messages[3].content == "Found it.\nFixing now."

    def test_tool_calls(self, claude_session_path: Path) -> None:
        detail = parse_claude_session(claude_session_path)
        assert detail is not None
        calls = detail.messages[3].tool_calls
        assert calls is not None
        assert [(c.id, c.name) for c in calls] == [("tool-002", "Edit"), ("tool-003", "Read")]
        assert calls[0].arguments["new"] == "x = 2"
        assert calls[1].arguments == {}
        assert detail.messages[0].tool_calls is None

    def test_tool_usage_always_succeeds(self, claude_session_path: Path) -> None:
        detail = parse_claude_session(claude_session_path)
        assert detail is not None
        usage = {t.name: t for t in detail.tool_usage}
        assert list(usage) == ["Read", "Edit"]
        assert usage["Read"].count == 2
        assert usage["Edit"].count == 1
        assert all(t.success_rate == 1.0 for t in detail.tool_usage)
        assert detail.stats.tools == detail.tool_usage

    def test_first_model_wins(self, claude_session_path: Path) -> None:
        detail = parse_claude_session(claude_session_path)
        assert detail is not None
        assert detail.model == "claude-opus-4-6"
        assert detail.messages[3].model == "claude-sonnet-4-6"
        assert detail.messages[0].model is None

    def test_token_stats(self, claude_session_path: Path) -> None:
        detail = parse_claude_session(claude_session_path)
        assert detail is not None
        tokens = detail.stats.tokens
        assert tokens is not None
        assert tokens.total_input == 300
        assert tokens.total_output == 130
        assert tokens.total_cache_read == 500
        assert tokens.total_cache_creation == 200
        assert tokens.input_per_message == [100, 200]
        assert tokens.output_per_message == [50, 80]
        assert tokens.cumulative_tokens == [150, 430]
        assert detail.total_tokens == 430
        assert detail.messages[1].tokens is not None
        assert detail.messages[1].tokens.cache_read == 500
        assert detail.messages[3].tokens is not None
        assert detail.messages[3].tokens.cache_read is None
        assert detail.messages[0].tokens is None

    def test_durations_and_counts(self, claude_session_path: Path) -> None:
        detail = parse_claude_session(claude_session_path)
        assert detail is not None
        assert detail.stats.message_count == 4
        assert detail.stats.user_messages == 2
        assert detail.stats.assistant_messages == 2
        assert detail.stats.duration == 10000
        assert detail.stats.average_turn_duration == 5000.0

    def test_no_turn_durations(self, tmp_path: Path) -> None:
        path = write_jsonl(tmp_path / "-p" / "s.jsonl", CLAUDE_ENTRIES[:3])
        detail = parse_claude_session(path)
        assert detail is not None
        assert detail.stats.duration == 0
        assert detail.stats.average_turn_duration is None

    def test_idempotent(self, claude_session_path: Path) -> None:
        first = parse_claude_session(claude_session_path)
        second = parse_claude_session(claude_session_path)
        assert first is not None
        assert first == second


class TestClaudeEdgeCases:
    def test_truncated_last_line(self, tmp_path: Path) -> None:
        entry = {
            "type": "assistant",
            "uuid": "a1",
            "parentUuid": None,
            "sessionId": "s1",
            "timestamp": "2024-01-01T00:00:00Z",
            "message": {
                "role": "assistant",
                "content": "hi",
                "model": "m1",
                "usage": {"input_tokens": 10, "output_tokens": 5},
            },
        }
        path = write_jsonl(tmp_path / "-proj" / "s1.jsonl", [entry], trailer='{"type":"user"')

        detail = parse_claude_session(path)
        assert detail is not None
        assert detail.id == "s1"
        assert len(detail.messages) == 1
        assert detail.messages[0].content == "hi"
        assert detail.total_tokens == 15
        assert detail.stats.tokens is not None
        assert detail.stats.tokens.cumulative_tokens == [15]
        assert detail.model == "m1"

    def test_session_id_falls_back_to_file_name(self, tmp_path: Path) -> None:
        entry = {"type": "user", "uuid": "u1", "message": {"role": "user", "content": "x"}}
        path = write_jsonl(tmp_path / "-proj" / "fallback-id.jsonl", [entry])
        detail = parse_claude_session(path)
        assert detail is not None
        assert detail.id == "fallback-id"

    def test_usage_only_counted_for_messages_that_carry_it(self, tmp_path: Path) -> None:
        entries = [
            {"type": "user", "uuid": "u1", "message": {"role": "user", "content": "a"}},
            {
                "type": "assistant",
                "uuid": "a1",
                "message": {"role": "assistant", "content": "b", "usage": {"input_tokens": 3}},
            },
            {"type": "user", "uuid": "u2", "message": {"role": "user", "content": "c"}},
            {
                "type": "assistant",
                "uuid": "a2",
                "message": {
                    "role": "assistant",
                    "content": "d",
                    "usage": {"input_tokens": 2, "output_tokens": 4},
                },
            },
        ]
        detail = parse_claude_session(write_jsonl(tmp_path / "-p" / "s.jsonl", entries))
        assert detail is not None
        assert detail.stats.tokens is not None
        assert len(detail.messages) == 4
        assert detail.stats.tokens.cumulative_tokens == [3, 9]
        assert len(detail.stats.tokens.input_per_message) == 2

    def test_session_without_usage_has_zeroed_token_block(self, tmp_path: Path) -> None:
        entry = {"type": "user", "uuid": "u1", "message": {"role": "user", "content": "x"}}
        detail = parse_claude_session(write_jsonl(tmp_path / "-p" / "s.jsonl", [entry]))
        assert detail is not None
        assert detail.stats.tokens is not None
        assert detail.stats.tokens.cumulative_tokens == []
        assert detail.total_tokens == 0

    def test_entries_without_message_are_skipped(self, tmp_path: Path) -> None:
        entries = [
            {"type": "summary", "summary": "did things", "leafUuid": "x"},
            {"type": "system", "subtype": "local_command", "content": "ls"},
            {"type": "user", "uuid": "u1", "message": "not a dict"},
            {"type": "user", "uuid": "u2", "message": {"role": "user", "content": "kept"}},
        ]
        detail = parse_claude_session(write_jsonl(tmp_path / "-p" / "s.jsonl", entries))
        assert detail is not None
        assert [m.id for m in detail.messages] == ["u2"]

    def test_tool_use_requires_id_and_name(self, tmp_path: Path) -> None:
        entry = {
            "type": "assistant",
            "uuid": "a1",
            "message": {
                "role": "assistant",
                "content": [
                    {"type": "tool_use", "id": "", "name": "Read"},
                    {"type": "tool_use", "id": "t1"},
                    {"type": "tool_use", "id": "t2", "name": "Bash", "input": "not a dict"},
                ],
            },
        }
        detail = parse_claude_session(write_jsonl(tmp_path / "-p" / "s.jsonl", [entry]))
        assert detail is not None
        calls = detail.messages[0].tool_calls
        assert calls is not None
        assert [(c.id, c.name, c.arguments) for c in calls] == [("t2", "Bash", {})]
        assert [t.name for t in detail.tool_usage] == ["Bash"]

    def test_malformed_field_types_do_not_crash(self, tmp_path: Path) -> None:
        entry = {
            "type": "assistant",
            "uuid": 123,
            "timestamp": 456,
            "message": {
                "role": {"bad": "shape"},
                "model": None,
                "content": ["ok", 7],
                "usage": "bad-usage",
            },
        }
        detail = parse_claude_session(write_jsonl(tmp_path / "-p" / "bad.jsonl", [entry]))
        assert detail is not None
        msg = detail.messages[0]
        assert msg.id == "bad:msg:0"
        assert msg.role == MessageRole.ASSISTANT
        assert msg.content == "ok"
        assert msg.tokens is None
        assert detail.model is None

    def test_empty_file_is_no_session(self, tmp_path: Path) -> None:
        path = tmp_path / "-p" / "empty.jsonl"
        path.parent.mkdir()
        path.write_text("", encoding="utf-8")
        assert parse_claude_session(path) is None

    def test_all_lines_malformed_is_no_session(self, tmp_path: Path) -> None:
        path = tmp_path / "-p" / "junk.jsonl"
        path.parent.mkdir()
        path.write_text("{oops\nnope\n", encoding="utf-8")
        assert parse_claude_session(path) is None

    def test_missing_file_is_logged_not_raised(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        assert parse_claude_session(tmp_path / "missing.jsonl") is None
        assert "Error parsing Claude session file" in caplog.text

    def test_only_snapshots_gives_empty_session(self, tmp_path: Path) -> None:
        entries = [{"type": "file-history-snapshot", "messageId": "x"}]
        detail = parse_claude_session(write_jsonl(tmp_path / "-p" / "snap.jsonl", entries))
        assert detail is not None
        assert detail.messages == []
        assert detail.message_count == 0
        assert detail.start_time == detail.last_activity

    def test_line_separator_inside_text(self, tmp_path: Path) -> None:
        entries = [
            {
                "type": "user",
                "uuid": "u1",
                "sessionId": "s1",
                "timestamp": "2024-01-01T00:00:00Z",
                "message": {"role": "user", "content": "a\u2028b\u2029c\x85d"},
            },
            {
                "type": "user",
                "uuid": "u2",
                "sessionId": "s1",
                "timestamp": "2024-01-01T00:00:01Z",
                "message": {"role": "user", "content": "next"},
            },
        ]
        path = tmp_path / "-proj" / "s1.jsonl"
        path.parent.mkdir(parents=True)
        text = "\n".join(json.dumps(e, ensure_ascii=False) for e in entries) + "\n"
        path.write_text(text, encoding="utf-8")

        detail = parse_claude_session(path)
        assert detail is not None
        assert [m.id for m in detail.messages] == ["u1", "u2"]
        assert detail.messages[0].content == "a\u2028b\u2029c\x85d"

    def test_tail_cut_inside_multibyte_character(self, tmp_path: Path) -> None:
        good = {
            "type": "user",
            "uuid": "u1",
            "sessionId": "s1",
            "timestamp": "2024-01-01T00:00:00Z",
            "message": {"role": "user", "content": "first"},
        }
        partial = json.dumps(
            {"type": "user", "uuid": "u2", "message": {"content": "café"}},
            ensure_ascii=False,
        ).encode("utf-8")
        cut = partial[: partial.index("é".encode("utf-8")) + 1]
        path = tmp_path / "-proj" / "s1.jsonl"
        path.parent.mkdir(parents=True)
        path.write_bytes(json.dumps(good).encode("utf-8") + b"\n" + cut)

        detail = parse_claude_session(path)
        assert detail is not None
        assert [m.id for m in detail.messages] == ["u1"]


def test_summarize_claude_session(claude_session_path: Path) -> None:
    detail = parse_claude_session(claude_session_path)
    assert detail is not None
    summary = summarize_claude_session(detail)
    assert type(summary) is SessionSummary
    assert summary.id == detail.id
    assert summary.total_tokens == 430
    assert summary.model == "claude-opus-4-6"
    assert summary.message_count == 4
