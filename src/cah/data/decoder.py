"""Line-delimited JSON event decoding shared by the source parsers."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

type RawEvent = dict[str, Any]


def decode_lines(text: str, *, origin: str = "<memory>") -> list[RawEvent]:
    """Decode JSONL text into event records.

    Lines that are blank, not valid JSON, or not a JSON object are dropped.
    A log that is still being written usually ends in a truncated line, so a
    bad line never fails the whole file.
    """
    events: list[RawEvent] = []
    for line_num, line in enumerate(text.split("\n"), 1):
        line = line.strip()
        if not line:
            continue
        try:
            raw = json.loads(line)
        except json.JSONDecodeError:
            logger.debug("Skipping invalid JSON at %s:%d", origin, line_num)
            continue
        if not isinstance(raw, dict):
            logger.debug("Skipping non-object JSON at %s:%d", origin, line_num)
            continue
        events.append(raw)
    return events


def read_events(path: Path) -> list[RawEvent]:
    """Read and decode a JSONL log file.

    Invalid UTF-8 bytes are replaced, so a tail cut mid-character only
    spoils its own line.

    Raises:
        OSError: The file cannot be read.
    """
    with open(path, encoding="utf-8", errors="replace") as file:
        text = file.read()
    return decode_lines(text, origin=str(path))
