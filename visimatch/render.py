"""Highlight renderers.

A renderer receives the filtered matches of each buffer and explicit clears.
``RecordingRenderer`` keeps them in memory; ``AnsiRenderer`` paints them
onto buffer text for a terminal.
"""

from __future__ import annotations

import re
from typing import Hashable, Protocol, Sequence, runtime_checkable

from .buffer import Buffer
from .model import Match

MATCH_START_SGR = "\033[7m"
MATCH_END_SGR = "\033[27m"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


@runtime_checkable
class HighlightRenderer(Protocol):
    """Receives match sets from a highlight session."""

    def render(self, buffer_id: Hashable, matches: Sequence[Match]) -> None: ...

    def clear(self, buffer_id: Hashable) -> None: ...


class RecordingRenderer:
    """Keep the current marks per buffer and a log of calls."""

    def __init__(self) -> None:
        self.marks: dict[Hashable, list[Match]] = {}
        self.calls: list[tuple[str, Hashable]] = []

    def render(self, buffer_id: Hashable, matches: Sequence[Match]) -> None:
        self.calls.append(("render", buffer_id))
        self.marks.setdefault(buffer_id, []).extend(matches)

    def clear(self, buffer_id: Hashable) -> None:
        self.calls.append(("clear", buffer_id))
        self.marks.pop(buffer_id, None)


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source
    return _CONTROL_RE.sub(lambda found: f"\\x{ord(found.group(0)):02x}", source)


def match_columns_on_line(match: Match, line_number: int, line_length: int) -> tuple[int, int] | None:
    """Return the 0-based half-open column span ``match`` covers on a line.

    Stream-wise matches cover the rest of their first line, whole middle
    lines, and the head of their last line. Block-wise matches cover the same
    columns on every row.
    """
    region = match.region
    if line_number < region.start.line or line_number > region.stop.line:
        return None
    if match.blockwise:
        start = region.start.column - 1
        end = region.stop.column
    else:
        start = region.start.column - 1 if line_number == region.start.line else 0
        end = region.stop.column if line_number == region.stop.line else line_length
    start = max(0, min(start, line_length))
    end = max(start, min(end, line_length))
    if end <= start:
        return None
    return start, end


def highlight_line(text: str, spans: Sequence[tuple[int, int]]) -> str:
    """Wrap column spans of a plain line in reverse-video SGR.

    Overlapping or touching spans are merged. Control bytes are escaped
    segment by segment so span columns stay aligned with the raw text.
    """
    merged: list[list[int]] = []
    for start, end in sorted(spans):
        if merged and start <= merged[-1][1]:
            merged[-1][1] = max(merged[-1][1], end)
        else:
            merged.append([start, end])

    out: list[str] = []
    cursor = 0
    for start, end in merged:
        out.append(sanitize_terminal_text(text[cursor:start]))
        out.append(MATCH_START_SGR)
        out.append(sanitize_terminal_text(text[start:end]))
        out.append(MATCH_END_SGR)
        cursor = end
    out.append(sanitize_terminal_text(text[cursor:]))
    return "".join(out)


class AnsiRenderer:
    """Paint matches onto buffer lines for terminal output."""

    def __init__(self, no_color: bool = False) -> None:
        self.no_color = no_color
        self.marks: dict[Hashable, list[Match]] = {}

    def render(self, buffer_id: Hashable, matches: Sequence[Match]) -> None:
        self.marks.setdefault(buffer_id, []).extend(matches)

    def clear(self, buffer_id: Hashable) -> None:
        self.marks.pop(buffer_id, None)

    def render_lines(self, buffer: Buffer) -> list[str]:
        """Return the buffer's lines with its current marks applied."""
        matches = self.marks.get(buffer.id, [])
        if self.no_color or not matches:
            return [sanitize_terminal_text(line) for line in buffer.lines]

        by_line: dict[int, list[tuple[int, int]]] = {}
        for match in matches:
            for line_number in range(match.region.start.line, match.region.stop.line + 1):
                if line_number > len(buffer.lines):
                    break
                span = match_columns_on_line(match, line_number, len(buffer.lines[line_number - 1]))
                if span is not None:
                    by_line.setdefault(line_number, []).append(span)

        out: list[str] = []
        for idx, line in enumerate(buffer.lines):
            spans = by_line.get(idx + 1)
            out.append(highlight_line(line, spans) if spans else sanitize_terminal_text(line))
        return out
