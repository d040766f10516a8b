"""Core value types: text points, regions, selections, windows, and matches.

Everything here is plain data. Lines and columns are 1-based and columns count
raw characters, not terminal display cells.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable

from .buffer import Buffer

SHAPE_SPAN = "span"
SHAPE_LINES = "lines"
SHAPE_BLOCK = "block"
SELECTION_SHAPES = (SHAPE_SPAN, SHAPE_LINES, SHAPE_BLOCK)


@dataclass(frozen=True, order=True)
class TextPoint:
    """One character position; ordering is document order."""

    line: int
    column: int


@dataclass(frozen=True)
class TextRegion:
    """Inclusive ``start``..``stop`` range of characters."""

    start: TextPoint
    stop: TextPoint

    @classmethod
    def between(cls, a: TextPoint, b: TextPoint) -> TextRegion:
        """Build a region from two points in either order."""
        return cls(start=min(a, b), stop=max(a, b))

    @property
    def line_count(self) -> int:
        return self.stop.line - self.start.line + 1


@dataclass(frozen=True)
class Match:
    region: TextRegion
    buffer: Hashable
    blockwise: bool = False


@dataclass(frozen=True)
class CandidateWindow:
    """A view onto a buffer that may be scanned for matches.

    ``visible_top`` and ``visible_bottom`` are the first and last visible
    1-based line numbers.
    """

    buffer: Buffer
    visible_top: int
    visible_bottom: int

    @classmethod
    def whole(cls, buffer: Buffer) -> CandidateWindow:
        """Window showing every line of ``buffer``."""
        return cls(buffer=buffer, visible_top=1, visible_bottom=max(1, len(buffer.lines)))


@dataclass(frozen=True)
class Selection:
    """The user's in-progress selection with its covered text.

    ``raw_lines`` holds the exact covered text, one entry per covered line.
    Block selections store only the covered column slice of each line.
    """

    shape: str
    anchor: TextPoint
    cursor: TextPoint
    source_buffer: Hashable
    raw_lines: tuple[str, ...]

    @property
    def region(self) -> TextRegion:
        """Normalized region in document order.

        Line selections cover whole lines, so the stop column is pushed past
        any real column. Block selections normalize both axes independently.
        """
        if self.shape == SHAPE_BLOCK:
            return TextRegion(
                start=TextPoint(
                    min(self.anchor.line, self.cursor.line),
                    min(self.anchor.column, self.cursor.column),
                ),
                stop=TextPoint(
                    max(self.anchor.line, self.cursor.line),
                    max(self.anchor.column, self.cursor.column),
                ),
            )
        region = TextRegion.between(self.anchor, self.cursor)
        if self.shape == SHAPE_LINES:
            last_len = len(self.raw_lines[-1]) if self.raw_lines else 0
            return TextRegion(
                start=TextPoint(region.start.line, 1),
                stop=TextPoint(region.stop.line, last_len + 1),
            )
        return region

    @property
    def line_count(self) -> int:
        return len(self.raw_lines)

    @property
    def text(self) -> str:
        """Covered text joined with newlines and trimmed."""
        return "\n".join(self.raw_lines).strip()

    @classmethod
    def from_buffer(cls, shape: str, anchor: TextPoint, cursor: TextPoint, buffer: Buffer) -> Selection:
        """Extract the covered text of ``buffer`` for a selection.

        Out-of-range lines and columns are clamped to the buffer content.
        """
        if shape not in SELECTION_SHAPES:
            raise ValueError(f"unknown selection shape: {shape!r}")
        lines = buffer.lines
        line_total = max(1, len(lines))
        anchor = TextPoint(max(1, min(anchor.line, line_total)), max(1, anchor.column))
        cursor = TextPoint(max(1, min(cursor.line, line_total)), max(1, cursor.column))

        def line_at(number: int) -> str:
            return lines[number - 1] if 0 < number <= len(lines) else ""

        if shape == SHAPE_BLOCK:
            first, last = sorted((anchor.line, cursor.line))
            left, right = sorted((anchor.column, cursor.column))
            raw = tuple(line_at(n)[left - 1 : right] for n in range(first, last + 1))
        elif shape == SHAPE_LINES:
            first, last = sorted((anchor.line, cursor.line))
            raw = tuple(line_at(n) for n in range(first, last + 1))
        else:
            start, stop = sorted((anchor, cursor))
            if start.line == stop.line:
                raw = (line_at(start.line)[start.column - 1 : stop.column],)
            else:
                middle = [line_at(n) for n in range(start.line + 1, stop.line)]
                raw = (
                    line_at(start.line)[start.column - 1 :],
                    *middle,
                    line_at(stop.line)[: stop.column],
                )
        return cls(shape=shape, anchor=anchor, cursor=cursor, source_buffer=buffer.id, raw_lines=raw)
