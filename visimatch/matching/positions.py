"""Map flat offsets back to line/column points.

The flat text is the lines joined with a single ``"\\n"``. Offsets must be fed
in ascending order: the cursor only moves forward, so mapping a whole match
list costs one pass over the lines.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from ..model import TextPoint, TextRegion
from .chunked import FlatSpan


class OffsetCursor:
    """Forward-only cursor translating 1-based flat offsets to points."""

    def __init__(self, lines: Sequence[str]) -> None:
        self.lines = lines
        self.line_index = 0
        self.line_start = 0

    def point(self, offset: int) -> TextPoint:
        lines = self.lines
        if not lines:
            return TextPoint(1, 1)
        last_index = len(lines) - 1
        # The separator after a line maps to column len(line) + 1.
        while self.line_index < last_index and offset > self.line_start + len(lines[self.line_index]) + 1:
            self.line_start += len(lines[self.line_index]) + 1
            self.line_index += 1
        line_len = len(lines[self.line_index])
        column = max(1, min(offset - self.line_start, line_len + 1))
        return TextPoint(self.line_index + 1, column)


def map_spans(lines: Sequence[str], spans: Iterable[FlatSpan], line_offset: int = 0) -> list[TextRegion]:
    """Convert ascending flat spans into regions.

    ``line_offset`` is added to every line number, translating slice-relative
    lines back to whole-buffer lines.
    """
    cursor = OffsetCursor(lines)
    regions: list[TextRegion] = []
    for span in spans:
        start = cursor.point(span.start)
        stop = cursor.point(span.stop)
        if line_offset:
            start = TextPoint(start.line + line_offset, start.column)
            stop = TextPoint(stop.line + line_offset, stop.column)
        regions.append(TextRegion(start=start, stop=stop))
    return regions
