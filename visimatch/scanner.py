"""Scan candidate windows for matches and drop self-overlaps.

Only the visible lines of a window, padded by the selection's own height, are
scanned, so the cost of a pass follows the screen size and not the document
size. A match straddling the visible edge by up to the selection height is
still found.
"""

from __future__ import annotations

from typing import Iterable

from .matching.block import BLOCK_POLICY_RECTANGLE, BlockPattern, find_blocks
from .matching.chunked import find_all
from .matching.pattern import Pattern
from .matching.positions import map_spans
from .model import SHAPE_BLOCK, CandidateWindow, Match, Selection


def viewport_bounds(window: CandidateWindow, pad: int) -> tuple[int, int]:
    """Return the 1-based inclusive line range worth scanning in ``window``.

    The range is clamped to the buffer; it is empty (``last < first``) when
    the visible range lies entirely past the end of the buffer.
    """
    first = max(1, window.visible_top - pad)
    last = min(len(window.buffer.lines), window.visible_bottom + pad)
    return first, last


def scan_window(
    window: CandidateWindow,
    pattern: Pattern,
    selection_lines: int,
    case_insensitive: bool = False,
) -> list[Match]:
    """Find stream-wise pattern matches in the padded viewport of ``window``."""
    first, last = viewport_bounds(window, selection_lines)
    lines = window.buffer.line_slice(first, last)
    if not lines:
        return []
    spans = find_all("\n".join(lines), pattern.regex(case_insensitive))
    regions = map_spans(lines, spans, line_offset=first - 1)
    return [Match(region=region, buffer=window.buffer.id) for region in regions]


def scan_window_blocks(
    window: CandidateWindow,
    block: BlockPattern,
    policy: str = BLOCK_POLICY_RECTANGLE,
) -> list[Match]:
    """Find block matches in the padded viewport of ``window``."""
    first, last = viewport_bounds(window, block.height)
    lines = window.buffer.line_slice(first, last)
    if not lines:
        return []
    regions = find_blocks(lines, block, policy, line_offset=first - 1)
    return [Match(region=region, buffer=window.buffer.id, blockwise=True) for region in regions]


def overlaps_selection(match: Match, selection: Selection) -> bool:
    """Return whether ``match`` intersects the selection's own region.

    Matches in other buffers never overlap. Block selections intersect as
    rectangles; other shapes compare start and stop points in document order.
    """
    if match.buffer != selection.source_buffer:
        return False
    own = selection.region
    region = match.region
    if selection.shape == SHAPE_BLOCK:
        rows_overlap = region.start.line <= own.stop.line and region.stop.line >= own.start.line
        left = min(region.start.column, region.stop.column)
        right = max(region.start.column, region.stop.column)
        columns_overlap = left <= own.stop.column and right >= own.start.column
        return rows_overlap and columns_overlap
    starts_after = region.start > own.stop
    ends_before = region.stop < own.start
    return not (starts_after or ends_before)


def filter_overlaps(matches: Iterable[Match], selection: Selection) -> list[Match]:
    return [match for match in matches if not overlaps_selection(match, selection)]
