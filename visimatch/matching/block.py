"""Rectangular (block-wise) selection matching.

Two policies are supported:

``rectangle``
    Slide a window of the selection's height and width over the text and
    report it when every row equals the matching selection row, compared with
    surrounding whitespace trimmed.
``first-row``
    Treat the first selected row as a literal and report each occurrence as a
    single-row region, without requiring the rest of the rectangle to repeat.

Matching is always literal; whitespace runs are not collapsed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..model import TextPoint, TextRegion

BLOCK_POLICY_RECTANGLE = "rectangle"
BLOCK_POLICY_FIRST_ROW = "first-row"
BLOCK_POLICIES = (BLOCK_POLICY_RECTANGLE, BLOCK_POLICY_FIRST_ROW)


@dataclass(frozen=True)
class BlockPattern:
    """Normalized block corners (1-based, inclusive) and trimmed row texts."""

    top: int
    bottom: int
    left: int
    right: int
    rows: tuple[str, ...]

    @property
    def width(self) -> int:
        return self.right - self.left + 1

    @property
    def height(self) -> int:
        return len(self.rows)


def build_block_pattern(region: TextRegion, raw_rows: Sequence[str], max_width: int) -> BlockPattern | None:
    """Build a block pattern from a normalized region and its row slices.

    Returns ``None`` for blocks wider than ``max_width`` (measured as
    ``right - left``) and for blocks whose rows are all blank.
    """
    top, bottom = sorted((region.start.line, region.stop.line))
    left, right = sorted((region.start.column, region.stop.column))
    if right - left > max_width:
        return None
    rows = tuple(row.strip() for row in raw_rows)
    if not rows or not any(rows):
        return None
    return BlockPattern(top=top, bottom=bottom, left=left, right=right, rows=rows)


def _rows_match(lines: Sequence[str], top: int, col: int, block: BlockPattern) -> bool:
    width = block.width
    for offset, expected in enumerate(block.rows):
        if lines[top + offset][col : col + width].strip() != expected:
            return False
    return True


def find_rectangles(lines: Sequence[str], block: BlockPattern, line_offset: int = 0) -> list[TextRegion]:
    """Find full-rectangle repeats of ``block`` in ``lines``.

    Rectangles found on the same top line never overlap each other.
    ``line_offset`` translates slice-relative lines to buffer lines.
    """
    width = block.width
    height = block.height
    found: list[TextRegion] = []
    for top in range(len(lines) - height + 1):
        # Rows are trimmed before comparing, so any row may set the reach.
        longest = max(len(line) for line in lines[top : top + height])
        last_col = max(0, longest - width)
        col = 0
        while col <= last_col:
            if _rows_match(lines, top, col, block):
                found.append(
                    TextRegion(
                        start=TextPoint(top + 1 + line_offset, col + 1),
                        stop=TextPoint(top + height + line_offset, col + width),
                    )
                )
                col += width
            else:
                col += 1
    return found


def find_first_row(lines: Sequence[str], block: BlockPattern, line_offset: int = 0) -> list[TextRegion]:
    """Find every literal occurrence of the block's first row."""
    needle = block.rows[0]
    if not needle:
        return []
    found: list[TextRegion] = []
    for idx, line in enumerate(lines):
        line_number = idx + 1 + line_offset
        cursor = 0
        while True:
            hit = line.find(needle, cursor)
            if hit < 0:
                break
            found.append(
                TextRegion(
                    start=TextPoint(line_number, hit + 1),
                    stop=TextPoint(line_number, hit + len(needle)),
                )
            )
            cursor = hit + len(needle)
    return found


def find_blocks(
    lines: Sequence[str],
    block: BlockPattern,
    policy: str = BLOCK_POLICY_RECTANGLE,
    line_offset: int = 0,
) -> list[TextRegion]:
    """Dispatch to the configured block policy."""
    if policy == BLOCK_POLICY_FIRST_ROW:
        return find_first_row(lines, block, line_offset)
    if policy == BLOCK_POLICY_RECTANGLE:
        return find_rectangles(lines, block, line_offset)
    raise ValueError(f"unknown block policy: {policy!r}")
