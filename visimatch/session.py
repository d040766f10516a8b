"""Selection/highlight session: the engine's entry point for a host.

The host calls ``recompute`` on every selection or cursor change. Each call
clears the previous marks, applies the size gates, scans the candidate
windows, drops self-overlaps, and hands the result to the renderer. Nothing
is diffed or kept between passes besides the latest selection and matches.
"""

from __future__ import annotations

import logging
from typing import Hashable, Iterable

from .config import MatchConfig
from .matching.block import build_block_pattern
from .matching.pattern import build_pattern
from .model import SHAPE_BLOCK, CandidateWindow, Match, Selection
from .render import HighlightRenderer
from .scanner import filter_overlaps, scan_window, scan_window_blocks
from .windows import resolve_windows

logger = logging.getLogger(__name__)

STATE_IDLE = "idle"
STATE_SELECTING = "selecting"


class HighlightSession:
    """Own the active selection, its match set, and the rendered marks."""

    def __init__(self, config: MatchConfig | None = None, renderer: HighlightRenderer | None = None) -> None:
        self.config = config if config is not None else MatchConfig()
        self.renderer = renderer
        self.state = STATE_IDLE
        self._selection: Selection | None = None
        self._matches: tuple[Match, ...] = ()
        self._rendered: dict[Hashable, None] = {}

    @property
    def selection(self) -> Selection | None:
        return self._selection

    @property
    def matches(self) -> tuple[Match, ...]:
        return self._matches

    def accepts(self, selection: Selection) -> bool:
        """Apply the character and line gates to ``selection``."""
        if selection.line_count > self.config.max_selected_lines:
            return False
        return len(selection.text) >= self.config.min_selected_characters

    def _clear_marks(self) -> None:
        if self.renderer is not None:
            for buffer_id in self._rendered:
                self.renderer.clear(buffer_id)
        self._rendered.clear()
        self._matches = ()

    def clear(self) -> None:
        """Drop every mark and return to idle (the host left selecting mode)."""
        self._clear_marks()
        self._selection = None
        self.state = STATE_IDLE

    def recompute(
        self,
        selection: Selection | None,
        current: CandidateWindow,
        open_windows: Iterable[CandidateWindow] = (),
    ) -> tuple[Match, ...]:
        """Recompute all matches for ``selection``.

        ``current`` is the window holding the selection and ``open_windows``
        the other windows the host has open. A ``None`` selection means the
        host is not in a selecting mode.
        """
        if selection is None:
            self.clear()
            return ()

        self._clear_marks()
        self.state = STATE_SELECTING
        self._selection = selection
        if not self.accepts(selection):
            logger.debug(
                "selection gated: %d lines, %d characters",
                selection.line_count,
                len(selection.text),
            )
            return ()

        windows = resolve_windows(self.config.buffers, current, open_windows)
        if selection.shape == SHAPE_BLOCK:
            found = self._find_blocks(selection, windows)
        else:
            found = self._find_stream(selection, windows, current.buffer.kind)

        # A buffer shown in two windows yields the same match twice.
        unique = dict.fromkeys(filter_overlaps(found, selection))
        self._matches = tuple(unique)
        logger.debug("%d matches across %d windows", len(self._matches), len(windows))
        self._render()
        return self._matches

    def _find_stream(self, selection: Selection, windows: list[CandidateWindow], selection_kind: str) -> list[Match]:
        pattern = build_pattern(selection.raw_lines, self.config.strict_spacing)
        if pattern is None:
            return []
        found: list[Match] = []
        for window in windows:
            case_insensitive = self.config.is_case_insensitive(window.buffer.kind, selection_kind)
            found.extend(scan_window(window, pattern, selection.line_count, case_insensitive))
        return found

    def _find_blocks(self, selection: Selection, windows: list[CandidateWindow]) -> list[Match]:
        block = build_block_pattern(selection.region, selection.raw_lines, self.config.max_block_width)
        if block is None:
            return []
        found: list[Match] = []
        for window in windows:
            found.extend(scan_window_blocks(window, block, self.config.block_policy))
        return found

    def _render(self) -> None:
        if self.renderer is None:
            return
        by_buffer: dict[Hashable, list[Match]] = {}
        for match in self._matches:
            by_buffer.setdefault(match.buffer, []).append(match)
        for buffer_id, matches in by_buffer.items():
            self.renderer.render(buffer_id, matches)
            self._rendered[buffer_id] = None
