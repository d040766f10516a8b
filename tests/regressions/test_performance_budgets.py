"""Performance budget tests for long selections over large documents.

These tests use synthetic large inputs with conservative time budgets so
regressions are caught without depending on machine-specific microbenchmarks.
"""

from __future__ import annotations

import time
import unittest

from visimatch.buffer import Buffer
from visimatch.config import MatchConfig
from visimatch.matching.chunked import PatternOverloadError, direct_search, find_all
from visimatch.matching.pattern import build_pattern
from visimatch.model import SHAPE_LINES, CandidateWindow, Selection, TextPoint, TextRegion
from visimatch.session import HighlightSession

LINE = "abcdefghij" * 12
LINE_COUNT = 10_000
SELECTED_LINES = 50
# One selected block in flat text: 50 lines plus 49 separators.
SPAN_LENGTH = SELECTED_LINES * len(LINE) + SELECTED_LINES - 1


class PerformanceBudgetTests(unittest.TestCase):
    def test_overloaded_pattern_falls_back_to_chunks_within_budget(self) -> None:
        haystack = "\n".join([LINE] * LINE_COUNT)
        pattern = build_pattern([LINE] * SELECTED_LINES)
        assert pattern is not None
        regex = pattern.regex()

        with self.assertRaises(PatternOverloadError):
            direct_search(haystack, regex)

        start = time.perf_counter()
        spans = find_all(haystack, regex)
        elapsed = time.perf_counter() - start

        self.assertEqual(len(spans), LINE_COUNT // SELECTED_LINES)
        stride = SELECTED_LINES * (len(LINE) + 1)
        for index, span in enumerate(spans):
            self.assertEqual(span.start, index * stride + 1)
            self.assertEqual(span.stop, index * stride + SPAN_LENGTH)
        self.assertLess(elapsed, 2.0, f"chunked scan budget exceeded: {elapsed:.3f}s")

    def test_long_selection_recompute_budget(self) -> None:
        buffer = Buffer(id="big", lines=tuple([LINE] * LINE_COUNT))
        selection = Selection.from_buffer(SHAPE_LINES, TextPoint(1, 1), TextPoint(SELECTED_LINES, 1), buffer)
        session = HighlightSession(MatchConfig(max_selected_lines=60))

        start = time.perf_counter()
        matches = session.recompute(selection, CandidateWindow(buffer=buffer, visible_top=1, visible_bottom=60))
        elapsed = time.perf_counter() - start

        self.assertEqual(
            [match.region for match in matches],
            [TextRegion(TextPoint(51, 1), TextPoint(100, len(LINE)))],
        )
        self.assertLess(elapsed, 0.5, f"recompute budget exceeded: {elapsed:.3f}s")


if __name__ == "__main__":
    unittest.main()
