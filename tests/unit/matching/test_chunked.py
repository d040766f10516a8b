"""Occurrence search tests for the direct and chunked paths.

Verifies non-overlapping left-to-right spans, chunk boundaries that never cut
a wildcard or escape pair, and identical results from both paths.
"""

from __future__ import annotations

import re
import unittest

from visimatch.matching.chunked import (
    FlatSpan,
    PatternOverloadError,
    chunked_search,
    direct_search,
    find_all,
    split_pattern,
)
from visimatch.matching.pattern import build_pattern


def _regex(*lines: str, strict_spacing: bool = False) -> re.Pattern[str]:
    pattern = build_pattern(lines, strict_spacing=strict_spacing)
    assert pattern is not None
    return pattern.regex()


class SplitPatternTests(unittest.TestCase):
    def test_chunk_extends_past_boundary_to_finish_wildcard(self) -> None:
        source = "a" * 99 + r"\s+" + "b" * 10

        chunks = split_pattern(source, chunk_size=100)

        self.assertEqual(chunks, ["a" * 99 + r"\s+", "b" * 10])

    def test_chunk_extends_past_boundary_to_finish_escape_pair(self) -> None:
        source = "a" * 99 + r"\." + "c"

        chunks = split_pattern(source, chunk_size=100)

        self.assertEqual(chunks, ["a" * 99 + r"\.", "c"])

    def test_chunks_reassemble_to_source(self) -> None:
        source = _regex("def f(x):", "    return x[0] * 2  # (twice)").pattern

        chunks = split_pattern(source, chunk_size=7)

        self.assertEqual("".join(chunks), source)
        for chunk in chunks:
            re.compile(chunk)


class FindAllTests(unittest.TestCase):
    def test_finds_every_occurrence_with_inclusive_one_based_offsets(self) -> None:
        spans = find_all("foo bar\nfoo bar\nbaz", _regex("foo bar"))

        self.assertEqual(spans, [FlatSpan(1, 7), FlatSpan(9, 15)])

    def test_occurrences_never_overlap(self) -> None:
        spans = find_all("aaaaa", re.compile("aa"))

        self.assertEqual(spans, [FlatSpan(1, 2), FlatSpan(3, 4)])

    def test_wildcard_spans_line_breaks(self) -> None:
        spans = find_all("x foo\n   bar y", _regex("foo bar"))

        self.assertEqual(spans, [FlatSpan(3, 12)])

    def test_empty_haystack_has_no_occurrences(self) -> None:
        self.assertEqual(find_all("", _regex("foo")), [])

    def test_direct_search_refuses_patterns_over_budget(self) -> None:
        with self.assertRaises(PatternOverloadError):
            direct_search("aaaaaaaaaa", re.compile("a" * 10), max_atoms=5)

    def test_overloaded_direct_path_falls_back_to_chunks(self) -> None:
        regex = _regex("foo bar baz")

        spans = find_all("foo bar baz, foo  bar\tbaz", regex, chunk_size=4, max_atoms=1)

        self.assertEqual(spans, [FlatSpan(1, 11), FlatSpan(14, 25)])

    def test_chunked_search_resumes_after_partial_prefix_match(self) -> None:
        haystack = "ab ab ac ab ac"
        regex = _regex("ab ac")

        found = chunked_search(haystack, regex, 0, chunk_size=2)

        self.assertEqual(found, (3, 8))

    def test_chunked_search_returns_none_without_first_chunk(self) -> None:
        self.assertIsNone(chunked_search("zzz zzz", _regex("ab ac"), 0, chunk_size=2))

    def test_chunked_and_direct_paths_agree(self) -> None:
        cases = [
            ("foo foo bar foo bar", _regex("foo bar")),
            ("ab ab ac ab ac ab\nac", _regex("ab ac")),
            ("x.y x.y\nx.y  x.y", _regex("x.y x.y")),
            ("a  b a b a  b", _regex("a  b", strict_spacing=True)),
            ("\n".join(["ab ab"] * 6), _regex("ab ab", "ab")),
            ("Foo Bar foo bar", re.compile(_regex("foo bar").pattern, re.IGNORECASE)),
        ]
        for haystack, regex in cases:
            with self.subTest(haystack=haystack, pattern=regex.pattern):
                direct = find_all(haystack, regex)
                chunked = find_all(haystack, regex, chunk_size=3, max_atoms=0)
                self.assertEqual(direct, chunked)
                self.assertTrue(direct)


if __name__ == "__main__":
    unittest.main()
