"""Buffer loading and document-kind detection tests."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest import mock

from visimatch import buffer as buffer_module
from visimatch.buffer import KIND_CACHE_MAX, Buffer, detect_kind, read_text, split_lines
from visimatch.config import MatchConfig
from visimatch.model import SHAPE_LINES, CandidateWindow, Selection, TextPoint, TextRegion
from visimatch.session import HighlightSession


class ReadTextTests(unittest.TestCase):
    def test_latin1_file_is_decoded(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "legacy.txt"
            path.write_bytes("caf\xe9\n".encode("latin-1"))

            self.assertEqual(read_text(path), "caf\xe9\n")

    def test_utf8_bom_is_tolerated(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bom.txt"
            path.write_bytes(b"\xef\xbb\xbfhello\n")

            self.assertTrue(read_text(path).endswith("hello\n"))


class DetectKindTests(unittest.TestCase):
    def test_known_extensions(self) -> None:
        self.assertEqual(detect_kind(Path("module.py")), "python")
        self.assertEqual(detect_kind(Path("README.md")), "markdown")

    def test_unknown_extension_is_text(self) -> None:
        self.assertEqual(detect_kind(Path("data.unknownext")), "text")

    def test_lookups_are_cached_per_name_with_a_bound(self) -> None:
        self.assertTrue(buffer_module._ensure_pygments_loaded())
        buffer_module._kind_for_name.cache_clear()
        self.addCleanup(buffer_module._kind_for_name.cache_clear)
        lookup = mock.Mock(return_value=SimpleNamespace(aliases=["rst", "restructuredtext"]))

        with mock.patch.object(buffer_module, "_PYGMENTS_GET_LEXER_FOR_FILENAME", lookup):
            self.assertEqual(detect_kind(Path("docs/notes.rst")), "rst")
            self.assertEqual(detect_kind(Path("other/notes.rst")), "rst")

        lookup.assert_called_once_with("notes.rst")
        self.assertEqual(buffer_module._kind_for_name.cache_info().maxsize, KIND_CACHE_MAX)


class SplitLinesTests(unittest.TestCase):
    def test_only_line_breaks_split(self) -> None:
        self.assertEqual(split_lines("a\x0cb\nc\x85d e\x1cf"), ("a\x0cb", "c\x85d e\x1cf"))

    def test_crlf_and_cr_are_line_breaks(self) -> None:
        self.assertEqual(split_lines("a\r\nb\rc\n"), ("a", "b", "c"))

    def test_trailing_break_and_empty_text(self) -> None:
        self.assertEqual(split_lines(""), ("",))
        self.assertEqual(split_lines("\n"), ("",))
        self.assertEqual(split_lines("a\n\n"), ("a", ""))


class BufferTests(unittest.TestCase):
    def test_from_text_splits_lines(self) -> None:
        buffer = Buffer.from_text("doc", "one\ntwo\r\nthree\n")

        self.assertEqual(buffer.lines, ("one", "two", "three"))
        self.assertEqual(buffer.kind, "text")

    def test_empty_text_has_one_line(self) -> None:
        self.assertEqual(Buffer.from_text("doc", "").lines, ("",))

    def test_from_path_detects_kind_and_identity(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "script.py"
            path.write_text("import os\nprint(os.sep)\n", encoding="utf-8")

            buffer = Buffer.from_path(path)

            self.assertEqual(buffer.kind, "python")
            self.assertEqual(buffer.id, str(path.resolve()))
            self.assertEqual(buffer.path, path.resolve())
            self.assertEqual(buffer.lines, ("import os", "print(os.sep)"))
            self.assertEqual(Buffer.from_path(path, kind="text").kind, "text")

    def test_form_feed_keeps_line_numbers_aligned(self) -> None:
        buffer = Buffer.from_text("doc", "alpha\x0cbeta\nneedle here\nneedle here")
        selection = Selection.from_buffer(SHAPE_LINES, TextPoint(2, 1), TextPoint(2, 1), buffer)

        matches = HighlightSession(MatchConfig()).recompute(selection, CandidateWindow.whole(buffer))

        self.assertEqual(len(buffer.lines), 3)
        self.assertEqual(selection.raw_lines, ("needle here",))
        self.assertEqual([match.region for match in matches], [TextRegion(TextPoint(3, 1), TextPoint(3, 11))])

    def test_latin1_next_line_byte_stays_inside_its_line(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "legacy.txt"
            path.write_bytes(b"caf\xe9 \x85 ok\nline two\n")

            buffer = Buffer.from_path(path)

            self.assertEqual(buffer.lines, ("caf\xe9 \x85 ok", "line two"))

    def test_line_slice_is_clamped(self) -> None:
        buffer = Buffer.from_text("doc", "a\nb\nc")

        self.assertEqual(buffer.line_slice(0, 2), ("a", "b"))
        self.assertEqual(buffer.line_slice(2, 10), ("b", "c"))
        self.assertEqual(buffer.line_slice(5, 8), ())


if __name__ == "__main__":
    unittest.main()
