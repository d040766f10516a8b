"""In-memory document buffers and document-kind detection.

A ``Buffer`` stands in for an editor buffer: an identity, its lines without
terminators, and a document-kind tag used by window policies and the
case-insensitivity rule. Kinds are detected from file names with Pygments.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Hashable

DEFAULT_KIND = "text"
KIND_CACHE_MAX = 256

_PYGMENTS_READY = False
_PYGMENTS_AVAILABLE = False
_PYGMENTS_GET_LEXER_FOR_FILENAME = None


def read_text(path: Path) -> str:
    """Read text using tolerant encoding fallback order.

    Attempts UTF-8, UTF-8 with BOM, then latin-1; as a final fallback decodes
    raw bytes with UTF-8 replacement semantics.
    """
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def split_lines(text: str) -> tuple[str, ...]:
    """Split on line breaks only (``\\n``, ``\\r\\n``, ``\\r``).

    Form feeds, NEL and other Unicode separators stay inside their line, so
    line numbers agree with the flat text the matcher joins with ``\\n``.
    A trailing line break does not start an extra line.
    """
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    if len(lines) > 1 and not lines[-1]:
        lines.pop()
    return tuple(lines)


def _ensure_pygments_loaded() -> bool:
    """Lazily import and cache the Pygments lexer lookup."""
    global _PYGMENTS_READY
    global _PYGMENTS_AVAILABLE
    global _PYGMENTS_GET_LEXER_FOR_FILENAME

    if _PYGMENTS_READY:
        return _PYGMENTS_AVAILABLE

    _PYGMENTS_READY = True
    try:
        from pygments.lexers import get_lexer_for_filename
    except ImportError:
        _PYGMENTS_AVAILABLE = False
        return False

    _PYGMENTS_GET_LEXER_FOR_FILENAME = get_lexer_for_filename
    _PYGMENTS_AVAILABLE = True
    return True


@lru_cache(maxsize=KIND_CACHE_MAX)
def _kind_for_name(name: str) -> str:
    if not _ensure_pygments_loaded():
        return DEFAULT_KIND
    try:
        assert _PYGMENTS_GET_LEXER_FOR_FILENAME is not None
        lexer = _PYGMENTS_GET_LEXER_FOR_FILENAME(name)
    except Exception:
        return DEFAULT_KIND
    aliases = getattr(lexer, "aliases", None) or [DEFAULT_KIND]
    return str(aliases[0])


def detect_kind(path: Path) -> str:
    """Return a document-kind tag for ``path``.

    The tag is the first alias of the Pygments lexer registered for the file
    name (``python``, ``markdown``, ...). Unknown names map to ``"text"``.
    """
    return _kind_for_name(path.name)


@dataclass(frozen=True)
class Buffer:
    id: Hashable
    lines: tuple[str, ...]
    kind: str = DEFAULT_KIND
    path: Path | None = None

    @classmethod
    def from_text(cls, buffer_id: Hashable, text: str, kind: str = DEFAULT_KIND) -> Buffer:
        """Split ``text`` into lines; an empty text still has one empty line."""
        return cls(id=buffer_id, lines=split_lines(text), kind=kind)

    @classmethod
    def from_path(cls, path: Path, kind: str | None = None) -> Buffer:
        """Load a file, detecting its kind from the name unless given."""
        resolved = path.resolve()
        text = read_text(resolved)
        return cls(
            id=str(resolved),
            lines=split_lines(text),
            kind=kind if kind is not None else detect_kind(resolved),
            path=resolved,
        )

    def line_slice(self, first: int, last: int) -> tuple[str, ...]:
        """Return lines ``first..last`` (1-based, inclusive), clamped to content."""
        first = max(1, first)
        last = min(len(self.lines), last)
        if last < first:
            return ()
        return self.lines[first - 1 : last]
