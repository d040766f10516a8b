"""Find every occurrence of a pattern in flat text, surviving pattern overload.

The direct path is a single ``re`` search per occurrence. Long patterns are
refused by the direct path with ``PatternOverloadError`` (as are engine
failures), and the scan falls back to matching the pattern in ~100 character
chunks, each anchored right after the previous one.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache

logger = logging.getLogger(__name__)

CHUNK_SIZE = 100
MAX_DIRECT_PATTERN_ATOMS = 2_000

# One pattern atom: the whitespace wildcard, an escape pair, or one character.
_ATOM_RE = re.compile(r"\\s\+|\\.|.", re.DOTALL)


class PatternOverloadError(RuntimeError):
    """The direct matching primitive cannot handle this pattern."""


@dataclass(frozen=True)
class FlatSpan:
    """Occurrence in flat text; 1-based, ``stop`` inclusive."""

    start: int
    stop: int


@lru_cache(maxsize=64)
def _atom_count(source: str) -> int:
    return len(_ATOM_RE.findall(source))


def split_pattern(source: str, chunk_size: int = CHUNK_SIZE) -> list[str]:
    """Split pattern source into chunks of about ``chunk_size`` characters.

    A chunk only ever ends on an atom boundary, so a wildcard token or an
    escape pair straddling the boundary extends the chunk.
    """
    chunks: list[str] = []
    current: list[str] = []
    length = 0
    for atom in _ATOM_RE.findall(source):
        current.append(atom)
        length += len(atom)
        if length >= chunk_size:
            chunks.append("".join(current))
            current = []
            length = 0
    if current:
        chunks.append("".join(current))
    return chunks


@lru_cache(maxsize=64)
def _compile_chunks(source: str, flags: int, chunk_size: int) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(chunk, flags) for chunk in split_pattern(source, chunk_size))


def direct_search(
    haystack: str,
    regex: re.Pattern[str],
    pos: int = 0,
    max_atoms: int = MAX_DIRECT_PATTERN_ATOMS,
) -> tuple[int, int] | None:
    """Single-pass search from 0-based ``pos``; returns a half-open span.

    Raises ``PatternOverloadError`` when the pattern exceeds the atom budget
    or the regex engine itself fails.
    """
    atoms = _atom_count(regex.pattern)
    if atoms > max_atoms:
        raise PatternOverloadError(f"pattern too complex ({atoms} atoms, limit {max_atoms})")
    try:
        found = regex.search(haystack, pos)
    except (re.error, OverflowError, RecursionError) as exc:
        raise PatternOverloadError(str(exc)) from exc
    if found is None:
        return None
    return found.start(), found.end()


def chunked_search(
    haystack: str,
    regex: re.Pattern[str],
    pos: int = 0,
    chunk_size: int = CHUNK_SIZE,
) -> tuple[int, int] | None:
    """Search chunk by chunk from 0-based ``pos``; returns a half-open span.

    The first chunk is searched freely; each later chunk must match exactly
    where the previous one ended. When a later chunk fails, the scan resumes
    one character past where the first chunk matched.
    """
    chunks = _compile_chunks(regex.pattern, regex.flags, chunk_size)
    if not chunks:
        return None
    head_re, tail = chunks[0], chunks[1:]
    while pos <= len(haystack):
        head = head_re.search(haystack, pos)
        if head is None:
            return None
        end = head.end()
        for chunk_re in tail:
            part = chunk_re.match(haystack, end)
            if part is None:
                break
            end = part.end()
        else:
            return head.start(), end
        pos = head.start() + 1
    return None


def find_all(
    haystack: str,
    regex: re.Pattern[str],
    chunk_size: int = CHUNK_SIZE,
    max_atoms: int = MAX_DIRECT_PATTERN_ATOMS,
) -> list[FlatSpan]:
    """Return every non-overlapping occurrence of ``regex`` left to right.

    Each search resumes one position past the previous occurrence. Once the
    direct path fails for this pattern, the rest of the scan stays chunked.
    """
    spans: list[FlatSpan] = []
    pos = 0
    use_chunks = False
    while pos <= len(haystack):
        if use_chunks:
            found = chunked_search(haystack, regex, pos, chunk_size)
        else:
            try:
                found = direct_search(haystack, regex, pos, max_atoms)
            except PatternOverloadError as exc:
                logger.debug("direct search failed, using chunked scan: %s", exc)
                use_chunks = True
                continue
        if found is None:
            break
        start, end = found
        spans.append(FlatSpan(start=start + 1, stop=end))
        pos = max(end, start + 1)
    return spans
