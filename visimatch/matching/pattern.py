"""Turn selected text into a literal search pattern.

Special characters are escaped so the pattern matches literally. Unless strict
spacing is requested, every whitespace run becomes a token matching one or
more whitespace characters of any kind, line breaks included.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Sequence

WHITESPACE_TOKEN = r"\s+"
_WHITESPACE_RUN_RE = re.compile(r"\s+")


@dataclass
class Pattern:
    """Escaped pattern source plus lazily compiled matchers.

    The case-insensitive variant is compiled on first use and reused for every
    window scanned with the same pattern.
    """

    source: str
    text: str
    _compiled: dict[bool, re.Pattern[str]] = field(default_factory=dict, repr=False, compare=False)

    def regex(self, case_insensitive: bool = False) -> re.Pattern[str]:
        compiled = self._compiled.get(case_insensitive)
        if compiled is None:
            compiled = re.compile(self.source, re.IGNORECASE if case_insensitive else 0)
            self._compiled[case_insensitive] = compiled
        return compiled


def build_pattern(raw_lines: Sequence[str], strict_spacing: bool = False) -> Pattern | None:
    """Build a pattern from selected lines.

    Returns ``None`` when the selection is blank after trimming, so callers
    skip the search instead of matching everything.
    """
    text = "\n".join(raw_lines).strip()
    if not text:
        return None
    if strict_spacing:
        source = re.escape(text)
    else:
        source = WHITESPACE_TOKEN.join(re.escape(piece) for piece in _WHITESPACE_RUN_RE.split(text))
    return Pattern(source=source, text=text)
