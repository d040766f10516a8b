"""Public package surface for visimatch.

Highlights every other occurrence of the current selection in the visible
part of a set of buffers. Hosts build a ``Selection`` and call
``HighlightSession.recompute`` on each selection change.
"""

from __future__ import annotations

from .buffer import Buffer, detect_kind
from .config import ConfigError, MatchConfig, load_match_config
from .model import (
    SHAPE_BLOCK,
    SHAPE_LINES,
    SHAPE_SPAN,
    CandidateWindow,
    Match,
    Selection,
    TextPoint,
    TextRegion,
)
from .render import AnsiRenderer, HighlightRenderer, RecordingRenderer
from .session import STATE_IDLE, STATE_SELECTING, HighlightSession


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = [
    "AnsiRenderer",
    "Buffer",
    "CandidateWindow",
    "ConfigError",
    "HighlightRenderer",
    "HighlightSession",
    "Match",
    "MatchConfig",
    "RecordingRenderer",
    "SHAPE_BLOCK",
    "SHAPE_LINES",
    "SHAPE_SPAN",
    "STATE_IDLE",
    "STATE_SELECTING",
    "Selection",
    "TextPoint",
    "TextRegion",
    "detect_kind",
    "load_match_config",
    "main",
]
