"""Matching package exports.

Pattern building, flat-text occurrence search with chunked fallback,
offset-to-point mapping, and block matching in one import surface.
"""

from __future__ import annotations

from .block import (
    BLOCK_POLICIES,
    BLOCK_POLICY_FIRST_ROW,
    BLOCK_POLICY_RECTANGLE,
    BlockPattern,
    build_block_pattern,
    find_blocks,
    find_first_row,
    find_rectangles,
)
from .chunked import (
    CHUNK_SIZE,
    MAX_DIRECT_PATTERN_ATOMS,
    FlatSpan,
    PatternOverloadError,
    chunked_search,
    direct_search,
    find_all,
    split_pattern,
)
from .pattern import WHITESPACE_TOKEN, Pattern, build_pattern
from .positions import OffsetCursor, map_spans

__all__ = [
    "BLOCK_POLICIES",
    "BLOCK_POLICY_FIRST_ROW",
    "BLOCK_POLICY_RECTANGLE",
    "BlockPattern",
    "CHUNK_SIZE",
    "FlatSpan",
    "MAX_DIRECT_PATTERN_ATOMS",
    "OffsetCursor",
    "Pattern",
    "PatternOverloadError",
    "WHITESPACE_TOKEN",
    "build_block_pattern",
    "build_pattern",
    "chunked_search",
    "direct_search",
    "find_all",
    "find_blocks",
    "find_first_row",
    "find_rectangles",
    "map_spans",
    "split_pattern",
]
