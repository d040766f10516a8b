"""Command-line front door for visimatch.

Loads a file, applies a selection given on the command line, and prints the
file with every other occurrence of the selected text highlighted, or a list
of match regions.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from .buffer import Buffer
from .config import ConfigError, load_match_config, save_config
from .model import SELECTION_SHAPES, SHAPE_SPAN, CandidateWindow, Selection, TextPoint
from .render import AnsiRenderer
from .session import HighlightSession


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _parse_point(text: str) -> TextPoint:
    line_text, _sep, column_text = text.partition(":")
    line = _positive_int(line_text)
    column = _positive_int(column_text) if column_text else 1
    return TextPoint(line, column)


def selection_range(value: str) -> tuple[TextPoint, TextPoint]:
    """argparse type for ``LINE[:COL][-LINE[:COL]]`` anchor/cursor pairs."""
    anchor_text, sep, cursor_text = value.partition("-")
    anchor = _parse_point(anchor_text.strip())
    cursor = _parse_point(cursor_text.strip()) if sep else anchor
    return anchor, cursor


def format_region(start: TextPoint, stop: TextPoint) -> str:
    return f"{start.line}:{start.column}-{stop.line}:{stop.column}"


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and print matches for the selection in one file."""
    parser = argparse.ArgumentParser(
        description="Highlight every other occurrence of a selection in a file."
    )
    parser.add_argument("path", help="File to scan.")
    parser.add_argument(
        "--select",
        required=True,
        type=selection_range,
        metavar="L[:C][-L[:C]]",
        help="Selection anchor and cursor, 1-based.",
    )
    parser.add_argument("--shape", choices=SELECTION_SHAPES, default=SHAPE_SPAN, help="Selection shape.")
    parser.add_argument("--top", type=_positive_int, default=None, help="First visible line (default: 1).")
    parser.add_argument("--bottom", type=_positive_int, default=None, help="Last visible line (default: last line).")
    parser.add_argument("--config", type=Path, default=None, help="Config file (default: user config dir).")
    parser.add_argument("--strict-spacing", action="store_true", help="Require whitespace to match exactly.")
    parser.add_argument("--save-config", action="store_true", help="Persist the effective config and continue.")
    parser.add_argument("--list", action="store_true", help="Print match regions instead of the file.")
    parser.add_argument("--no-color", action="store_true", help="Disable highlight escape sequences.")
    parser.add_argument("--verbose", action="store_true", help="Log engine diagnostics to stderr.")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    path = Path(args.path)
    if not path.is_file():
        raise SystemExit(f"Path not found: {path}")

    try:
        config = load_match_config(args.config)
        if args.strict_spacing:
            config = dataclasses.replace(config, strict_spacing=True)
    except ConfigError as exc:
        raise SystemExit(f"Invalid config: {exc}") from exc
    if args.save_config:
        save_config(config.to_mapping(), args.config)

    buffer = Buffer.from_path(path)
    top = args.top if args.top is not None else 1
    bottom = args.bottom if args.bottom is not None else len(buffer.lines)
    if bottom < top:
        raise SystemExit("--bottom must not be above --top")
    window = CandidateWindow(buffer=buffer, visible_top=top, visible_bottom=bottom)

    anchor, cursor = args.select
    selection = Selection.from_buffer(args.shape, anchor, cursor, buffer)
    renderer = AnsiRenderer(no_color=args.no_color)
    session = HighlightSession(config=config, renderer=renderer)
    matches = session.recompute(selection, window)

    if args.list:
        for match in matches:
            sys.stdout.write(format_region(match.region.start, match.region.stop) + "\n")
        return

    for line in renderer.render_lines(buffer):
        sys.stdout.write(line + "\n")


if __name__ == "__main__":
    main()
