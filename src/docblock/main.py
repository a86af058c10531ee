# docblock/main.py
"""
docblock Command Line Entry Point
=================================

Simulates a line break at a position of a source file and prints (or writes
back) the result, continuing the documentation block when the position is
inside one.

Start-up sequence:
1) Environment Loading: reads ~/.config/docblock/.env early, so variables such
   as DOCBLOCK_TRACE and DOCBLOCK_CONFIG are visible.
2) Configuration & Logging: loads the layered config and initializes logging.
3) Buffer: loads the file into a `TextBuffer` and places the cursor.
4) Run: drives `DocBlockHelper` (or `LineBreakCounter` for repeated breaks)
   on an asyncio event loop.

Usage:
    docblock FILE LINE COLUMN [--language ID] [--in-place] [--explain]
             [--repeat N] [--config PATH]

Lines and columns are 0-based. Exit status: 0 on success, 2 on usage errors,
1 on I/O errors.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from dotenv import load_dotenv

from docblock.core.CommentFormats import FormatCatalog
from docblock.core.DocBlockHelper import DocBlockHelper
from docblock.core.LineBreakCounter import LineBreakCounter
from docblock.core.Positions import Position
from docblock.core.TextBuffer import TextBuffer
from docblock.utils.logging_config import setup_logging
from docblock.utils.utils import load_config, user_config_dir


logger = logging.getLogger("docblock")

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_USAGE = 2


def load_user_env() -> None:
    """Loads ~/.config/docblock/.env without overriding variables already set."""
    try:
        load_dotenv(dotenv_path=user_config_dir() / ".env")
    except (OSError, RuntimeError):
        # RuntimeError: Path.home() without a resolvable home directory.
        logger.debug("No user .env loaded.", exc_info=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docblock",
        description="Continue a documentation comment block at a line break.",
    )
    parser.add_argument("file", type=Path, help="source file to edit")
    parser.add_argument("line", type=int, help="0-based line of the cursor")
    parser.add_argument("column", type=int, help="0-based column of the cursor")
    parser.add_argument("--language", help="language id (detected with Pygments when omitted)")
    parser.add_argument("--in-place", action="store_true", help="write the result back to FILE")
    parser.add_argument(
        "--explain",
        action="store_true",
        help="print the resolved context and continuation as JSON instead of editing",
    )
    parser.add_argument(
        "--repeat",
        type=int,
        default=1,
        metavar="N",
        help="break the line N times in a row; a break on a bare continuation line leaves the block",
    )
    parser.add_argument("--config", type=Path, help="configuration file (default: ~/.config/docblock/config.toml)")
    return parser


async def _explain(helper: DocBlockHelper) -> dict[str, Any]:
    context, continuation = await helper.plan()
    return {
        "context": context.to_dict(),
        "continuation": continuation.to_dict() if continuation else None,
    }


async def _break_lines(buffer: TextBuffer, helper: DocBlockHelper, times: int) -> int:
    """Breaks the line `times` times; returns the number of continuations applied."""
    counter = LineBreakCounter(helper)
    counter.document_opened(buffer.document_id())
    buffer.add_change_listener(counter.document_changed)

    applied = 0
    for _ in range(times):
        if await counter.handle_line_break():
            applied += 1
    counter.document_closed(buffer.document_id())
    return applied


def run(argv: Optional[Sequence[str]] = None, create_templates: bool = False) -> int:
    """Runs the command line and returns the exit status."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return EXIT_OK if e.code == 0 else EXIT_USAGE

    config = load_config(args.config, create_templates=create_templates)
    setup_logging(config)

    if args.line < 0 or args.column < 0:
        print("docblock: LINE and COLUMN must be non-negative.", file=sys.stderr)
        return EXIT_USAGE
    if args.repeat < 1:
        print("docblock: --repeat must be at least 1.", file=sys.stderr)
        return EXIT_USAGE

    catalog = FormatCatalog.from_config(config)
    try:
        buffer = TextBuffer.from_file(args.file, language=args.language, catalog=catalog, config=config)
    except OSError as e:
        print(f"docblock: cannot read '{args.file}': {e}", file=sys.stderr)
        return EXIT_IO_ERROR

    if args.line >= len(buffer.text):
        print(f"docblock: line {args.line} is past the end of the file ({len(buffer.text)} lines).", file=sys.stderr)
        return EXIT_USAGE
    if args.column > len(buffer.text[args.line]):
        print(
            f"docblock: column {args.column} is past the end of line {args.line} "
            f"({len(buffer.text[args.line])} characters).",
            file=sys.stderr,
        )
        return EXIT_USAGE

    buffer.set_cursor(Position(args.line, args.column))
    helper = DocBlockHelper(buffer, catalog=catalog, config=config)

    if args.explain:
        report = asyncio.run(_explain(helper))
        print(json.dumps(report, indent=2))
        return EXIT_OK

    applied = asyncio.run(_break_lines(buffer, helper, args.repeat))
    logger.info("Applied %d documentation continuation(s) to '%s'.", applied, args.file)

    if args.in_place:
        try:
            buffer.save()
        except OSError as e:
            print(f"docblock: cannot write '{args.file}': {e}", file=sys.stderr)
            return EXIT_IO_ERROR
    else:
        sys.stdout.write(buffer.to_string())
    return EXIT_OK


def start() -> None:
    """Console-script entry point."""
    load_user_env()
    sys.exit(run(create_templates=True))


if __name__ == "__main__":
    start()
