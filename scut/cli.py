from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import BinaryIO

from .config import ConfigError, ScutSettings, load_settings
from .models import ColumnSet, DelimiterMode
from .selection_parser import InvalidSelectionError, parse, validate
from .stream import process_stream

LOGGER = logging.getLogger(__name__)


def _setup_logging(verbose: bool, settings: ScutSettings) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        stream=sys.stderr,
    )


def _fail(parser: argparse.ArgumentParser, error: Exception) -> None:
    parser.exit(2, f"{parser.prog}: {error}\n")


def _parse_selection(
    parser: argparse.ArgumentParser, selection: str, settings: ScutSettings
) -> ColumnSet:
    try:
        validate(selection)
        # A bounded line holds at most max_line_length characters and one more field.
        return parse(selection, max_column=settings.max_line_length + 1)
    except InvalidSelectionError as error:
        _fail(parser, error)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scut",
        description="Print selected columns of each line read from standard input.",
        epilog="Selections are comma-separated columns or ranges, e.g. 1-2,7-15.",
    )

    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument(
        "-l",
        dest="mode",
        action="store_const",
        const=DelimiterMode.FIXED_WIDTH,
        help="Columns are 1 character wide.",
    )
    mode.add_argument(
        "-w",
        dest="mode",
        action="store_const",
        const=DelimiterMode.WHITESPACE,
        help="Columns are separated by spaces.",
    )
    mode.add_argument(
        "-c",
        dest="mode",
        action="store_const",
        const=DelimiterMode.COMMA_SEPARATED,
        help="Columns are separated by ','.",
    )
    parser.add_argument("selection", help="Columns to keep, e.g. 1,3-5.")

    parser.add_argument(
        "--max-line-length",
        type=int,
        default=None,
        help="Bytes kept per input line; longer lines are truncated (default 65536).",
    )
    parser.add_argument("--encoding", default=None, help="Input and output encoding (default latin-1).")
    parser.add_argument("--config", default=None, help="Optional TOML settings file.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logs.")
    return parser


def main(
    argv: list[str] | None = None,
    stdin: BinaryIO | None = None,
    stdout: BinaryIO | None = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(
            config_path=Path(args.config).expanduser() if args.config else None,
            overrides={"max_line_length": args.max_line_length, "input_encoding": args.encoding},
        )
    except ConfigError as error:
        _fail(parser, error)

    _setup_logging(verbose=args.verbose, settings=settings)
    columns = _parse_selection(parser, args.selection, settings)

    input_stream = stdin if stdin is not None else sys.stdin.buffer
    output_stream = stdout if stdout is not None else sys.stdout.buffer

    try:
        process_stream(
            input_stream=input_stream,
            output_stream=output_stream,
            mode=args.mode,
            columns=columns,
            settings=settings,
        )
    except BrokenPipeError:
        # Downstream closed early; point stdout at devnull so the interpreter's
        # final flush does not raise again.
        if stdout is None:
            devnull = os.open(os.devnull, os.O_WRONLY)
            os.dup2(devnull, sys.stdout.fileno())
        return 0
    except OSError as error:
        print(f"{parser.prog}: {error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
