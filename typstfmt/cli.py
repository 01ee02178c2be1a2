"""Command-line interface: `typstfmt [PATHS...]`."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TextIO

from typstfmt.diagnostics import render_diagnostic
from typstfmt.format import FormatOptions, IndentStyle, discover_options, load_options, run_format
from typstfmt.pipeline import FormatRunResult

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typstfmt",
        description="Format Typst source files.",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help="Files to format in place. Reads stdin and writes stdout when omitted.",
    )
    parser.add_argument("--check", action="store_true", help="Only report files that would change; exit 1 if any.")
    parser.add_argument("--stdout", action="store_true", help="Print formatted files instead of rewriting them.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a typstfmt.toml or pyproject.toml (defaults to ./typstfmt.toml when present).",
    )
    parser.add_argument("--max-line-length", type=int, default=None, help="Width budget (default 80).")
    parser.add_argument("--indent-width", type=int, default=None, help="Spaces per indentation level (default 2).")
    parser.add_argument(
        "--indent-style",
        choices=[style.value for style in IndentStyle],
        default=None,
        help="Indent with spaces or tabs (default space).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log formatting decisions to stderr.")
    return parser


def resolve_options(args: argparse.Namespace) -> FormatOptions:
    base = load_options(args.config) if args.config is not None else discover_options(Path.cwd())
    return base.merged(
        {
            "max_line_length": args.max_line_length,
            "indent_width": args.indent_width,
            "indent_style": args.indent_style,
        }
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s - %(levelname)s - %(message)s",
    )

    try:
        options = resolve_options(args)
    except (OSError, ValueError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    if not args.paths:
        return _format_stream(sys.stdin, sys.stdout, options, check=args.check)

    exit_code = 0
    for path in args.paths:
        status = _format_path(path, options, check=args.check, to_stdout=args.stdout)
        exit_code = max(exit_code, status)
    return exit_code


def _format_stream(source: TextIO, sink: TextIO, options: FormatOptions, *, check: bool) -> int:
    result = run_format(source.read(), options)
    _report("<stdin>", result)
    if result.has_errors:
        return 1
    if check:
        if result.changed:
            print("<stdin> would be reformatted", file=sys.stderr)
            return 1
        return 0
    sink.write(result.formatted_text)
    return 0


def _format_path(path: Path, options: FormatOptions, *, check: bool, to_stdout: bool) -> int:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"{path}: cannot read file: {exc}", file=sys.stderr)
        return 1

    result = run_format(text, options)
    _report(str(path), result)
    if result.has_errors:
        return 1

    if check:
        if result.changed:
            print(f"{path} would be reformatted", file=sys.stderr)
            return 1
        return 0

    if to_stdout:
        sys.stdout.write(result.formatted_text)
    elif result.changed:
        path.write_text(result.formatted_text, encoding="utf-8")
        logger.info("reformatted %s", path)
    return 0


def _report(name: str, result: FormatRunResult) -> None:
    lines = result.parse.line_index()
    for diagnostic in result.diagnostics:
        print(render_diagnostic(diagnostic, name, lines), file=sys.stderr)


if __name__ == "__main__":
    raise SystemExit(main())
