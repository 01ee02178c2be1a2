"""High-level parse entrypoint for Typst source text."""

from __future__ import annotations

from typing import TYPE_CHECKING

from typstfmt.parser.grammar import parse_source_file
from typstfmt.parser.parser import Parser
from typstfmt.parser.tree_sink import ParsedGreenTree, build_lossless_tree

if TYPE_CHECKING:
    from typstfmt.pipeline import TypstParseResult


def parse(text: str) -> ParsedGreenTree:
    parser = Parser(text)
    parse_source_file(parser)
    events, diagnostics = parser.finish()

    return build_lossless_tree(
        text=text,
        events=events,
        diagnostics=diagnostics,
    )


def parse_result(text: str) -> TypstParseResult:
    from typstfmt.pipeline import TypstParseResult

    return TypstParseResult(source_text=text, parsed=parse(text))
