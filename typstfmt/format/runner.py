"""Format entrypoints over a shared Typst parse result."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from typstfmt.diagnostics import Diagnostic, collect_diagnostics
from typstfmt.format.context import FormatContext
from typstfmt.format.options import FormatOptions
from typstfmt.format.visitor import visit
from typstfmt.parser import parse_result
from typstfmt.pipeline.result import TypstParseResult
from typstfmt.pipeline.results import FormatRunResult

logger = logging.getLogger(__name__)


class TypstSyntaxError(ValueError):
    """The source did not parse; formatting it could change its meaning."""

    def __init__(self, diagnostics: Iterable[Diagnostic]) -> None:
        self.diagnostics = list(diagnostics)
        errors = [d for d in self.diagnostics if d.is_error]
        summary = ", ".join(f"{d.code} at {d.range.as_tuple()}" for d in errors[:3])
        super().__init__(f"Cannot format source with {len(errors)} syntax error(s): {summary}")


def format(source: str, options: FormatOptions | None = None) -> str:
    """Format Typst source text.

    Raises `TypstSyntaxError` when the source does not parse. Format
    warnings are logged; use `run_format` to receive them as diagnostics.
    """
    parsed = parse_result(source)
    if parsed.has_errors:
        raise TypstSyntaxError(parsed.diagnostics)

    formatted, diagnostics = _format_tree(parsed, options)
    for diagnostic in diagnostics:
        logger.warning("%s: %s", diagnostic.code, diagnostic.message)
    return formatted


def run_format(
    text: str,
    options: FormatOptions | None = None,
    *,
    parse: TypstParseResult | None = None,
) -> FormatRunResult:
    """Run formatting from a single parse lifecycle."""
    resolved_parse = _resolve_parse(text, parse=parse)

    if resolved_parse.has_errors:
        return FormatRunResult(
            parse=resolved_parse,
            formatted_text=resolved_parse.source_text,
            diagnostics=list(resolved_parse.diagnostics),
            changed=False,
        )

    formatted_text, format_diagnostics = _format_tree(resolved_parse, options)
    return FormatRunResult(
        parse=resolved_parse,
        formatted_text=formatted_text,
        diagnostics=collect_diagnostics(resolved_parse.diagnostics, format_diagnostics),
        changed=formatted_text != resolved_parse.source_text,
    )


def _format_tree(parse: TypstParseResult, options: FormatOptions | None) -> tuple[str, list[Diagnostic]]:
    ctx = FormatContext(options)
    formatted = visit(parse.syntax_root(), ctx)
    return formatted, ctx.diagnostics


def _resolve_parse(text: str, *, parse: TypstParseResult | None) -> TypstParseResult:
    if parse is not None:
        if parse.source_text != text:
            raise ValueError("Provided parse result was built from a different text")
        return parse
    return parse_result(text)
