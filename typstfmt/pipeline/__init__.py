"""Parse once, then format from the shared parse result."""

from __future__ import annotations

from typing import TYPE_CHECKING

from typstfmt.pipeline.result import TypstParseResult
from typstfmt.pipeline.results import FormatRunResult

if TYPE_CHECKING:
    from typstfmt.format.options import FormatOptions


def run_format(
    text: str,
    options: FormatOptions | None = None,
    *,
    parse: TypstParseResult | None = None,
) -> FormatRunResult:
    # Imported lazily: the format package itself depends on the pipeline carriers.
    from typstfmt.format.runner import run_format as _run_format

    return _run_format(text, options, parse=parse)


__all__ = [
    "FormatRunResult",
    "TypstParseResult",
    "run_format",
]
