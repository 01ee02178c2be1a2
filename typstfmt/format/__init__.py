"""Typst source formatter."""

from typstfmt.format.context import FormatContext
from typstfmt.format.options import FormatOptions, IndentStyle, discover_options, load_options
from typstfmt.format.runner import TypstSyntaxError, format, run_format
from typstfmt.format.visitor import visit

__all__ = [
    "FormatContext",
    "FormatOptions",
    "IndentStyle",
    "TypstSyntaxError",
    "discover_options",
    "format",
    "load_options",
    "run_format",
    "visit",
]
