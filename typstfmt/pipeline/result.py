"""Parse carrier shared by every consumer of one parse."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from typstfmt.cst import from_green
from typstfmt.diagnostics import has_errors
from typstfmt.parser.tree_sink import ParsedGreenTree
from typstfmt.text import LineIndex

if TYPE_CHECKING:
    from typstfmt.cst import GreenNode, SyntaxNode
    from typstfmt.diagnostics import Diagnostic


@dataclass(slots=True)
class TypstParseResult:
    """A Typst source text and its parse; the red tree and line index are built on demand."""

    source_text: str
    parsed: ParsedGreenTree
    _syntax_root: SyntaxNode | None = field(default=None, init=False, repr=False)
    _line_index: LineIndex | None = field(default=None, init=False, repr=False)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self.parsed.diagnostics

    @property
    def has_errors(self) -> bool:
        return has_errors(self.parsed.diagnostics)

    def green_root(self) -> GreenNode:
        return self.parsed.root

    def syntax_root(self) -> SyntaxNode:
        if self._syntax_root is None:
            self._syntax_root = from_green(self.parsed.root, self.source_text)
        return self._syntax_root

    def line_index(self) -> LineIndex:
        if self._line_index is None:
            self._line_index = LineIndex(self.source_text)
        return self._line_index
