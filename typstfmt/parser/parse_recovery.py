"""Error recovery inside code: statements of a code block and collection items."""

from __future__ import annotations

from dataclasses import dataclass

from typstfmt.lexer import TokenKind
from typstfmt.parser.marker import CompletedMarker
from typstfmt.parser.parser import Parser
from typstfmt.syntax import TypstSyntaxKind


@dataclass(frozen=True, slots=True)
class RecoverySet:
    """Tokens where a broken stretch of code ends.

    Everything in front of them is wrapped in an ERROR node, so the tree
    stays lossless and the enclosing construct can carry on.
    """

    tokens: frozenset[TokenKind]
    at_line_break: bool = False

    def is_at_recovered(self, parser: Parser) -> bool:
        return parser.at_set(self.tokens) or (self.at_line_break and parser.at_line_break)

    def recover(self, parser: Parser) -> CompletedMarker | None:
        """Skip to the next recovery point; None when already there."""
        if parser.at(TokenKind.EOF) or self.is_at_recovered(parser):
            return None

        marker = parser.start()
        while not parser.at(TokenKind.EOF) and not self.is_at_recovered(parser):
            parser.bump_any()
        return marker.complete(parser, TypstSyntaxKind.ERROR)
