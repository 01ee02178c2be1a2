"""Measurements and tree queries shared by the formatting rules."""

from __future__ import annotations

from typstfmt.cst import SyntaxElement, SyntaxNode
from typstfmt.syntax import TypstSyntaxKind


def max_line_length(text: str) -> int:
    """Length of the longest line of `text`."""
    return max((len(line) for line in text.split("\n")), default=0)


def fits(text: str, max_length: int) -> bool:
    return "\n" not in text and len(text) <= max_length


def has_comment_child(node: SyntaxNode) -> bool:
    return any(child.kind.is_comment for child in node.children)


def has_line_comment_child(node: SyntaxNode) -> bool:
    return any(child.kind == TypstSyntaxKind.LINE_COMMENT for child in node.children)


def is_line_sensitive(node: SyntaxElement) -> bool:
    """Whether re-indenting the text of `node` would change its meaning.

    That is the case for verbatim tokens spanning several lines (raw blocks,
    multi-line strings) and for list markers, whose indentation decides
    nesting.
    """
    if not isinstance(node, SyntaxNode):
        return _is_line_sensitive_token(node.kind, node.text)
    return any(_is_line_sensitive_token(token.kind, token.text) for token in node.iter_tokens())


def _is_line_sensitive_token(kind: TypstSyntaxKind, text: str) -> bool:
    if kind.is_line_marker:
        return True
    return kind.is_verbatim and "\n" in text
