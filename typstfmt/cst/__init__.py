"""Green and red CST structures."""

from typstfmt.cst.green import GreenElement, GreenNode, GreenToken, TreeBuilder
from typstfmt.cst.red import (
    SyntaxElement,
    SyntaxNode,
    SyntaxToken,
    from_green,
)

__all__ = [
    "GreenElement",
    "GreenNode",
    "GreenToken",
    "SyntaxElement",
    "SyntaxNode",
    "SyntaxToken",
    "TreeBuilder",
    "from_green",
]
