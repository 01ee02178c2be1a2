"""Syntax kinds."""

from typstfmt.syntax.kind import TypstSyntaxKind

__all__ = ["TypstSyntaxKind"]
