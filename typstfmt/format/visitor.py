"""Bottom-up visitor: children first, then the rule for the node's kind."""

from __future__ import annotations

import logging

from typstfmt.cst import SyntaxElement, SyntaxToken
from typstfmt.format.blocks import format_code_block, format_content_block
from typstfmt.format.collections import format_collection
from typstfmt.format.context import FormatContext
from typstfmt.format.rules import (
    format_binary,
    format_closure,
    format_default,
    format_let_binding,
    format_named,
)
from typstfmt.syntax import TypstSyntaxKind

logger = logging.getLogger(__name__)


def visit(node: SyntaxElement, ctx: FormatContext) -> str:
    """Format `node` from the formatted strings of its children.

    Each node decides its layout from the size of its children and the
    configured maximum line length.
    """
    children = [visit(child, ctx) for child in node.children]

    if isinstance(node, SyntaxToken):
        logger.debug("visiting token %s", node.kind.name)
        return format_default(node, children, ctx)

    logger.debug("visiting parent %s", node.kind.name)
    match node.kind:
        case TypstSyntaxKind.BINARY:
            return format_binary(node, children, ctx)
        case TypstSyntaxKind.NAMED | TypstSyntaxKind.KEYED:
            return format_named(node, children, ctx)
        case TypstSyntaxKind.CODE_BLOCK:
            return format_code_block(node, children, ctx)
        case TypstSyntaxKind.CONTENT_BLOCK:
            return format_content_block(node, children, ctx)
        case (
            TypstSyntaxKind.ARGS
            | TypstSyntaxKind.PARAMS
            | TypstSyntaxKind.DICT
            | TypstSyntaxKind.ARRAY
            | TypstSyntaxKind.DESTRUCTURING
            | TypstSyntaxKind.PARENTHESIZED
        ):
            return format_collection(node, children, ctx)
        case TypstSyntaxKind.LET_BINDING:
            return format_let_binding(node, children, ctx)
        case TypstSyntaxKind.CLOSURE:
            return format_closure(node, children, ctx)
        case _:
            return format_default(node, children, ctx)
