"""Formatting rules for single nodes.

Every rule receives the node and the already formatted strings of its
children (one per child, in order) and returns the node's rendering.
Rules never add whitespace around their own rendering; the parent decides.
"""

from __future__ import annotations

import logging
from typing import Final

from typstfmt.cst import SyntaxElement, SyntaxNode, SyntaxToken
from typstfmt.diagnostics import FORMAT_BINARY_BREAK_UNSUPPORTED, diagnostic_from_spec
from typstfmt.format.context import FormatContext, render
from typstfmt.format.utils import has_comment_child, max_line_length
from typstfmt.syntax import TypstSyntaxKind

logger = logging.getLogger(__name__)

# Typst cannot continue an expression on the next line yet, so the breaking
# layout of binary expressions would not parse back.
BINARY_BREAKING_SUPPORTED: Final = False

_MAX_BLANK_LINES: Final = 1


def format_default(node: SyntaxElement, children: list[str], ctx: FormatContext) -> str:
    """Last-resort rule: normalize the node's own text, keep the children as they are.

    Verbatim tokens (raw text, strings, equations, comments) are copied
    unchanged. A space containing line breaks keeps only the line breaks,
    except in markup holding list, enum or term items, where the
    indentation after the last break decides which item a line belongs to.
    """
    buf: list[str] = []
    if isinstance(node, SyntaxToken):
        _push_leaf(node, ctx, buf)
    for child in children:
        ctx.push_raw_in(child, buf)
    return render(buf)


def _push_leaf(token: SyntaxToken, ctx: FormatContext, buf: list[str]) -> None:
    if token.kind.is_verbatim:
        ctx.push_raw_in(token.text, buf)
        return

    if token.kind == TypstSyntaxKind.SPACE and "\n" in token.text:
        newlines = min(token.text.count("\n"), _MAX_BLANK_LINES + 1)
        ctx.push_in("\n" * newlines, buf)
        if _in_item_markup(token):
            ctx.push_raw_in(token.text.rsplit("\n", 1)[1], buf)
        return

    ctx.push_in(token.text, buf)


def _in_item_markup(token: SyntaxToken) -> bool:
    parent = token.parent
    return parent.kind == TypstSyntaxKind.MARKUP and any(child.kind.is_line_marker for child in parent.children)


def format_binary(node: SyntaxNode, children: list[str], ctx: FormatContext) -> str:
    """Operators get one space on each side; long lines are reported, not broken.

    An over-wide chain such as `a + b + c` is reported once, on its outermost
    node: the operands of a `BINARY` parent are not reported themselves.
    """
    if has_comment_child(node):
        return format_default(node, children, ctx)

    res = format_binary_tight(node, children, ctx)
    if max_line_length(res) > ctx.options.max_line_length:
        if BINARY_BREAKING_SUPPORTED:
            return format_binary_breaking(node, children, ctx)
        logger.debug("binary expression at %s exceeds %d columns", node.range, ctx.options.max_line_length)
        if node.parent is None or node.parent.kind != TypstSyntaxKind.BINARY:
            ctx.emit(diagnostic_from_spec(FORMAT_BINARY_BREAK_UNSUPPORTED, node.range))
    return res


def format_binary_tight(node: SyntaxNode, children: list[str], ctx: FormatContext) -> str:
    buf: list[str] = []
    for rendered, child in zip(children, node.children):
        kind = child.kind
        if kind == TypstSyntaxKind.SPACE:
            continue
        if kind.is_binary_operator:
            ctx.push_in(" ", buf)
            ctx.push_raw_in(rendered, buf)
            ctx.push_in(" ", buf)
        else:
            ctx.push_raw_in(rendered, buf)
    return render(buf)


def format_binary_breaking(node: SyntaxNode, children: list[str], ctx: FormatContext) -> str:
    buf: list[str] = []
    previous_was_operator = False
    for rendered, child in zip(children, node.children):
        kind = child.kind
        if kind == TypstSyntaxKind.SPACE:
            continue
        if kind.is_binary_operator:
            # The second word of `not in` stays on the operator line.
            if previous_was_operator:
                ctx.push_raw_in(rendered, buf)
            else:
                ctx.push_in("\n", buf)
                with ctx.indented():
                    ctx.push_raw_indent(rendered, buf)
            ctx.push_raw_in(" ", buf)
            previous_was_operator = True
        else:
            ctx.push_raw_in(rendered, buf)
            previous_was_operator = False
    return render(buf)


def format_named(node: SyntaxNode, children: list[str], ctx: FormatContext) -> str:
    """`name: value` and `"key": value`."""
    if has_comment_child(node):
        return format_default(node, children, ctx)

    buf: list[str] = []
    for rendered, child in zip(children, node.children):
        match child.kind:
            case TypstSyntaxKind.COLON:
                ctx.push_raw_in(": ", buf)
            case TypstSyntaxKind.SPACE:
                pass
            case _:
                ctx.push_raw_in(rendered, buf)
    return render(buf)


def format_let_binding(node: SyntaxNode, children: list[str], ctx: FormatContext) -> str:
    if has_comment_child(node):
        return format_default(node, children, ctx)

    buf: list[str] = []
    for rendered, child in zip(children, node.children):
        match child.kind:
            case TypstSyntaxKind.EQ:
                ctx.push_in(" ", buf)
                ctx.push_in(rendered, buf)
                ctx.push_in(" ", buf)
            case TypstSyntaxKind.SPACE:
                ctx.push_in(rendered, buf)
            case _:
                ctx.push_raw_in(rendered, buf)
    return render(buf)


def format_closure(node: SyntaxNode, children: list[str], ctx: FormatContext) -> str:
    """`(x) => body`, and `f(x) = body` inside a let binding."""
    if has_comment_child(node):
        return format_default(node, children, ctx)

    buf: list[str] = []
    for rendered, child in zip(children, node.children):
        match child.kind:
            case TypstSyntaxKind.EQ | TypstSyntaxKind.ARROW:
                ctx.push_in(" ", buf)
                ctx.push_raw_in(rendered, buf)
                ctx.push_in(" ", buf)
            case TypstSyntaxKind.SPACE:
                pass
            case _:
                ctx.push_raw_in(rendered, buf)
    return render(buf)
