"""Layout of parenthesized, comma-separated collections.

Arguments, parameters, arrays, dictionaries, destructuring patterns and
parenthesized expressions share one rule: everything on one line when it
fits, otherwise one item per line with a trailing comma.
"""

from __future__ import annotations

import logging
from typing import Final

from typstfmt.cst import SyntaxNode
from typstfmt.format.context import FormatContext, render
from typstfmt.format.rules import format_default
from typstfmt.format.utils import fits, has_comment_child, is_line_sensitive
from typstfmt.syntax import TypstSyntaxKind

logger = logging.getLogger(__name__)

# Kinds where `(x,)` and `(x)` mean different things.
_SINGLETON_NEEDS_COMMA: Final[frozenset[TypstSyntaxKind]] = frozenset(
    {TypstSyntaxKind.ARRAY, TypstSyntaxKind.DESTRUCTURING}
)


def format_collection(node: SyntaxNode, children: list[str], ctx: FormatContext) -> str:
    if has_comment_child(node):
        if is_line_sensitive(node):
            return format_default(node, children, ctx)
        return _commented_layout(node, children, ctx)

    kinds = [child.kind for child in node.children]
    if TypstSyntaxKind.LPAREN not in kinds or TypstSyntaxKind.RPAREN not in kinds:
        return "".join(children)

    open_index = kinds.index(TypstSyntaxKind.LPAREN)
    close_index = len(kinds) - 1 - kinds[::-1].index(TypstSyntaxKind.RPAREN)

    items: list[str] = []
    item_kinds: list[TypstSyntaxKind] = []
    for index in range(open_index + 1, close_index):
        kind = kinds[index]
        if kind.is_trivia or kind == TypstSyntaxKind.COMMA:
            continue
        items.append(children[index])
        item_kinds.append(kind)

    prefix = "".join(children[:open_index])
    suffix = "".join(children[close_index + 1 :])

    single = _single_line(node.kind, items, item_kinds)
    if not items or fits(single, ctx.options.max_line_length) or is_line_sensitive(node):
        logger.debug("%s: single-line layout with %d items", node.kind.name, len(items))
        return prefix + single + suffix

    logger.debug("%s: one item per line (%d items)", node.kind.name, len(items))
    comma = "," if trailing_comma(node.kind, item_kinds, multi_line=True) else ""
    return prefix + _multi_line(items, comma, ctx) + suffix


def trailing_comma(kind: TypstSyntaxKind, item_kinds: list[TypstSyntaxKind], *, multi_line: bool) -> bool:
    if kind == TypstSyntaxKind.PARENTHESIZED or not item_kinds:
        return False
    if multi_line:
        return True
    return kind in _SINGLETON_NEEDS_COMMA and len(item_kinds) == 1 and item_kinds[0] != TypstSyntaxKind.SPREAD


def _single_line(kind: TypstSyntaxKind, items: list[str], item_kinds: list[TypstSyntaxKind]) -> str:
    comma = "," if trailing_comma(kind, item_kinds, multi_line=False) else ""
    return "(" + ", ".join(items) + comma + ")"


def _commented_layout(node: SyntaxNode, children: list[str], ctx: FormatContext) -> str:
    """Layout of a collection holding comments.

    The source line breaks stay, since a line comment ends its line. Lines
    inside the parentheses get one indent and items on one line are
    separated by a single space.
    """
    logger.debug("%s: keeping line breaks around comments", node.kind.name)
    buf: list[str] = []
    previous: TypstSyntaxKind | None = None
    at_line_start = False
    inside = False
    for rendered, child in zip(children, node.children):
        kind = child.kind
        if kind == TypstSyntaxKind.SPACE:
            if not inside:
                ctx.push_raw_in(rendered, buf)
            elif "\n" in child.text:
                ctx.push_raw_in(rendered, buf)
                at_line_start = True
            continue

        if at_line_start and kind != TypstSyntaxKind.RPAREN:
            with ctx.indented():
                ctx.push_raw_indent(rendered, buf)
        else:
            if (
                inside
                and not at_line_start
                and previous not in (None, TypstSyntaxKind.LPAREN)
                and kind not in (TypstSyntaxKind.COMMA, TypstSyntaxKind.RPAREN)
            ):
                ctx.push_raw_in(" ", buf)
            ctx.push_raw_in(rendered, buf)
        at_line_start = False
        previous = kind
        if kind == TypstSyntaxKind.LPAREN:
            inside = True
        elif kind == TypstSyntaxKind.RPAREN:
            inside = False
    return render(buf)


def _multi_line(items: list[str], comma: str, ctx: FormatContext) -> str:
    buf: list[str] = ["(\n"]
    with ctx.indented():
        for item in items:
            ctx.push_raw_indent(item + comma, buf)
            ctx.push_raw_in("\n", buf)
    ctx.push_raw_in(")", buf)
    return render(buf)
