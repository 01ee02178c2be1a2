"""Layout of code blocks (`{ ... }`) and content blocks (`[ ... ]`)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final

from typstfmt.cst import SyntaxNode
from typstfmt.format.context import FormatContext, render
from typstfmt.format.rules import format_default
from typstfmt.format.utils import fits, has_line_comment_child, is_line_sensitive
from typstfmt.syntax import TypstSyntaxKind

logger = logging.getLogger(__name__)

_BLOCK_PUNCTUATION: Final[frozenset[TypstSyntaxKind]] = frozenset(
    {TypstSyntaxKind.LBRACE, TypstSyntaxKind.RBRACE, TypstSyntaxKind.SEMICOLON}
)


@dataclass(slots=True)
class BlockEntry:
    """A statement or comment of a code block, with what preceded it."""

    text: str
    blank_line_before: bool = False


def code_block_entries(node: SyntaxNode, children: list[str]) -> list[BlockEntry]:
    """Statements and comments of a code block.

    A comment on the same line as the previous entry is glued to it.
    """
    entries: list[BlockEntry] = []
    newlines = 0
    for rendered, child in zip(children, node.children):
        kind = child.kind
        if kind in _BLOCK_PUNCTUATION:
            continue
        if kind == TypstSyntaxKind.SPACE:
            newlines += child.text.count("\n")
            continue
        if kind.is_comment and entries and newlines == 0:
            entries[-1].text += " " + rendered
            continue
        entries.append(BlockEntry(text=rendered, blank_line_before=bool(entries) and newlines >= 2))
        newlines = 0
    return entries


def format_code_block(node: SyntaxNode, children: list[str], ctx: FormatContext) -> str:
    if is_line_sensitive(node):
        return format_default(node, children, ctx)

    entries = code_block_entries(node, children)
    if not entries:
        return "{}"

    if len(entries) == 1 and not has_line_comment_child(node):
        inline = "{ " + entries[0].text + " }"
        if fits(inline, ctx.options.max_line_length):
            logger.debug("CODE_BLOCK: inline layout")
            return inline

    logger.debug("CODE_BLOCK: one entry per line (%d entries)", len(entries))
    buf: list[str] = ["{\n"]
    with ctx.indented():
        for entry in entries:
            if entry.blank_line_before:
                ctx.push_raw_in("\n", buf)
            ctx.push_raw_indent(entry.text, buf)
            ctx.push_raw_in("\n", buf)
    ctx.push_raw_in("}", buf)
    return render(buf)


def format_content_block(node: SyntaxNode, children: list[str], ctx: FormatContext) -> str:
    """Re-indent block-style content (`[` and `]` on their own lines), keep inline content."""
    markup_index = next(
        (index for index, child in enumerate(node.children) if child.kind == TypstSyntaxKind.MARKUP),
        None,
    )
    if markup_index is None or is_line_sensitive(node.children[markup_index]):
        return "".join(children)

    inner = children[markup_index]
    body = inner.strip("\n")
    if not (inner.startswith("\n") and inner.endswith("\n")) or not body:
        return "".join(children)

    logger.debug("CONTENT_BLOCK: block layout")
    buf: list[str] = ["".join(children[:markup_index]), "\n"]
    with ctx.indented():
        ctx.push_raw_indent(body, buf)
    ctx.push_raw_in("\n", buf)
    ctx.push_raw_in("".join(children[markup_index + 1 :]), buf)
    return render(buf)
