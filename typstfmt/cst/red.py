"""Red CST wrappers over immutable green nodes/tokens.

Red elements know their parent, their position among the parent's
children and their absolute offsets in the source.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TypeAlias

from typstfmt.cst.green import GreenNode
from typstfmt.syntax import TypstSyntaxKind
from typstfmt.text import TextRange


class SyntaxToken:
    __slots__ = (
        "kind",
        "text",
        "parent",
        "index_in_parent",
        "_start",
    )

    def __init__(
        self,
        *,
        kind: TypstSyntaxKind,
        text: str,
        parent: SyntaxNode,
        index_in_parent: int,
        start: int,
    ) -> None:
        self.kind = kind
        self.text = text
        self.parent = parent
        self.index_in_parent = index_in_parent
        self._start = start

    @property
    def start(self) -> int:
        return self._start

    @property
    def end(self) -> int:
        return self._start + len(self.text)

    @property
    def range(self) -> TextRange:
        return TextRange.from_offsets(self.start, self.end)

    @property
    def children(self) -> tuple[SyntaxElement, ...]:
        return ()

    def next_sibling(self) -> SyntaxElement | None:
        return _sibling(self.parent, self.index_in_parent + 1)

    def prev_sibling(self) -> SyntaxElement | None:
        return _sibling(self.parent, self.index_in_parent - 1)

    def __repr__(self) -> str:
        return f"SyntaxToken({self.kind.name}, {self.text!r}, {self.start}..{self.end})"


class SyntaxNode:
    __slots__ = (
        "kind",
        "parent",
        "index_in_parent",
        "_children",
        "_source",
        "_start",
        "_end",
    )

    def __init__(
        self,
        *,
        kind: TypstSyntaxKind,
        parent: SyntaxNode | None,
        index_in_parent: int,
        source: str,
        start: int,
    ) -> None:
        self.kind = kind
        self.parent = parent
        self.index_in_parent = index_in_parent
        self._source = source
        self._start = start
        self._end = start
        self._children: tuple[SyntaxElement, ...] = ()

    @property
    def start(self) -> int:
        return self._start

    @property
    def end(self) -> int:
        return self._end

    @property
    def range(self) -> TextRange:
        return TextRange.from_offsets(self._start, self._end)

    @property
    def text(self) -> str:
        if not self._source:
            return "".join(token.text for token in self.descendants_tokens())
        return self._source[self._start : self._end]

    @property
    def children(self) -> tuple[SyntaxElement, ...]:
        return self._children

    def child_nodes(self) -> tuple[SyntaxNode, ...]:
        return tuple(child for child in self._children if isinstance(child, SyntaxNode))

    def child_tokens(self) -> tuple[SyntaxToken, ...]:
        return tuple(child for child in self._children if isinstance(child, SyntaxToken))

    def descendants_tokens(self) -> tuple[SyntaxToken, ...]:
        return tuple(self.iter_tokens())

    def iter_tokens(self) -> Iterator[SyntaxToken]:
        stack: list[Iterator[SyntaxElement]] = [iter(self._children)]
        while stack:
            child = next(stack[-1], None)
            if child is None:
                stack.pop()
            elif isinstance(child, SyntaxToken):
                yield child
            else:
                stack.append(iter(child.children))

    def next_sibling(self) -> SyntaxElement | None:
        return _sibling(self.parent, self.index_in_parent + 1)

    def prev_sibling(self) -> SyntaxElement | None:
        return _sibling(self.parent, self.index_in_parent - 1)

    def __repr__(self) -> str:
        return f"SyntaxNode({self.kind.name}, {self.start}..{self.end})"


SyntaxElement: TypeAlias = SyntaxNode | SyntaxToken


def _sibling(parent: SyntaxNode | None, index: int) -> SyntaxElement | None:
    if parent is None or index < 0 or index >= len(parent.children):
        return None
    return parent.children[index]


def from_green(root: GreenNode, source: str = "") -> SyntaxNode:
    red_root, _ = _build_node(
        green=root,
        parent=None,
        index_in_parent=0,
        source=source,
        start=0,
    )
    return red_root


def _build_node(
    *,
    green: GreenNode,
    parent: SyntaxNode | None,
    index_in_parent: int,
    source: str,
    start: int,
) -> tuple[SyntaxNode, int]:
    node = SyntaxNode(
        kind=green.kind,
        parent=parent,
        index_in_parent=index_in_parent,
        source=source,
        start=start,
    )

    current = start
    children: list[SyntaxElement] = []
    for child_index, child in enumerate(green.children):
        if isinstance(child, GreenNode):
            red_child, next_offset = _build_node(
                green=child,
                parent=node,
                index_in_parent=child_index,
                source=source,
                start=current,
            )
            children.append(red_child)
            current = next_offset
            continue

        token = SyntaxToken(
            kind=child.kind,
            text=child.text,
            parent=node,
            index_in_parent=child_index,
            start=current,
        )
        children.append(token)
        current = token.end

    node._children = tuple(children)
    node._end = current
    return node, current


__all__ = [
    "SyntaxElement",
    "SyntaxNode",
    "SyntaxToken",
    "from_green",
]
