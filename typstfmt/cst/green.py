"""Immutable green tree: kinds and text only, no positions.

Trivia (spaces and comments) is stored as ordinary child tokens, so the
concatenated text of the leaves is always the source text.
"""

from dataclasses import dataclass
from typing import TypeAlias

from typstfmt.syntax import TypstSyntaxKind


@dataclass(frozen=True, slots=True)
class GreenToken:
    kind: TypstSyntaxKind
    text: str


@dataclass(frozen=True, slots=True)
class GreenNode:
    kind: TypstSyntaxKind
    children: tuple["GreenElement", ...]

    @property
    def text(self) -> str:
        return "".join(child.text for child in self.children)


GreenElement: TypeAlias = GreenNode | GreenToken


class TreeBuilder:
    """Assembles a green tree from open/leaf/close calls.

    Elements produced outside any open node become children of a synthetic
    `MARKUP` root, unless there is exactly one and it already is one.
    """

    def __init__(self) -> None:
        self._open: list[tuple[TypstSyntaxKind, list[GreenElement]]] = [(TypstSyntaxKind.MARKUP, [])]

    def start_node(self, kind: TypstSyntaxKind) -> None:
        self._open.append((kind, []))

    def token(self, kind: TypstSyntaxKind, text: str) -> None:
        self._open[-1][1].append(GreenToken(kind=kind, text=text))

    def finish_node(self) -> None:
        if len(self._open) == 1:
            raise RuntimeError("finish_node called without an open node")
        kind, children = self._open.pop()
        self._open[-1][1].append(GreenNode(kind=kind, children=tuple(children)))

    def finish(self) -> GreenNode:
        if len(self._open) != 1:
            raise RuntimeError(f"Cannot finish tree: {len(self._open) - 1} node(s) still open")
        _, top = self._open[0]
        match top:
            case [GreenNode(kind=TypstSyntaxKind.MARKUP) as root]:
                return root
            case _:
                return GreenNode(kind=TypstSyntaxKind.MARKUP, children=tuple(top))
