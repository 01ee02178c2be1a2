"""Handles to open and completed nodes in the parser's event list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from typstfmt.parser.event import FinishEvent, StartEvent
from typstfmt.syntax import TypstSyntaxKind
from typstfmt.text import TextSize

if TYPE_CHECKING:
    from typstfmt.parser.parser import Parser


def _set_start_kind(parser: Parser, pos: int, kind: TypstSyntaxKind) -> None:
    if not isinstance(parser.events[pos], StartEvent):
        raise RuntimeError(f"Event {pos} is not a node start")
    parser.events[pos] = StartEvent(kind=kind)


@dataclass(slots=True)
class Marker:
    """An open node; dropping it without `complete` leaves a tombstone."""

    pos: int
    start: TextSize

    def complete(self, parser: Parser, kind: TypstSyntaxKind) -> CompletedMarker:
        _set_start_kind(parser, self.pos, kind)
        # Trivia skipped after the last token of a code node stays outside of it.
        parser.events.insert(parser.trailing_trivia_start(self.pos + 1), FinishEvent())
        return CompletedMarker(pos=self.pos, kind=kind)


@dataclass(frozen=True, slots=True)
class CompletedMarker:
    pos: int
    kind: TypstSyntaxKind

    def change_kind(self, parser: Parser, kind: TypstSyntaxKind) -> CompletedMarker:
        """Re-kind the node. Must run before any `start_at` shifts the events."""
        _set_start_kind(parser, self.pos, kind)
        return CompletedMarker(pos=self.pos, kind=kind)
