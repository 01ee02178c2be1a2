"""Parser events.

The grammar never builds nodes directly: it records a flat list of events
that the tree sink replays. A start event may be inserted after the fact
(see `Parser.start_at`), which is how a parsed operand becomes the first
child of a binary expression or a call.
"""

from dataclasses import dataclass
from typing import TypeAlias

from typstfmt.syntax import TypstSyntaxKind
from typstfmt.text import TextSize


@dataclass(frozen=True, slots=True)
class StartEvent:
    kind: TypstSyntaxKind

    @staticmethod
    def tombstone() -> "StartEvent":
        """Placeholder for a node whose kind is not known yet."""
        return StartEvent(kind=TypstSyntaxKind.TOMBSTONE)

    @property
    def is_tombstone(self) -> bool:
        return self.kind == TypstSyntaxKind.TOMBSTONE


@dataclass(frozen=True, slots=True)
class FinishEvent:
    pass


@dataclass(frozen=True, slots=True)
class TokenEvent:
    """A token (trivia included) ending at `end`; it starts where the previous one ended."""

    kind: TypstSyntaxKind
    end: TextSize


Event: TypeAlias = StartEvent | FinishEvent | TokenEvent
