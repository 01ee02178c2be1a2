"""Replays parser events into a lossless green tree."""

from dataclasses import dataclass

from typstfmt.cst import GreenNode, TreeBuilder
from typstfmt.diagnostics import Diagnostic
from typstfmt.parser.event import Event, FinishEvent, StartEvent
from typstfmt.text import ZERO, TextSize


@dataclass(frozen=True, slots=True)
class ParsedGreenTree:
    root: GreenNode
    diagnostics: list[Diagnostic]


class LosslessTreeSink:
    """Builds the green tree from the event list.

    Token events only carry their end offset; the text of each token is the
    source slice since the previous token, so no character can get lost.
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._text_pos: TextSize = ZERO
        self._depth = 0
        self._builder = TreeBuilder()

    def replay(self, events: list[Event]) -> None:
        for event in events:
            match event:
                case StartEvent() if event.is_tombstone:
                    # Abandoned markers never get a finish event.
                    continue
                case StartEvent(kind=kind):
                    self._builder.start_node(kind)
                    self._depth += 1
                case FinishEvent():
                    self._depth -= 1
                    if self._depth < 0:
                        raise RuntimeError("Finish event without a matching start event")
                    self._builder.finish_node()
                case _:
                    self._builder.token(event.kind, self._text[self._text_pos.value : event.end.value])
                    self._text_pos = event.end

    def finish(self, diagnostics: list[Diagnostic]) -> ParsedGreenTree:
        if self._text_pos.value != len(self._text):
            raise RuntimeError(f"Parser left text unconsumed at offset {self._text_pos.value}")
        return ParsedGreenTree(root=self._builder.finish(), diagnostics=diagnostics)


def build_lossless_tree(
    text: str,
    events: list[Event],
    diagnostics: list[Diagnostic],
) -> ParsedGreenTree:
    sink = LosslessTreeSink(text)
    sink.replay(events)
    return sink.finish(diagnostics)
