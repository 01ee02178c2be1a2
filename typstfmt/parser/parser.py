"""Event-based parser core.

Typst has no single token stream: markup and code are lexed by different
rules, so the parser drives the lexer itself and re-lexes whenever it
switches mode. Code mode skips trivia after every token; with
`newline_stops` enabled it stops in front of a line break so expressions
end there.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Final

from typstfmt.diagnostics import (
    LEXER_UNTERMINATED_COMMENT,
    LEXER_UNTERMINATED_EQUATION,
    LEXER_UNTERMINATED_RAW,
    LEXER_UNTERMINATED_STRING,
    Diagnostic,
    DiagnosticSpec,
    collect_diagnostics,
    diagnostic_from_spec,
)
from typstfmt.lexer import Lexer, LexMode, Token, TokenKind
from typstfmt.parser.event import Event, StartEvent, TokenEvent
from typstfmt.parser.marker import Marker
from typstfmt.syntax import TypstSyntaxKind
from typstfmt.text import ZERO, TextRange, TextSize

_UNTERMINATED: Final[dict[TokenKind, DiagnosticSpec]] = {
    TokenKind.STR: LEXER_UNTERMINATED_STRING,
    TokenKind.RAW: LEXER_UNTERMINATED_RAW,
    TokenKind.BLOCK_COMMENT: LEXER_UNTERMINATED_COMMENT,
    TokenKind.EQUATION: LEXER_UNTERMINATED_EQUATION,
}


@dataclass(frozen=True, slots=True)
class LexState:
    mode: LexMode
    newline_stops: bool = False


@dataclass(slots=True)
class ParserProgress:
    """Detect parser stalls inside list-style loops."""

    _position: TextSize | None = None

    def has_progressed(self, parser: "Parser") -> bool:
        has_progressed = self._position is None or self._position < parser.position
        self._position = parser.position
        return has_progressed

    def assert_progressing(self, parser: "Parser") -> None:
        if not self.has_progressed(parser):
            raise RuntimeError(f"Parser stopped making progress at {parser.current.name} {parser.current_range}")


class Parser:
    """Event-based parser over a mode-switching lexer."""

    def __init__(self, text: str) -> None:
        self._lexer = Lexer(text)
        self._modes: list[LexState] = [LexState(LexMode.MARKUP)]
        self._events: list[Event] = []
        self._diagnostics: list[Diagnostic] = []
        self._lexer_diagnostics: dict[int, Diagnostic] = {}
        self._prev_end = 0
        self._current: Token = self._lex_at(0)

    @property
    def text(self) -> str:
        return self._lexer.source

    @property
    def events(self) -> list[Event]:
        return self._events

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self._diagnostics

    @property
    def mode(self) -> LexMode:
        return self._modes[-1].mode

    @property
    def newline_stops(self) -> bool:
        return self._modes[-1].newline_stops

    @property
    def current(self) -> TokenKind:
        return self._current.kind

    @property
    def current_range(self) -> TextRange:
        return self._current.range

    @property
    def current_text(self) -> str:
        return self.text[self._current.range.start.value : self._current.range.end.value]

    @property
    def position(self) -> TextSize:
        return self._current.range.start

    @property
    def at_line_break(self) -> bool:
        """Whether a stopping line break is the current token."""
        return self._current.kind == TokenKind.SPACE and self._current.has_newline()

    def at(self, kind: TokenKind) -> bool:
        return self.current == kind

    def at_set(self, kinds: frozenset[TokenKind] | set[TokenKind]) -> bool:
        return self.current in kinds

    def directly_at(self, kind: TokenKind) -> bool:
        """At `kind` with no trivia between it and the previous token."""
        return self.at(kind) and self._current.range.start.value == self._prev_end

    def lookahead(self, *, skip_trivia: bool = True) -> Token:
        """Lex the token after the current one without consuming anything."""
        self._lexer.seek(self._current.range.end.value)
        token = self._lexer.next_token(self.mode)
        while skip_trivia and token.kind.is_trivia:
            token = self._lexer.next_token(self.mode)
        return token

    def start(self) -> Marker:
        pos = len(self._events)
        self._events.append(StartEvent.tombstone())
        return Marker(pos=pos, start=self.position)

    def checkpoint(self) -> int:
        return len(self._events)

    def start_at(self, checkpoint: int) -> Marker:
        """Open a node that begins at an earlier checkpoint.

        Used to wrap an already parsed left operand or callee.
        """
        self._events.insert(checkpoint, StartEvent.tombstone())
        start = self._start_offset_at(checkpoint)
        return Marker(pos=checkpoint, start=start)

    def trailing_trivia_start(self, lower: int) -> int:
        """Index of the first trailing trivia event, never below `lower`."""
        index = len(self._events)
        if self.mode != LexMode.CODE:
            return index
        while index > lower:
            event = self._events[index - 1]
            if not isinstance(event, TokenEvent) or not event.kind.is_trivia:
                break
            index -= 1
        return index

    def bump(self) -> None:
        token = self._current
        if token.kind == TokenKind.EOF:
            return
        self._events.append(
            TokenEvent(
                kind=TypstSyntaxKind.from_token_kind(token.kind),
                end=token.range.end,
            )
        )
        if token.is_unterminated():
            self._report_unterminated(token)
        if not token.kind.is_trivia:
            self._prev_end = token.range.end.value

        self._current = self._lex_at(token.range.end.value)
        if self.mode == LexMode.CODE:
            self._skip()

    def bump_any(self) -> None:
        self.bump()

    def eat(self, kind: TokenKind) -> bool:
        if self.current == kind:
            self.bump()
            return True
        return False

    def expect(self, kind: TokenKind, diagnostic: Diagnostic) -> bool:
        if self.eat(kind):
            return True
        self.error(diagnostic)
        return False

    def eat_line_breaks(self) -> None:
        while self.at_line_break:
            self._bump_trivia()
            self._skip()

    def error(self, diagnostic: Diagnostic) -> None:
        if self._diagnostics:
            previous = self._diagnostics[-1]
            if previous.range.start == diagnostic.range.start:
                return
        self._diagnostics.append(diagnostic)

    @contextmanager
    def lex_mode(self, mode: LexMode, *, newline_stops: bool = False) -> Iterator[None]:
        """Parse a region under another lexer mode.

        Entering re-lexes the current token. Leaving code for markup hands
        trailing trivia back to the markup lexer.
        """
        self._modes.append(LexState(mode, newline_stops))
        self._relex()
        try:
            yield
        finally:
            left = self._modes.pop()
            if left.mode == LexMode.CODE and self.mode == LexMode.MARKUP:
                self._unskip()
            else:
                self._relex()

    def finish(self) -> tuple[list[Event], list[Diagnostic]]:
        diagnostics = collect_diagnostics(self._lexer_diagnostics.values(), self._diagnostics)
        diagnostics.sort(key=lambda diagnostic: diagnostic.range.start)
        return self._events, diagnostics

    def _lex_at(self, position: int) -> Token:
        self._lexer.seek(position)
        return self._lexer.next_token(self.mode)

    def _relex(self) -> None:
        self._current = self._lex_at(self._current.range.start.value)
        if self.mode == LexMode.CODE:
            self._skip()

    def _skip(self) -> None:
        while self._current.kind.is_trivia:
            if self.newline_stops and self.at_line_break:
                break
            self._bump_trivia()

    def _bump_trivia(self) -> None:
        token = self._current
        self._events.append(
            TokenEvent(
                kind=TypstSyntaxKind.from_token_kind(token.kind),
                end=token.range.end,
            )
        )
        if token.is_unterminated():
            self._report_unterminated(token)
        self._current = self._lex_at(token.range.end.value)

    def _unskip(self) -> None:
        while self._events:
            event = self._events[-1]
            if not isinstance(event, TokenEvent) or not event.kind.is_trivia:
                break
            self._events.pop()
        self._current = self._lex_at(self._last_token_end())

    def _last_token_end(self) -> int:
        for event in reversed(self._events):
            if isinstance(event, TokenEvent):
                return event.end.value
        return 0

    def _start_offset_at(self, index: int) -> TextSize:
        for event in reversed(self._events[:index]):
            if isinstance(event, TokenEvent):
                return event.end
        return ZERO

    def _report_unterminated(self, token: Token) -> None:
        spec = _UNTERMINATED.get(token.kind)
        if spec is None:
            return
        # Trivia handed back to markup is lexed and reported a second time.
        self._lexer_diagnostics.setdefault(
            token.range.start.value,
            diagnostic_from_spec(spec, token.range),
        )
