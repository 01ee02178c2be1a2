"""Lexer."""

from typing import Final

from typstfmt.lexer.tokens import KEYWORDS, LexMode, Token, TokenFlags, TokenKind
from typstfmt.text import TextRange, slice_text_range

_UNITS = ("pt", "mm", "cm", "in", "em", "fr", "deg", "rad", "%")
_EMBEDDABLE = ("(", "[", "{", '"')
_URL_SCHEMES = ("http:", "https:")

_TWO_CHAR_TOKENS: Final[dict[str, TokenKind]] = {
    "=>": TokenKind.ARROW,
    "==": TokenKind.EQ_EQ,
    "!=": TokenKind.EXCL_EQ,
    "<=": TokenKind.LT_EQ,
    ">=": TokenKind.GT_EQ,
    "+=": TokenKind.PLUS_EQ,
    "-=": TokenKind.HYPH_EQ,
    "*=": TokenKind.STAR_EQ,
    "/=": TokenKind.SLASH_EQ,
    "..": TokenKind.DOTS,
}

_ONE_CHAR_TOKENS: Final[dict[str, TokenKind]] = {
    "=": TokenKind.EQ,
    "<": TokenKind.LT,
    ">": TokenKind.GT,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
    ":": TokenKind.COLON,
    ".": TokenKind.DOT,
}


class Lexer:
    """Lossless, mode-aware lexer.

    The lexer holds no mode state of its own: the parser asks for the next
    token in whatever mode it is currently in, and may `seek` back to re-lex
    a position in another mode.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._position = 0
        self._start = 0
        self._flags = TokenFlags.NONE

    @property
    def source(self) -> str:
        """Original source text."""
        return self._source

    @property
    def position(self) -> int:
        return self._position

    @property
    def is_eof(self) -> bool:
        return self._position >= len(self._source)

    def seek(self, position: int) -> None:
        if position < 0 or position > len(self._source):
            raise ValueError(f"Cannot seek to {position}: outside of source")
        self._position = position

    def next_token(self, mode: LexMode) -> Token:
        self._start = self._position
        self._flags = TokenFlags.NONE

        if self.is_eof:
            return Token(TokenKind.EOF, TextRange.from_offsets(self._start, self._start))

        kind = self._lex_markup() if mode == LexMode.MARKUP else self._lex_code()
        return Token(kind, TextRange.from_offsets(self._start, self._position), self._flags)

    def lex(self, mode: LexMode = LexMode.MARKUP) -> list[Token]:
        """Tokenize the whole source in a single mode."""
        tokens: list[Token] = []
        while True:
            token = self.next_token(mode)
            tokens.append(token)
            if token.kind == TokenKind.EOF:
                break
        return tokens

    # -------------------------
    # Shared
    # -------------------------

    def _lex_shared(self) -> TokenKind | None:
        ch = self._current_char()

        if ch in " \t\r\n":
            return self._lex_space()
        if ch == "/" and self._peek_char() == "/":
            return self._lex_line_comment()
        if ch == "/" and self._peek_char() == "*":
            return self._lex_block_comment()
        if ch == "`":
            return self._lex_raw()
        if ch == "$":
            return self._lex_equation()
        if ch == "[":
            self._advance(1)
            return TokenKind.LBRACKET
        if ch == "]":
            self._advance(1)
            return TokenKind.RBRACKET
        return None

    def _lex_space(self) -> TokenKind:
        while not self.is_eof:
            ch = self._current_char()
            if ch == "\n" or ch == "\r":
                self._flags |= TokenFlags.HAS_NEWLINE
            elif ch != " " and ch != "\t":
                break
            self._advance(1)
        return TokenKind.SPACE

    def _lex_line_comment(self) -> TokenKind:
        # Consume until end of line, do not consume the newline itself.
        self._advance(2)
        while not self.is_eof and self._current_char() not in "\r\n":
            self._advance(1)
        return TokenKind.LINE_COMMENT

    def _lex_block_comment(self) -> TokenKind:
        self._advance(2)
        depth = 1
        while not self.is_eof:
            if self._current_char() == "/" and self._peek_char() == "*":
                depth += 1
                self._advance(2)
                continue
            if self._current_char() == "*" and self._peek_char() == "/":
                depth -= 1
                self._advance(2)
                if depth == 0:
                    return TokenKind.BLOCK_COMMENT
                continue
            self._advance(1)
        self._flags |= TokenFlags.UNTERMINATED
        return TokenKind.BLOCK_COMMENT

    def _lex_raw(self) -> TokenKind:
        backticks = 0
        while self._current_char() == "`":
            backticks += 1
            self._advance(1)

        # Exactly two backticks is an empty raw text.
        if backticks == 2:
            return TokenKind.RAW

        fence = "`" * backticks
        end = self._source.find(fence, self._position)
        if end == -1:
            self._position = len(self._source)
            self._flags |= TokenFlags.UNTERMINATED
        else:
            self._position = end + backticks
        return TokenKind.RAW

    def _lex_equation(self) -> TokenKind:
        self._advance(1)
        while not self.is_eof:
            ch = self._current_char()
            if ch == "\\":
                self._advance(2 if self._peek_char() != "\0" else 1)
                continue
            self._advance(1)
            if ch == "$":
                return TokenKind.EQUATION
        self._flags |= TokenFlags.UNTERMINATED
        return TokenKind.EQUATION

    # -------------------------
    # Markup
    # -------------------------

    def _lex_markup(self) -> TokenKind:
        shared = self._lex_shared()
        if shared is not None:
            return shared

        ch = self._current_char()
        if ch == "\\":
            return self._lex_backslash()
        if ch == "#" and self._is_embeddable(self._peek_char()):
            self._advance(1)
            return TokenKind.HASH

        if self._at_line_start():
            marker = self._lex_line_marker()
            if marker is not None:
                return marker

        return self._lex_text()

    def _lex_backslash(self) -> TokenKind:
        next_ch = self._peek_char()
        if next_ch in " \t\r\n\0":
            self._advance(1)
            return TokenKind.LINEBREAK
        if next_ch == "u" and self._peek_char(2) == "{":
            close = self._source.find("}", self._position)
            if close != -1:
                self._position = close + 1
                return TokenKind.ESCAPE
        self._advance(2)
        return TokenKind.ESCAPE

    def _lex_line_marker(self) -> TokenKind | None:
        ch = self._current_char()
        if ch == "=":
            level = 0
            while self._peek_char(level) == "=":
                level += 1
            if self._is_marker_end(self._peek_char(level)):
                self._advance(level)
                return TokenKind.HEADING_MARKER
            return None
        if ch == "-" and self._is_marker_end(self._peek_char()):
            self._advance(1)
            return TokenKind.LIST_MARKER
        if ch == "+" and self._is_marker_end(self._peek_char()):
            self._advance(1)
            return TokenKind.ENUM_MARKER
        if ch == "/" and self._peek_char() == " ":
            self._advance(1)
            return TokenKind.TERM_MARKER
        if ch.isdigit():
            digits = 0
            while self._peek_char(digits).isdigit():
                digits += 1
            if self._peek_char(digits) == "." and self._is_marker_end(self._peek_char(digits + 1)):
                self._advance(digits + 1)
                return TokenKind.ENUM_MARKER
        return None

    def _lex_text(self) -> TokenKind:
        # Always make progress, even on a lone special character.
        self._advance(1)
        while not self.is_eof:
            ch = self._current_char()
            if ch in " \t\r\n\\`$#[]":
                break
            if ch == "/" and self._peek_char() in "/*":
                if not self._source[self._start : self._position].endswith(_URL_SCHEMES):
                    break
            self._advance(1)
        return TokenKind.TEXT

    def _at_line_start(self) -> bool:
        index = self._position - 1
        while index >= 0:
            ch = self._source[index]
            if ch == "\n" or ch == "\r":
                return True
            if ch != " " and ch != "\t":
                return False
            index -= 1
        return True

    @staticmethod
    def _is_marker_end(ch: str) -> bool:
        return ch in " \t\r\n\0"

    @staticmethod
    def _is_embeddable(ch: str) -> bool:
        return ch.isalpha() or ch == "_" or ch in _EMBEDDABLE

    # -------------------------
    # Code
    # -------------------------

    def _lex_code(self) -> TokenKind:
        shared = self._lex_shared()
        if shared is not None:
            return shared

        ch = self._current_char()
        if ch == '"':
            return self._lex_string()
        if ch.isdigit() or (ch == "." and self._peek_char().isdigit()):
            return self._lex_number()
        if ch.isalpha() or ch == "_":
            return self._lex_identifier()

        two_char = _TWO_CHAR_TOKENS.get(ch + self._peek_char())
        if two_char is not None:
            self._advance(2)
            return two_char

        single_char = _ONE_CHAR_TOKENS.get(ch)
        self._advance(1)
        if single_char is not None:
            return single_char

        # Fallback: keep the character so the tree stays lossless.
        return TokenKind.SKIPPED

    def _lex_string(self) -> TokenKind:
        self._advance(1)
        while not self.is_eof:
            ch = self._current_char()
            if ch == "\\":
                self._advance(2 if self._peek_char() != "\0" else 1)
                continue
            self._advance(1)
            if ch == '"':
                return TokenKind.STR
        self._flags |= TokenFlags.UNTERMINATED
        return TokenKind.STR

    def _lex_number(self) -> TokenKind:
        if self._current_char() == "0" and self._peek_char() in "xob":
            self._advance(2)
            while self._current_char().isalnum():
                self._advance(1)
            return TokenKind.INT

        is_float = False
        while self._current_char().isdigit():
            self._advance(1)
        if self._current_char() == "." and self._peek_char().isdigit():
            is_float = True
            self._advance(1)
            while self._current_char().isdigit():
                self._advance(1)
        if self._current_char() in "eE" and (
            self._peek_char().isdigit() or (self._peek_char() in "+-" and self._peek_char(2).isdigit())
        ):
            is_float = True
            self._advance(2)
            while self._current_char().isdigit():
                self._advance(1)

        for unit in _UNITS:
            if self._source.startswith(unit, self._position):
                after = self._position + len(unit)
                if after >= len(self._source) or not self._source[after].isalnum():
                    self._advance(len(unit))
                    return TokenKind.NUMERIC

        return TokenKind.FLOAT if is_float else TokenKind.INT

    def _lex_identifier(self) -> TokenKind:
        self._advance(1)
        while not self.is_eof:
            ch = self._current_char()
            if ch.isalnum() or ch == "_" or ch == "-":
                self._advance(1)
                continue
            break
        text = self._source[self._start : self._position]
        return KEYWORDS.get(text, TokenKind.IDENT)

    # -------------------------
    # Cursor
    # -------------------------

    def _current_char(self) -> str:
        if self.is_eof:
            return "\0"
        return self._source[self._position]

    def _peek_char(self, ahead: int = 1) -> str:
        index = self._position + ahead
        if index >= len(self._source):
            return "\0"
        return self._source[index]

    def _advance(self, steps: int) -> None:
        self._position = min(self._position + steps, len(self._source))


def token_text(source: str, token: Token) -> str:
    """Get the text of a token from the source string based on its range."""
    if token.kind == TokenKind.EOF:
        return ""
    return slice_text_range(source, token.range)


def dump_tokens(tokens: list[Token], source: str) -> None:
    """Print token list with kind, range, flags, and text for debugging."""
    for i, tok in enumerate(tokens):
        text = token_text(source, tok)
        print(f"{i:03d} {tok.kind.name:<18} range={tok.range.as_tuple()} flags={tok.flags} text={text!r}")
