"""Lexer tokens."""

from dataclasses import dataclass
from enum import IntEnum, IntFlag, StrEnum
from typing import Final

from typstfmt.text import TextRange


class LexMode(StrEnum):
    """Typst switches tokenization rules between markup and code."""

    MARKUP = "markup"
    CODE = "code"


class TokenKind(IntEnum):
    # -------------------------
    # Special / sentinels
    # -------------------------
    EOF = 1
    SKIPPED = 2  # unrecognized character, reported by the parser

    # -------------------------
    # Trivia (skipped by the parser in code mode)
    # -------------------------
    SPACE = 10
    LINE_COMMENT = 11  # // ...
    BLOCK_COMMENT = 12  # /* ... */

    # -------------------------
    # Markup
    # -------------------------
    TEXT = 20
    LINEBREAK = 21  # \ before whitespace
    ESCAPE = 22  # \#
    HEADING_MARKER = 23  # = at line start
    LIST_MARKER = 24  # - at line start
    ENUM_MARKER = 25  # + or 1. at line start
    TERM_MARKER = 26  # / at line start
    HASH = 27  # # before embedded code
    RAW = 28  # `...`
    EQUATION = 29  # $...$

    # -------------------------
    # Identifiers / literals
    # -------------------------
    IDENT = 40
    INT = 41
    FLOAT = 42
    NUMERIC = 43  # 12pt, 50%
    STR = 44
    BOOL = 45
    NONE = 46
    AUTO = 47

    # -------------------------
    # Keywords
    # -------------------------
    LET = 60
    SET = 61
    SHOW = 62
    IF = 63
    ELSE = 64
    FOR = 65
    IN = 66
    WHILE = 67
    BREAK = 68
    CONTINUE = 69
    RETURN = 70
    IMPORT = 71
    INCLUDE = 72
    AS = 73
    NOT = 74
    AND = 75
    OR = 76
    CONTEXT = 77

    # -------------------------
    # Punctuation / delimiters
    # -------------------------
    LPAREN = 80  # (
    RPAREN = 81  # )
    LBRACKET = 82  # [
    RBRACKET = 83  # ]
    LBRACE = 84  # {
    RBRACE = 85  # }
    COMMA = 86  # ,
    SEMICOLON = 87  # ;
    COLON = 88  # :
    DOT = 89  # .
    DOTS = 90  # ..
    ARROW = 91  # =>

    # -------------------------
    # Operators
    # -------------------------
    EQ = 100  # =
    EQ_EQ = 101  # ==
    EXCL_EQ = 102  # !=
    LT = 103  # <
    LT_EQ = 104  # <=
    GT = 105  # >
    GT_EQ = 106  # >=
    PLUS = 107  # +
    MINUS = 108  # -
    STAR = 109  # *
    SLASH = 110  # /
    PLUS_EQ = 111  # +=
    HYPH_EQ = 112  # -=
    STAR_EQ = 113  # *=
    SLASH_EQ = 114  # /=

    @property
    def is_trivia(self) -> bool:
        return self in (
            TokenKind.SPACE,
            TokenKind.LINE_COMMENT,
            TokenKind.BLOCK_COMMENT,
        )


KEYWORDS: Final[dict[str, TokenKind]] = {
    "let": TokenKind.LET,
    "set": TokenKind.SET,
    "show": TokenKind.SHOW,
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "for": TokenKind.FOR,
    "in": TokenKind.IN,
    "while": TokenKind.WHILE,
    "break": TokenKind.BREAK,
    "continue": TokenKind.CONTINUE,
    "return": TokenKind.RETURN,
    "import": TokenKind.IMPORT,
    "include": TokenKind.INCLUDE,
    "as": TokenKind.AS,
    "not": TokenKind.NOT,
    "and": TokenKind.AND,
    "or": TokenKind.OR,
    "context": TokenKind.CONTEXT,
    "none": TokenKind.NONE,
    "auto": TokenKind.AUTO,
    "true": TokenKind.BOOL,
    "false": TokenKind.BOOL,
}


class TokenFlags(IntFlag):
    """Token metadata flags."""

    NONE = 0
    HAS_NEWLINE = 1 << 0  # SPACE containing a line break
    UNTERMINATED = 1 << 1  # STR/RAW/EQUATION/BLOCK_COMMENT running into EOF


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexed token (trivia or non-trivia)."""

    kind: TokenKind
    range: TextRange
    flags: TokenFlags = TokenFlags.NONE

    def has_newline(self) -> bool:
        return bool(self.flags & TokenFlags.HAS_NEWLINE)

    def is_unterminated(self) -> bool:
        return bool(self.flags & TokenFlags.UNTERMINATED)
