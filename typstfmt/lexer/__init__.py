"""Lexer."""

from typstfmt.lexer.lexer import Lexer, dump_tokens, token_text
from typstfmt.lexer.tokens import (
    KEYWORDS,
    LexMode,
    Token,
    TokenFlags,
    TokenKind,
)

__all__ = [
    "KEYWORDS",
    "LexMode",
    "Lexer",
    "Token",
    "TokenFlags",
    "TokenKind",
    "dump_tokens",
    "token_text",
]
