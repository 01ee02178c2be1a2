"""Unified syntax kinds for parser and CST."""

from enum import IntEnum

from typstfmt.lexer import TokenKind


class TypstSyntaxKind(IntEnum):
    """Language syntax vocabulary (tokens + nodes).

    Token kinds share their values with `TokenKind`.
    """

    TOMBSTONE = 0
    EOF = 1
    SKIPPED = 2

    # Trivia tokens
    SPACE = 10
    LINE_COMMENT = 11
    BLOCK_COMMENT = 12

    # Markup tokens
    TEXT = 20
    LINEBREAK = 21
    ESCAPE = 22
    HEADING_MARKER = 23
    LIST_MARKER = 24
    ENUM_MARKER = 25
    TERM_MARKER = 26
    HASH = 27
    RAW = 28
    EQUATION = 29

    # Identifiers / literals
    IDENT = 40
    INT = 41
    FLOAT = 42
    NUMERIC = 43
    STR = 44
    BOOL = 45
    NONE = 46
    AUTO = 47

    # Keywords
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

    # Punctuation
    LPAREN = 80
    RPAREN = 81
    LBRACKET = 82
    RBRACKET = 83
    LBRACE = 84
    RBRACE = 85
    COMMA = 86
    SEMICOLON = 87
    COLON = 88
    DOT = 89
    DOTS = 90
    ARROW = 91

    # Operators
    EQ = 100
    EQ_EQ = 101
    EXCL_EQ = 102
    LT = 103
    LT_EQ = 104
    GT = 105
    GT_EQ = 106
    PLUS = 107
    MINUS = 108
    STAR = 109
    SLASH = 110
    PLUS_EQ = 111
    HYPH_EQ = 112
    STAR_EQ = 113
    SLASH_EQ = 114

    # Node kinds
    MARKUP = 1000
    ERROR = 1001
    CONTENT_BLOCK = 1002
    CODE_BLOCK = 1003
    FUNC_CALL = 1004
    ARGS = 1005
    PARAMS = 1006
    NAMED = 1007
    KEYED = 1008
    SPREAD = 1009
    ARRAY = 1010
    DICT = 1011
    PARENTHESIZED = 1012
    DESTRUCTURING = 1013
    BINARY = 1014
    UNARY = 1015
    FIELD_ACCESS = 1016
    CLOSURE = 1017
    LET_BINDING = 1018
    SET_RULE = 1019
    SHOW_RULE = 1020
    CONDITIONAL = 1021
    WHILE_LOOP = 1022
    FOR_LOOP = 1023
    MODULE_IMPORT = 1024
    IMPORT_ITEMS = 1025
    MODULE_INCLUDE = 1026
    LOOP_BREAK = 1027
    LOOP_CONTINUE = 1028
    FUNC_RETURN = 1029
    CONTEXTUAL = 1030

    @property
    def is_trivia(self) -> bool:
        return self in (
            TypstSyntaxKind.SPACE,
            TypstSyntaxKind.LINE_COMMENT,
            TypstSyntaxKind.BLOCK_COMMENT,
        )

    @property
    def is_comment(self) -> bool:
        return self in (TypstSyntaxKind.LINE_COMMENT, TypstSyntaxKind.BLOCK_COMMENT)

    @property
    def is_token(self) -> bool:
        return self != TypstSyntaxKind.TOMBSTONE and self.value < TypstSyntaxKind.MARKUP.value

    @property
    def is_node(self) -> bool:
        return self.value >= TypstSyntaxKind.MARKUP.value

    @property
    def is_binary_operator(self) -> bool:
        """Tokens that sit between the operands of a BINARY node.

        NOT only ever appears there as the first half of `not in`.
        """
        return self in _BINARY_OPERATORS

    @property
    def is_verbatim(self) -> bool:
        """Leaves whose inner whitespace is content and must not be touched."""
        return self in (
            TypstSyntaxKind.RAW,
            TypstSyntaxKind.STR,
            TypstSyntaxKind.EQUATION,
            TypstSyntaxKind.LINE_COMMENT,
            TypstSyntaxKind.BLOCK_COMMENT,
        )

    @property
    def is_line_marker(self) -> bool:
        """Markup markers whose indentation decides nesting."""
        return self in (
            TypstSyntaxKind.LIST_MARKER,
            TypstSyntaxKind.ENUM_MARKER,
            TypstSyntaxKind.TERM_MARKER,
        )

    @staticmethod
    def from_token_kind(kind: TokenKind) -> "TypstSyntaxKind":
        try:
            return TypstSyntaxKind[kind.name]
        except KeyError:
            raise ValueError(f"Unsupported TokenKind mapping: {kind!r}") from None


_BINARY_OPERATORS = frozenset(
    {
        TypstSyntaxKind.PLUS,
        TypstSyntaxKind.MINUS,
        TypstSyntaxKind.STAR,
        TypstSyntaxKind.SLASH,
        TypstSyntaxKind.EQ_EQ,
        TypstSyntaxKind.EXCL_EQ,
        TypstSyntaxKind.LT,
        TypstSyntaxKind.LT_EQ,
        TypstSyntaxKind.GT,
        TypstSyntaxKind.GT_EQ,
        TypstSyntaxKind.AND,
        TypstSyntaxKind.OR,
        TypstSyntaxKind.IN,
        TypstSyntaxKind.NOT,
        TypstSyntaxKind.EQ,
        TypstSyntaxKind.PLUS_EQ,
        TypstSyntaxKind.HYPH_EQ,
        TypstSyntaxKind.STAR_EQ,
        TypstSyntaxKind.SLASH_EQ,
    }
)
