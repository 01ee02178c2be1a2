"""Diagnostic codes and messages."""

from dataclasses import dataclass
from typing import Final

from typstfmt.diagnostics.diagnostic import Severity


@dataclass(frozen=True, slots=True)
class DiagnosticSpec:
    code: str
    message: str
    hint: str | None = None
    severity: Severity = "error"
    category: str | None = None


LEXER_UNTERMINATED_STRING: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_STRING",
    message="Unterminated string literal.",
    hint="Close the string with a double quote.",
    severity="error",
    category="lexer",
)

LEXER_UNTERMINATED_RAW: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_RAW",
    message="Unterminated raw text.",
    hint="Close the raw text with the same number of backticks it was opened with.",
    severity="error",
    category="lexer",
)

LEXER_UNTERMINATED_COMMENT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_COMMENT",
    message="Unterminated block comment.",
    hint="Close the comment with `*/`.",
    severity="error",
    category="lexer",
)

LEXER_UNTERMINATED_EQUATION: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_EQUATION",
    message="Unterminated equation.",
    hint="Close the equation with `$`.",
    severity="error",
    category="lexer",
)

PARSER_EXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_TOKEN",
    message="Expected token",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_EXPRESSION: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_EXPRESSION",
    message="Expected an expression",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_BLOCK: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_BLOCK",
    message="Expected a code block or content block",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_STATEMENT_END: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_STATEMENT_END",
    message="Expected semicolon or line break",
    severity="error",
    category="parser",
)

PARSER_UNEXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNEXPECTED_TOKEN",
    message="Unexpected token",
    severity="error",
    category="parser",
)

PARSER_UNEXPECTED_CLOSING_BRACKET: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNEXPECTED_CLOSING_BRACKET",
    message="Unexpected closing bracket",
    hint="Escape the bracket with a backslash if it is meant as text.",
    severity="error",
    category="parser",
)

FORMAT_BINARY_BREAK_UNSUPPORTED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="FORMAT_BINARY_BREAK_UNSUPPORTED",
    message="Binary expression exceeds the maximum line length; breaking binary expressions is not supported yet.",
    hint="Split the expression with intermediate `let` bindings.",
    severity="warning",
    category="format",
)
