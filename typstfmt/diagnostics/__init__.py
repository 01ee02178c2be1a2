"""Diagnostics."""

from typstfmt.diagnostics.codes import (
    FORMAT_BINARY_BREAK_UNSUPPORTED,
    LEXER_UNTERMINATED_COMMENT,
    LEXER_UNTERMINATED_EQUATION,
    LEXER_UNTERMINATED_RAW,
    LEXER_UNTERMINATED_STRING,
    PARSER_EXPECTED_BLOCK,
    PARSER_EXPECTED_EXPRESSION,
    PARSER_EXPECTED_STATEMENT_END,
    PARSER_EXPECTED_TOKEN,
    PARSER_UNEXPECTED_CLOSING_BRACKET,
    PARSER_UNEXPECTED_TOKEN,
    DiagnosticSpec,
)
from typstfmt.diagnostics.diagnostic import Diagnostic, Severity
from typstfmt.diagnostics.report import collect_diagnostics, diagnostic_from_spec, has_errors, render_diagnostic

__all__ = [
    "FORMAT_BINARY_BREAK_UNSUPPORTED",
    "LEXER_UNTERMINATED_COMMENT",
    "LEXER_UNTERMINATED_EQUATION",
    "LEXER_UNTERMINATED_RAW",
    "LEXER_UNTERMINATED_STRING",
    "PARSER_EXPECTED_BLOCK",
    "PARSER_EXPECTED_EXPRESSION",
    "PARSER_EXPECTED_STATEMENT_END",
    "PARSER_EXPECTED_TOKEN",
    "PARSER_UNEXPECTED_CLOSING_BRACKET",
    "PARSER_UNEXPECTED_TOKEN",
    "Diagnostic",
    "DiagnosticSpec",
    "Severity",
    "collect_diagnostics",
    "diagnostic_from_spec",
    "has_errors",
    "render_diagnostic",
]
