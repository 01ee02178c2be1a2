"""Building, collecting and rendering diagnostics."""

from __future__ import annotations

from collections.abc import Iterable

from typstfmt.diagnostics.codes import DiagnosticSpec
from typstfmt.diagnostics.diagnostic import Diagnostic
from typstfmt.text import LineIndex, TextRange


def collect_diagnostics(*groups: Iterable[Diagnostic]) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    for group in groups:
        diagnostics.extend(group)
    return diagnostics


def has_errors(diagnostics: Iterable[Diagnostic]) -> bool:
    return any(diagnostic.is_error for diagnostic in diagnostics)


def diagnostic_from_spec(spec: DiagnosticSpec, range: TextRange, message: str | None = None) -> Diagnostic:
    return Diagnostic(
        code=spec.code,
        message=message if message is not None else spec.message,
        range=range,
        severity=spec.severity,
        hint=spec.hint,
        category=spec.category,
    )


def render_diagnostic(diagnostic: Diagnostic, name: str, lines: LineIndex) -> str:
    """`name:line:column: severity CODE message`, plus the hint on its own line."""
    line, column = lines.line_col(diagnostic.range.start)
    rendered = f"{name}:{line}:{column}: {diagnostic.severity} {diagnostic.code} {diagnostic.message}"
    if diagnostic.hint:
        rendered += f"\n  hint: {diagnostic.hint}"
    return rendered
