"""Result of one formatting run."""

from __future__ import annotations

from dataclasses import dataclass

from typstfmt.diagnostics import Diagnostic, has_errors
from typstfmt.pipeline.result import TypstParseResult


@dataclass(frozen=True, slots=True)
class FormatRunResult:
    """Formatted text plus every diagnostic of the run.

    When the parse failed, `formatted_text` is the untouched source and
    `changed` is False.
    """

    parse: TypstParseResult
    formatted_text: str
    diagnostics: list[Diagnostic]
    changed: bool

    @property
    def has_errors(self) -> bool:
        return has_errors(self.diagnostics)

    @property
    def warnings(self) -> list[Diagnostic]:
        return [diagnostic for diagnostic in self.diagnostics if not diagnostic.is_error]
