"""Diagnostic record shared by the lexer, the parser and the formatter."""

from dataclasses import dataclass
from typing import Literal

from typstfmt.text import TextRange

# Errors block formatting; warnings only describe a layout that could not be reached.
Severity = Literal["error", "warning"]


@dataclass(frozen=True, slots=True)
class Diagnostic:
    code: str
    message: str
    range: TextRange
    severity: Severity = "error"
    hint: str | None = None
    category: str | None = None

    @property
    def is_error(self) -> bool:
        return self.severity == "error"
