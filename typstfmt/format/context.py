"""Formatting context shared by all rules of one `format` call."""

from __future__ import annotations

import re
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Final, TypeAlias

from typstfmt.diagnostics import Diagnostic
from typstfmt.format.options import FormatOptions

_SPACE_RUN: Final = re.compile(r" {2,}")
_NEWLINE_RUN: Final = re.compile(r"\n{3,}")

# Enough of the buffer tail to see a run that crosses the junction.
_JUNCTION: Final = 2

Buffer: TypeAlias = list[str]


class FormatContext:
    """Options, indentation depth and the diagnostic sink of a formatting run.

    Rules build their output in a `Buffer`, a list of string pieces joined
    once at the end.
    """

    def __init__(self, options: FormatOptions | None = None) -> None:
        self.options = options if options is not None else FormatOptions()
        self._indent_depth = 0
        self.diagnostics: list[Diagnostic] = []

    @property
    def indent_depth(self) -> int:
        return self._indent_depth

    @property
    def indent(self) -> str:
        return self.options.indent_unit * self._indent_depth

    @contextmanager
    def indented(self) -> Iterator[None]:
        self._indent_depth += 1
        try:
            yield
        finally:
            self._indent_depth -= 1

    def push_in(self, text: str, buf: Buffer) -> None:
        """Append `text`, collapsing space runs and more than two newlines."""
        if not text:
            return
        tail = _tail(buf, _JUNCTION)
        joined = _NEWLINE_RUN.sub("\n\n", _SPACE_RUN.sub(" ", tail + text))
        _drop_tail(buf, len(tail))
        buf.append(joined)

    def push_raw_in(self, text: str, buf: Buffer) -> None:
        if text:
            buf.append(text)

    def push_raw_indent(self, text: str, buf: Buffer) -> None:
        """Append `text` with every non-empty line indented to the current depth."""
        indent = self.indent
        lines = text.split("\n")
        buf.append("\n".join(indent + line if line else line for line in lines))

    def emit(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)


def render(buf: Buffer) -> str:
    return "".join(buf)


def _tail(buf: Buffer, size: int) -> str:
    pieces: list[str] = []
    length = 0
    for piece in reversed(buf):
        pieces.append(piece)
        length += len(piece)
        if length >= size:
            break
    return "".join(reversed(pieces))[-size:]


def _drop_tail(buf: Buffer, size: int) -> None:
    while size > 0 and buf:
        last = buf.pop()
        if len(last) > size:
            buf.append(last[:-size])
            return
        size -= len(last)
