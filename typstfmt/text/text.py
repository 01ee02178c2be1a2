from bisect import bisect_right
from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True, slots=True, order=True)
class TextSize:
    """Offset into, or length of, a Typst source text (in str indices)."""

    value: int

    def __post_init__(self):
        if self.value < 0:
            raise ValueError("TextSize cannot be negative")

    @staticmethod
    def from_int(value: int) -> "TextSize":
        return TextSize(value)

    def __add__(self, other: "TextSize") -> "TextSize":
        return TextSize(self.value + other.value)

    def __repr__(self) -> str:
        return f"TextSize({self.value})"


ZERO: Final[TextSize] = TextSize(0)


@dataclass(frozen=True, slots=True, order=True)
class TextRange:
    """Half-open range [start, end) of a token, node or diagnostic."""

    _start: int
    _end: int

    def __post_init__(self):
        if self._start < 0 or self._start > self._end:
            raise ValueError(f"Invalid text range {self._start}..{self._end}")

    @staticmethod
    def from_offsets(start: int, end: int) -> "TextRange":
        return TextRange(start, end)

    @property
    def start(self) -> TextSize:
        return TextSize(self._start)

    @property
    def end(self) -> TextSize:
        return TextSize(self._end)

    def len(self) -> TextSize:
        return TextSize(self._end - self._start)

    def is_empty(self) -> bool:
        return self._start == self._end

    def as_tuple(self) -> tuple[int, int]:
        return (self._start, self._end)

    def __repr__(self) -> str:
        return f"TextRange({self._start}, {self._end})"


def slice_text_range(source: str, range: TextRange) -> str:
    return source[range.start.value : range.end.value]


class LineIndex:
    """Maps offsets to 1-based line and column numbers for reporting.

    Both `\\n` and `\\r\\n` end a line; a lone `\\r` does not.
    """

    def __init__(self, source: str) -> None:
        self._line_starts = [0]
        for index, ch in enumerate(source):
            if ch == "\n":
                self._line_starts.append(index + 1)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def line_col(self, offset: TextSize | int) -> tuple[int, int]:
        value = offset.value if isinstance(offset, TextSize) else offset
        line = bisect_right(self._line_starts, value) - 1
        return line + 1, value - self._line_starts[line] + 1
