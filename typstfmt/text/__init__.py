"""Text offsets, ranges and line lookup."""

from typstfmt.text.text import ZERO, LineIndex, TextRange, TextSize, slice_text_range

__all__ = ["ZERO", "LineIndex", "TextRange", "TextSize", "slice_text_range"]
