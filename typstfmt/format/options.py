"""Formatter configuration options."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import StrEnum
from pathlib import Path
from typing import Any, Final

CONFIG_FILE_NAME: Final = "typstfmt.toml"

# Older configuration files spell the indent width this way.
_LEGACY_KEYS: Final[dict[str, str]] = {
    "indent_space": "indent_width",
}


class IndentStyle(StrEnum):
    """Character used for one level of indentation."""

    SPACE = "space"
    TAB = "tab"


@dataclass(frozen=True, slots=True)
class FormatOptions:
    """Width budget and indentation used by the formatting rules."""

    max_line_length: int = 80
    indent_width: int = 2
    indent_style: IndentStyle = IndentStyle.SPACE

    def __post_init__(self) -> None:
        if isinstance(self.max_line_length, bool) or not isinstance(self.max_line_length, int):
            raise ValueError(f"max_line_length must be an integer, got {self.max_line_length!r}")
        if isinstance(self.indent_width, bool) or not isinstance(self.indent_width, int):
            raise ValueError(f"indent_width must be an integer, got {self.indent_width!r}")
        if self.max_line_length <= 0:
            raise ValueError("max_line_length must be positive")
        if self.indent_width <= 0:
            raise ValueError("indent_width must be positive")
        # Accept plain strings from config files.
        object.__setattr__(self, "indent_style", IndentStyle(self.indent_style))

    @property
    def indent_unit(self) -> str:
        if self.indent_style == IndentStyle.TAB:
            return "\t"
        return " " * self.indent_width

    @staticmethod
    def from_mapping(mapping: Mapping[str, Any]) -> FormatOptions:
        """Build options from a config table, rejecting unknown keys."""
        known = {option.name for option in fields(FormatOptions)}
        values: dict[str, Any] = {}
        for key, value in mapping.items():
            name = _LEGACY_KEYS.get(key, key.replace("-", "_"))
            if name not in known:
                raise ValueError(f"Unknown format option: {key!r}")
            values[name] = value
        return FormatOptions(**values)

    def merged(self, overrides: Mapping[str, Any]) -> FormatOptions:
        """Copy with the given non-None values replaced."""
        values = {option.name: getattr(self, option.name) for option in fields(self)}
        values.update({key: value for key, value in overrides.items() if value is not None})
        return FormatOptions(**values)


def load_options(path: str | Path) -> FormatOptions:
    """Read options from a `typstfmt.toml` or the `[tool.typstfmt]` table of a `pyproject.toml`."""
    config_path = Path(path)
    with config_path.open("rb") as handle:
        data = tomllib.load(handle)

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("typstfmt", {})
    if not isinstance(data, dict):
        raise ValueError(f"Expected a table of format options in {config_path}")
    return FormatOptions.from_mapping(data)


def discover_options(directory: str | Path) -> FormatOptions:
    """Options from `typstfmt.toml` in `directory`, or the defaults."""
    candidate = Path(directory) / CONFIG_FILE_NAME
    if candidate.is_file():
        return load_options(candidate)
    return FormatOptions()
