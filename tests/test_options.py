import textwrap
from pathlib import Path

import pytest

from typstfmt.format import FormatOptions, IndentStyle, discover_options, load_options


def test_default_options() -> None:
    options = FormatOptions()
    assert options.max_line_length == 80
    assert options.indent_width == 2
    assert options.indent_style == IndentStyle.SPACE
    assert options.indent_unit == "  "


def test_indent_unit_follows_style() -> None:
    assert FormatOptions(indent_width=4).indent_unit == "    "
    assert FormatOptions(indent_style="tab").indent_unit == "\t"
    assert FormatOptions(indent_style="tab").indent_style is IndentStyle.TAB


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_line_length": 0},
        {"max_line_length": -5},
        {"indent_width": 0},
        {"max_line_length": "80"},
        {"indent_width": True},
        {"indent_style": "spaces"},
    ],
)
def test_invalid_options_raise(kwargs: dict[str, object]) -> None:
    with pytest.raises(ValueError):
        FormatOptions(**kwargs)


def test_from_mapping_accepts_dashed_and_legacy_keys() -> None:
    options = FormatOptions.from_mapping({"max-line-length": 100, "indent_space": 4, "indent-style": "tab"})
    assert options == FormatOptions(max_line_length=100, indent_width=4, indent_style=IndentStyle.TAB)


def test_from_mapping_rejects_unknown_keys() -> None:
    with pytest.raises(ValueError, match="Unknown format option: 'width'"):
        FormatOptions.from_mapping({"width": 10})


def test_merged_ignores_none() -> None:
    base = FormatOptions(max_line_length=40)
    merged = base.merged({"max_line_length": None, "indent_width": 3})
    assert merged == FormatOptions(max_line_length=40, indent_width=3)


def test_load_options_from_typstfmt_toml(tmp_path: Path) -> None:
    config = tmp_path / "typstfmt.toml"
    config.write_text("max_line_length = 60\nindent_width = 4\n", encoding="utf-8")

    assert load_options(config) == FormatOptions(max_line_length=60, indent_width=4)


def test_load_options_from_pyproject(tmp_path: Path) -> None:
    config = tmp_path / "pyproject.toml"
    config.write_text(
        textwrap.dedent(
            """
            [project]
            name = "paper"

            [tool.typstfmt]
            max-line-length = 100
            indent-style = "tab"
            """
        ),
        encoding="utf-8",
    )

    assert load_options(config) == FormatOptions(max_line_length=100, indent_style=IndentStyle.TAB)


def test_load_options_from_pyproject_without_table(tmp_path: Path) -> None:
    config = tmp_path / "pyproject.toml"
    config.write_text('[project]\nname = "paper"\n', encoding="utf-8")
    assert load_options(config) == FormatOptions()


def test_load_options_invalid_toml(tmp_path: Path) -> None:
    config = tmp_path / "typstfmt.toml"
    config.write_text("max_line_length = \n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_options(config)


def test_discover_options(tmp_path: Path) -> None:
    assert discover_options(tmp_path) == FormatOptions()

    (tmp_path / "typstfmt.toml").write_text("max_line_length = 30\n", encoding="utf-8")
    assert discover_options(tmp_path) == FormatOptions(max_line_length=30)
