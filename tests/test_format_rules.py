import logging
import textwrap

import pytest

from tests._shared_cases import case_source
from typstfmt.format import FormatOptions, format, run_format
from typstfmt.format import rules


def _format(source: str, **options: int) -> str:
    return format(source, FormatOptions(**options))


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("#let y = a+b\n", "#let y = a + b\n"),
        ("#let y = a  +   b*c\n", "#let y = a + b * c\n"),
        ("#let z = x  not  in  y\n", "#let z = x not in y\n"),
        ("#let b = a==b and c!=d\n", "#let b = a == b and c != d\n"),
        ("#(1+2)\n", "#(1 + 2)\n"),
        ("#{ x+=1 }\n", "#{ x += 1 }\n"),
    ],
)
def test_format_binary_spacing(source: str, expected: str) -> None:
    assert _format(source) == expected


def test_format_named_spacing() -> None:
    assert _format("#f(a:1)\n") == "#f(a: 1)\n"
    assert _format("#set text(size : 12pt, fill :red)\n") == "#set text(size: 12pt, fill: red)\n"
    assert _format('#let d = ("key"  :  1)\n') == '#let d = ("key": 1)\n'


def test_format_let_spacing() -> None:
    assert _format("#let x=1\n") == "#let x = 1\n"
    assert _format("#let   x  =  1\n") == "#let x = 1\n"
    assert _format("#let (a,b)=pair\n") == "#let (a, b) = pair\n"


def test_format_closures() -> None:
    assert _format("#let add(a,b)=a+b\n") == "#let add(a, b) = a + b\n"
    assert _format("#let f = (x)=>x*2\n") == "#let f = (x) => x * 2\n"
    assert _format("#show heading:it=>it.body\n") == "#show heading:it => it.body\n"


def test_format_collapses_markup_spaces() -> None:
    assert _format("Hello    world\n") == "Hello world\n"
    assert _format("a\n\n\n\n\nb\n") == "a\n\nb\n"
    assert _format("a  \n  b\n") == "a\nb\n"


def test_format_keeps_verbatim_tokens() -> None:
    source = 'Inline `a    b` and $x  +  y$ and #"s  p".\n'
    assert _format(source) == source


def test_format_keeps_list_indentation() -> None:
    source = "- one\n  - nested\n    - deeper\n- two\n"
    assert _format(source) == source


@pytest.mark.parametrize(
    "name",
    ["list_item_continuation", "enum_item_continuation", "term_item_continuation", "list_in_content_block"],
)
def test_format_keeps_item_continuation_indentation(name: str) -> None:
    source = case_source(name)
    assert _format(source) == source


def test_format_item_continuation_drops_trailing_spaces_only() -> None:
    assert _format("- item   \n    continued\n\n\n\n- next\n") == "- item\n    continued\n\n- next\n"
    assert _format("Para  \n   text\n- item\n") == "Para\n   text\n- item\n"


def test_format_keeps_non_trivia_token_order() -> None:
    source = "#let  total = price*count + tax // sum\n"
    formatted = _format(source)
    assert formatted.split() == ["#let", "total", "=", "price", "*", "count", "+", "tax", "//", "sum"]


def test_format_collection_with_comment_keeps_line_breaks() -> None:
    assert _format("#f(a, // note\n  b)\n") == "#f(a, // note\n  b)\n"
    assert _format("#f(a,  // note\nb ,c)\n") == "#f(a, // note\n  b, c)\n"
    assert _format("#let xs = (\n      1, // one\n    2,\n  )\n") == "#let xs = (\n  1, // one\n  2,\n)\n"


def test_format_binary_over_width_warns_once_and_keeps_text() -> None:
    source = "#let x = aaaa + bbbbbb\n"
    result = run_format(source, FormatOptions(max_line_length=10))

    assert result.formatted_text == source
    assert not result.changed
    assert [d.code for d in result.diagnostics] == ["FORMAT_BINARY_BREAK_UNSUPPORTED"]
    assert result.diagnostics[0].severity == "warning"
    assert result.diagnostics[0].range.as_tuple() == (9, 22)
    assert not result.has_errors


def test_format_binary_chain_over_width_warns_once() -> None:
    source = "#let x = aaaaaaaaaaa+bbbb+cc\n"
    result = run_format(source, FormatOptions(max_line_length=10))

    assert result.formatted_text == "#let x = aaaaaaaaaaa + bbbb + cc\n"
    assert [d.code for d in result.diagnostics] == ["FORMAT_BINARY_BREAK_UNSUPPORTED"]
    assert result.diagnostics[0].range.as_tuple() == (9, 28)


def test_format_binary_at_width_does_not_warn() -> None:
    source = "#let x = aaaa + bbbbb\n"
    result = run_format(source, FormatOptions(max_line_length=12))
    assert result.diagnostics == []


def test_format_binary_warning_is_logged_by_format(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="typstfmt"):
        formatted = _format("#let x = aaaa + bbbbbb\n", max_line_length=10)

    assert formatted == "#let x = aaaa + bbbbbb\n"
    assert [record.getMessage() for record in caplog.records] == [
        "FORMAT_BINARY_BREAK_UNSUPPORTED: Binary expression exceeds the maximum line length; "
        "breaking binary expressions is not supported yet."
    ]


def test_format_binary_breaking_layout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(rules, "BINARY_BREAKING_SUPPORTED", True)
    result = run_format("#let x = aaaa + bbbbbb\n", FormatOptions(max_line_length=10))

    assert result.formatted_text == textwrap.dedent(
        """\
        #let x = aaaa
          + bbbbbb
        """
    )
    assert result.diagnostics == []


def test_format_binary_breaking_keeps_not_in_together(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(rules, "BINARY_BREAKING_SUPPORTED", True)
    result = run_format("#let x = item not in values\n", FormatOptions(max_line_length=10))
    assert result.formatted_text == "#let x = item\n  not in values\n"
