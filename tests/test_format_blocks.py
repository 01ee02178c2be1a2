import textwrap

from typstfmt.format import FormatOptions, format


def _format(source: str, **options: int) -> str:
    return format(source, FormatOptions(**options))


def test_code_block_empty() -> None:
    assert _format("#{}\n") == "#{}\n"
    assert _format("#{   }\n") == "#{}\n"


def test_code_block_single_entry_inline() -> None:
    assert _format("#{x}\n") == "#{ x }\n"
    assert _format("#{\n  x\n}\n") == "#{ x }\n"


def test_code_block_single_entry_too_wide() -> None:
    assert _format("#{ aaaa + bbbb }\n", max_line_length=12) == "#{\n  aaaa + bbbb\n}\n"


def test_code_block_statements_one_per_line() -> None:
    assert _format("#{let x=1;x}\n") == textwrap.dedent(
        """\
        #{
          let x = 1
          x
        }
        """
    )


def test_code_block_keeps_single_blank_line_and_comments() -> None:
    source = "#{\n    let a = 1\n\n\n\n  // second\n  let b = 2 // trailing\n}\n"
    assert _format(source) == textwrap.dedent(
        """\
        #{
          let a = 1

          // second
          let b = 2 // trailing
        }
        """
    )


def test_code_block_line_comment_forces_block_layout() -> None:
    assert _format("#{ x // why\n}\n") == "#{\n  x // why\n}\n"


def test_code_block_nested() -> None:
    source = "#{\nif x {\nlet y = 1\ny\n}\n}\n"
    assert _format(source) == textwrap.dedent(
        """\
        #{
          if x {
            let y = 1
            y
          }
        }
        """
    )


def test_content_block_inline_is_kept() -> None:
    assert _format("#box[ hi ]\n") == "#box[ hi ]\n"
    assert _format("#box[hi]\n") == "#box[hi]\n"


def test_content_block_block_style_is_indented() -> None:
    assert _format("#box[\nhello\n    world\n]\n") == "#box[\n  hello\n  world\n]\n"


def test_content_block_with_list_is_kept() -> None:
    source = "#box[\n- a\n  - b\n]\n"
    assert _format(source) == source


def test_content_block_with_list_keeps_continuation_lines() -> None:
    assert _format("#box[\n  - li  \n    cont\n]\n") == "#box[\n  - li\n    cont\n]\n"


def test_content_block_nested() -> None:
    assert _format("#box[\n#box[\nx\n]\n]\n") == textwrap.dedent(
        """\
        #box[
          #box[
            x
          ]
        ]
        """
    )
