import pytest

from tests._debug import debug_dump_tokens
from tests._shared_cases import TYPST_CASES, TypstCase, case_id
from typstfmt.lexer import Lexer, LexMode, Token, TokenKind, token_text


def _lex(source: str, mode: LexMode = LexMode.MARKUP) -> list[Token]:
    return Lexer(source).lex(mode)


def _kinds(source: str, mode: LexMode = LexMode.MARKUP) -> list[TokenKind]:
    return [token.kind for token in _lex(source, mode)]


def _texts(source: str, mode: LexMode = LexMode.MARKUP) -> list[str]:
    return [token_text(source, token) for token in _lex(source, mode) if token.kind != TokenKind.EOF]


@pytest.mark.parametrize("case", TYPST_CASES, ids=case_id)
@pytest.mark.parametrize("mode", [LexMode.MARKUP, LexMode.CODE])
def test_lexer_is_lossless(case: TypstCase, mode: LexMode) -> None:
    tokens = _lex(case.source, mode)
    debug_dump_tokens(case.name, case.source, tokens)

    assert tokens[-1].kind == TokenKind.EOF
    assert "".join(token_text(case.source, token) for token in tokens) == case.source


def test_lexer_markup_line_markers() -> None:
    source = "= Title\n- item\n+ enum\n1. numbered\n/ Term: text\n"
    kinds = [kind for kind in _kinds(source) if kind not in (TokenKind.SPACE, TokenKind.TEXT)]

    assert kinds == [
        TokenKind.HEADING_MARKER,
        TokenKind.LIST_MARKER,
        TokenKind.ENUM_MARKER,
        TokenKind.ENUM_MARKER,
        TokenKind.TERM_MARKER,
        TokenKind.EOF,
    ]


def test_lexer_markers_only_at_line_start() -> None:
    assert _texts("a - b = c") == ["a", " ", "-", " ", "b", " ", "=", " ", "c"]
    assert TokenKind.LIST_MARKER not in _kinds("a - b = c")
    assert TokenKind.HEADING_MARKER not in _kinds("a - b = c")


def test_lexer_indented_list_marker() -> None:
    assert _kinds("- a\n  - b") == [
        TokenKind.LIST_MARKER,
        TokenKind.SPACE,
        TokenKind.TEXT,
        TokenKind.SPACE,
        TokenKind.LIST_MARKER,
        TokenKind.SPACE,
        TokenKind.TEXT,
        TokenKind.EOF,
    ]


def test_lexer_multi_level_heading() -> None:
    tokens = _lex("=== Deep")
    assert tokens[0].kind == TokenKind.HEADING_MARKER
    assert token_text("=== Deep", tokens[0]) == "==="


def test_lexer_hash_only_before_embeddable_code() -> None:
    assert _kinds("#f")[0] == TokenKind.HASH
    assert _kinds("#(")[0] == TokenKind.HASH
    assert _kinds("# not code")[0] == TokenKind.TEXT


def test_lexer_escape_and_linebreak() -> None:
    assert _kinds("\\#") == [TokenKind.ESCAPE, TokenKind.EOF]
    assert _kinds("\\u{1F600}") == [TokenKind.ESCAPE, TokenKind.EOF]
    assert _kinds("a\\ b")[:2] == [TokenKind.TEXT, TokenKind.LINEBREAK]


def test_lexer_url_keeps_slashes_in_text() -> None:
    source = "see https://typst.app now"
    assert _texts(source) == ["see", " ", "https://typst.app", " ", "now"]


def test_lexer_markup_comments() -> None:
    source = "a // note\nb /* block */ c"
    assert _kinds(source) == [
        TokenKind.TEXT,
        TokenKind.SPACE,
        TokenKind.LINE_COMMENT,
        TokenKind.SPACE,
        TokenKind.TEXT,
        TokenKind.SPACE,
        TokenKind.BLOCK_COMMENT,
        TokenKind.SPACE,
        TokenKind.TEXT,
        TokenKind.EOF,
    ]


def test_lexer_space_newline_flag() -> None:
    tokens = _lex("a \n b")
    assert tokens[1].kind == TokenKind.SPACE
    assert tokens[1].has_newline()
    assert not _lex("a b")[1].has_newline()


def test_lexer_raw_text() -> None:
    assert _texts("`a  b`") == ["`a  b`"]
    assert _texts("``") == ["``"]
    source = "```rust\nfn main() {}\n``` after"
    assert _texts(source) == ["```rust\nfn main() {}\n```", " ", "after"]


def test_lexer_equation_is_single_token() -> None:
    assert _texts("$x + y$ done") == ["$x + y$", " ", "done"]


@pytest.mark.parametrize(
    ("source", "kind", "mode"),
    [
        ('"abc', TokenKind.STR, LexMode.CODE),
        ("`abc", TokenKind.RAW, LexMode.MARKUP),
        ("/* abc", TokenKind.BLOCK_COMMENT, LexMode.MARKUP),
        ("$abc", TokenKind.EQUATION, LexMode.MARKUP),
    ],
)
def test_lexer_unterminated_tokens_are_flagged(source: str, kind: TokenKind, mode: LexMode) -> None:
    token = _lex(source, mode)[0]
    assert token.kind == kind
    assert token.is_unterminated()
    assert token.range.end.value == len(source)


def test_lexer_nested_block_comment() -> None:
    source = "/* a /* b */ c */"
    tokens = _lex(source)
    assert tokens[0].kind == TokenKind.BLOCK_COMMENT
    assert not tokens[0].is_unterminated()
    assert token_text(source, tokens[0]) == source


def test_lexer_code_keywords_and_identifiers() -> None:
    assert _kinds("let my-var = none", LexMode.CODE) == [
        TokenKind.LET,
        TokenKind.SPACE,
        TokenKind.IDENT,
        TokenKind.SPACE,
        TokenKind.EQ,
        TokenKind.SPACE,
        TokenKind.NONE,
        TokenKind.EOF,
    ]


@pytest.mark.parametrize(
    ("source", "kind"),
    [
        ("1", TokenKind.INT),
        ("0x1F", TokenKind.INT),
        ("1.5", TokenKind.FLOAT),
        ("2e10", TokenKind.FLOAT),
        ("12pt", TokenKind.NUMERIC),
        ("1.5em", TokenKind.NUMERIC),
        ("50%", TokenKind.NUMERIC),
        ('"a \\" b"', TokenKind.STR),
        ("true", TokenKind.BOOL),
        ("auto", TokenKind.AUTO),
    ],
)
def test_lexer_code_literals(source: str, kind: TokenKind) -> None:
    assert _kinds(source, LexMode.CODE) == [kind, TokenKind.EOF]


def test_lexer_code_operators() -> None:
    assert _kinds("=> == != <= >= += .. = <", LexMode.CODE)[::2] == [
        TokenKind.ARROW,
        TokenKind.EQ_EQ,
        TokenKind.EXCL_EQ,
        TokenKind.LT_EQ,
        TokenKind.GT_EQ,
        TokenKind.PLUS_EQ,
        TokenKind.DOTS,
        TokenKind.EQ,
        TokenKind.LT,
    ]


def test_lexer_unknown_code_character_is_skipped_token() -> None:
    assert _kinds("@", LexMode.CODE) == [TokenKind.SKIPPED, TokenKind.EOF]


def test_lexer_seek_relexes_in_other_mode() -> None:
    source = "let x"
    lexer = Lexer(source)
    assert lexer.next_token(LexMode.MARKUP).kind == TokenKind.TEXT
    lexer.seek(0)
    assert lexer.next_token(LexMode.CODE).kind == TokenKind.LET

    with pytest.raises(ValueError, match="outside of source"):
        lexer.seek(len(source) + 1)
