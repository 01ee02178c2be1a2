"""Typst grammar routines that emit CST events."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final

from typstfmt.diagnostics import (
    PARSER_EXPECTED_BLOCK,
    PARSER_EXPECTED_EXPRESSION,
    PARSER_EXPECTED_STATEMENT_END,
    PARSER_EXPECTED_TOKEN,
    PARSER_UNEXPECTED_CLOSING_BRACKET,
    PARSER_UNEXPECTED_TOKEN,
    Diagnostic,
    diagnostic_from_spec,
)
from typstfmt.lexer import LexMode, TokenKind
from typstfmt.parser.marker import CompletedMarker
from typstfmt.parser.parse_recovery import RecoverySet
from typstfmt.parser.parser import Parser, ParserProgress
from typstfmt.syntax import TypstSyntaxKind

LITERALS: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.INT,
        TokenKind.FLOAT,
        TokenKind.NUMERIC,
        TokenKind.STR,
        TokenKind.BOOL,
        TokenKind.NONE,
        TokenKind.AUTO,
        TokenKind.RAW,
        TokenKind.EQUATION,
    }
)

ATOM_START: Final[frozenset[TokenKind]] = LITERALS | {
    TokenKind.IDENT,
    TokenKind.LPAREN,
    TokenKind.LBRACKET,
    TokenKind.LBRACE,
}

KEYWORD_EXPRESSIONS: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.LET,
        TokenKind.SET,
        TokenKind.SHOW,
        TokenKind.IF,
        TokenKind.WHILE,
        TokenKind.FOR,
        TokenKind.IMPORT,
        TokenKind.INCLUDE,
        TokenKind.RETURN,
        TokenKind.BREAK,
        TokenKind.CONTINUE,
        TokenKind.CONTEXT,
    }
)

# Keyword expressions that must be followed by a line break or `;` in markup.
EMBEDDED_STATEMENTS: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.LET,
        TokenKind.SET,
        TokenKind.SHOW,
        TokenKind.IMPORT,
        TokenKind.INCLUDE,
        TokenKind.RETURN,
    }
)

UNARY_PRECEDENCE: Final[dict[TokenKind, int]] = {
    TokenKind.PLUS: 7,
    TokenKind.MINUS: 7,
    TokenKind.NOT: 3,
}

BINARY_PRECEDENCE: Final[dict[TokenKind, int]] = {
    TokenKind.EQ: 1,
    TokenKind.PLUS_EQ: 1,
    TokenKind.HYPH_EQ: 1,
    TokenKind.STAR_EQ: 1,
    TokenKind.SLASH_EQ: 1,
    TokenKind.OR: 2,
    TokenKind.AND: 3,
    TokenKind.EQ_EQ: 4,
    TokenKind.EXCL_EQ: 4,
    TokenKind.LT: 4,
    TokenKind.LT_EQ: 4,
    TokenKind.GT: 4,
    TokenKind.GT_EQ: 4,
    TokenKind.IN: 4,
    TokenKind.PLUS: 5,
    TokenKind.MINUS: 5,
    TokenKind.STAR: 6,
    TokenKind.SLASH: 6,
}

NOT_IN_PRECEDENCE: Final = 4

RIGHT_ASSOCIATIVE: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.EQ,
        TokenKind.PLUS_EQ,
        TokenKind.HYPH_EQ,
        TokenKind.STAR_EQ,
        TokenKind.SLASH_EQ,
    }
)

_STATEMENT_RECOVERY: Final = RecoverySet(
    tokens=frozenset({TokenKind.SEMICOLON, TokenKind.RBRACE}),
    at_line_break=True,
)

_ITEM_RECOVERY: Final = RecoverySet(
    tokens=frozenset({TokenKind.COMMA, TokenKind.RPAREN, TokenKind.RBRACE, TokenKind.RBRACKET}),
)

# Closing delimiters that belong to an enclosing construct.
_FOREIGN_CLOSERS: Final[frozenset[TokenKind]] = frozenset({TokenKind.RBRACE, TokenKind.RBRACKET})


class ItemKind(StrEnum):
    PLAIN = "plain"
    NAMED = "named"
    KEYED = "keyed"
    SPREAD = "spread"


@dataclass(slots=True)
class CollectionShape:
    """What a parenthesized item list looked like, used to pick its node kind."""

    items: list[ItemKind] = field(default_factory=list)
    trailing_comma: bool = False
    empty_dict: bool = False

    def kind(self) -> TypstSyntaxKind:
        if self.empty_dict or any(item in (ItemKind.NAMED, ItemKind.KEYED) for item in self.items):
            return TypstSyntaxKind.DICT
        if len(self.items) == 1 and self.items[0] == ItemKind.PLAIN and not self.trailing_comma:
            return TypstSyntaxKind.PARENTHESIZED
        return TypstSyntaxKind.ARRAY


# -------------------------
# Markup
# -------------------------


def parse_source_file(parser: Parser) -> CompletedMarker:
    return parse_markup(parser, in_block=False)


def parse_markup(parser: Parser, *, in_block: bool) -> CompletedMarker:
    """Parse markup up to EOF, or up to the `]` closing the enclosing content block.

    Bracket pairs inside the markup are plain text and only tracked for balance.
    """
    marker = parser.start()
    progress = ParserProgress()
    depth = 0

    while not parser.at(TokenKind.EOF):
        progress.assert_progressing(parser)
        match parser.current:
            case TokenKind.HASH:
                parse_embedded_code(parser)
            case TokenKind.LBRACKET:
                depth += 1
                parser.bump()
            case TokenKind.RBRACKET if depth > 0:
                depth -= 1
                parser.bump()
            case TokenKind.RBRACKET if in_block:
                break
            case TokenKind.RBRACKET:
                parser.error(_unexpected_closing_bracket(parser))
                error = parser.start()
                parser.bump()
                error.complete(parser, TypstSyntaxKind.ERROR)
            case _:
                parser.bump()

    return marker.complete(parser, TypstSyntaxKind.MARKUP)


def parse_embedded_code(parser: Parser) -> None:
    parser.bump()  # '#'
    with parser.lex_mode(LexMode.CODE, newline_stops=True):
        is_statement = parser.at_set(EMBEDDED_STATEMENTS)
        if is_statement:
            parse_expr(parser)
            if not _at_statement_end(parser):
                parser.error(_expected_statement_end(parser))
        elif parser.at_set(ATOM_START) or parser.at_set(KEYWORD_EXPRESSIONS):
            parse_expr(parser, atomic=True)
        else:
            parser.error(_expected_expression(parser))

        if (is_statement and parser.at(TokenKind.SEMICOLON)) or parser.directly_at(TokenKind.SEMICOLON):
            parser.bump()


def parse_content_block(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    with parser.lex_mode(LexMode.MARKUP):
        parser.bump()  # '['
        parse_markup(parser, in_block=True)
    if not parser.eat(TokenKind.RBRACKET):
        parser.error(_expected_token(parser, TokenKind.RBRACKET))
    return marker.complete(parser, TypstSyntaxKind.CONTENT_BLOCK)


# -------------------------
# Code
# -------------------------


def parse_code_block(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    with parser.lex_mode(LexMode.CODE):
        parser.bump()  # '{'
        parse_code_statements(parser)
    if not parser.eat(TokenKind.RBRACE):
        parser.error(_expected_token(parser, TokenKind.RBRACE))
    return marker.complete(parser, TypstSyntaxKind.CODE_BLOCK)


def parse_code_statements(parser: Parser) -> None:
    """Statements of a code block, separated by line breaks or semicolons."""
    progress = ParserProgress()
    while not parser.at(TokenKind.EOF) and not parser.at(TokenKind.RBRACE):
        progress.assert_progressing(parser)
        if parser.eat(TokenKind.SEMICOLON):
            continue

        with parser.lex_mode(LexMode.CODE, newline_stops=True):
            if parse_expr(parser):
                if not _at_statement_end(parser):
                    parser.error(_expected_statement_end(parser))
            else:
                parser.error(_unexpected_token(parser))
                _STATEMENT_RECOVERY.recover(parser)


def parse_expr(parser: Parser, *, atomic: bool = False, min_prec: int = 0) -> bool:
    """Precedence-climbing expression parser.

    Atomic expressions (embedded in markup) stop after the primary and its
    postfix calls/field accesses.
    """
    checkpoint = parser.checkpoint()

    if not atomic and parser.current in UNARY_PRECEDENCE:
        marker = parser.start()
        operator = parser.current
        parser.bump()
        if not parse_expr(parser, min_prec=UNARY_PRECEDENCE[operator]):
            parser.error(_expected_expression(parser))
        marker.complete(parser, TypstSyntaxKind.UNARY)
    elif not parse_primary(parser, atomic=atomic):
        return False

    if atomic:
        return True

    while True:
        operator = parser.current
        if operator == TokenKind.NOT:
            if parser.lookahead().kind != TokenKind.IN:
                break
            precedence = NOT_IN_PRECEDENCE
        elif operator in BINARY_PRECEDENCE:
            precedence = BINARY_PRECEDENCE[operator]
        else:
            break

        if precedence < min_prec:
            break

        marker = parser.start_at(checkpoint)
        parser.bump()
        if operator == TokenKind.NOT:
            parser.bump()  # 'in'

        next_prec = precedence if operator in RIGHT_ASSOCIATIVE else precedence + 1
        if not parse_expr(parser, min_prec=next_prec):
            parser.error(_expected_expression(parser))
        marker.complete(parser, TypstSyntaxKind.BINARY)

    return True


def parse_primary(parser: Parser, *, atomic: bool = False) -> bool:
    checkpoint = parser.checkpoint()

    match parser.current:
        case TokenKind.IDENT:
            parser.bump()
            if not atomic and parser.at(TokenKind.ARROW):
                _finish_closure(parser, checkpoint)
                return True
        case kind if kind in LITERALS:
            parser.bump()
        case TokenKind.LPAREN:
            collection = parse_collection(parser)
            if not atomic and parser.at(TokenKind.ARROW):
                collection.change_kind(parser, TypstSyntaxKind.PARAMS)
                _finish_closure(parser, checkpoint)
                return True
        case TokenKind.LBRACKET:
            parse_content_block(parser)
        case TokenKind.LBRACE:
            parse_code_block(parser)
        case kind if kind in KEYWORD_EXPRESSIONS:
            parse_keyword_expr(parser, atomic=atomic)
            return True
        case _:
            return False

    parse_postfix(parser, checkpoint)
    return True


def parse_postfix(parser: Parser, checkpoint: int) -> None:
    while True:
        if parser.directly_at(TokenKind.LPAREN) or parser.directly_at(TokenKind.LBRACKET):
            marker = parser.start_at(checkpoint)
            parse_args(parser)
            marker.complete(parser, TypstSyntaxKind.FUNC_CALL)
        elif parser.directly_at(TokenKind.DOT) and parser.lookahead(skip_trivia=False).kind == TokenKind.IDENT:
            marker = parser.start_at(checkpoint)
            parser.bump()  # '.'
            parser.bump()  # field name
            marker.complete(parser, TypstSyntaxKind.FIELD_ACCESS)
        else:
            break


def parse_args(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    if parser.at(TokenKind.LPAREN):
        parse_delimited_items(parser)
    while parser.directly_at(TokenKind.LBRACKET):
        parse_content_block(parser)
    return marker.complete(parser, TypstSyntaxKind.ARGS)


def parse_collection(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    shape = parse_delimited_items(parser)
    return marker.complete(parser, shape.kind())


def parse_delimited_items(parser: Parser) -> CollectionShape:
    """Parse `( item, item, ... )` without opening a node of its own."""
    shape = CollectionShape()
    with parser.lex_mode(LexMode.CODE):
        parser.bump()  # '('
        if parser.at(TokenKind.COLON) and parser.lookahead().kind == TokenKind.RPAREN:
            parser.bump()
            shape.empty_dict = True

        progress = ParserProgress()
        while not parser.at(TokenKind.EOF) and not parser.at(TokenKind.RPAREN):
            progress.assert_progressing(parser)
            item = parse_collection_item(parser)
            if item is None:
                parser.error(_expected_expression(parser))
                _ITEM_RECOVERY.recover(parser)
                if parser.at_set(_FOREIGN_CLOSERS):
                    break
            else:
                shape.items.append(item)

            shape.trailing_comma = False
            if parser.at(TokenKind.RPAREN) or parser.at_set(_FOREIGN_CLOSERS):
                break
            if parser.eat(TokenKind.COMMA):
                shape.trailing_comma = True
            elif not parser.at(TokenKind.EOF):
                parser.error(_expected_token(parser, TokenKind.COMMA))

    if not parser.eat(TokenKind.RPAREN):
        parser.error(_expected_token(parser, TokenKind.RPAREN))
    return shape


def parse_collection_item(parser: Parser) -> ItemKind | None:
    if parser.at(TokenKind.DOTS):
        marker = parser.start()
        parser.bump()
        # A bare `..` is a valid destructuring sink.
        parse_expr(parser)
        marker.complete(parser, TypstSyntaxKind.SPREAD)
        return ItemKind.SPREAD

    if parser.at_set({TokenKind.IDENT, TokenKind.STR}) and parser.lookahead().kind == TokenKind.COLON:
        is_named = parser.at(TokenKind.IDENT)
        marker = parser.start()
        parser.bump()
        parser.bump()  # ':'
        if not parse_expr(parser):
            parser.error(_expected_expression(parser))
        marker.complete(parser, TypstSyntaxKind.NAMED if is_named else TypstSyntaxKind.KEYED)
        return ItemKind.NAMED if is_named else ItemKind.KEYED

    if parse_expr(parser):
        return ItemKind.PLAIN
    return None


def parse_pattern(parser: Parser) -> bool:
    """Binding pattern of `let` and `for`: an identifier or a destructuring."""
    if parser.at(TokenKind.IDENT):
        parser.bump()
        return True
    if parser.at(TokenKind.LPAREN):
        pattern = parse_collection(parser)
        if pattern.kind in (TypstSyntaxKind.ARRAY, TypstSyntaxKind.DICT):
            pattern.change_kind(parser, TypstSyntaxKind.DESTRUCTURING)
        return True
    parser.error(_expected_token(parser, TokenKind.IDENT))
    return False


def parse_keyword_expr(parser: Parser, *, atomic: bool = False) -> CompletedMarker:
    match parser.current:
        case TokenKind.LET:
            return parse_let_binding(parser)
        case TokenKind.SET:
            return parse_set_rule(parser)
        case TokenKind.SHOW:
            return parse_show_rule(parser)
        case TokenKind.IF:
            return parse_conditional(parser)
        case TokenKind.WHILE:
            return parse_while_loop(parser)
        case TokenKind.FOR:
            return parse_for_loop(parser)
        case TokenKind.IMPORT:
            return parse_module_import(parser)
        case TokenKind.INCLUDE:
            return _parse_keyword_then_expr(parser, TypstSyntaxKind.MODULE_INCLUDE)
        case TokenKind.CONTEXT:
            return _parse_keyword_then_expr(parser, TypstSyntaxKind.CONTEXTUAL, atomic=atomic)
        case TokenKind.RETURN:
            marker = parser.start()
            parser.bump()
            if not _at_statement_end(parser):
                parse_expr(parser)
            return marker.complete(parser, TypstSyntaxKind.FUNC_RETURN)
        case TokenKind.BREAK:
            return _parse_lone_keyword(parser, TypstSyntaxKind.LOOP_BREAK)
        case TokenKind.CONTINUE:
            return _parse_lone_keyword(parser, TypstSyntaxKind.LOOP_CONTINUE)
        case other:
            raise ValueError(f"Not a keyword expression: {other!r}")


def parse_let_binding(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()  # 'let'

    if parser.at(TokenKind.IDENT):
        checkpoint = parser.checkpoint()
        parser.bump()
        if parser.directly_at(TokenKind.LPAREN):
            closure = parser.start_at(checkpoint)
            params = parse_collection(parser)
            params.change_kind(parser, TypstSyntaxKind.PARAMS)
            if parser.expect(TokenKind.EQ, _expected_token(parser, TokenKind.EQ)):
                _expect_expr(parser)
            closure.complete(parser, TypstSyntaxKind.CLOSURE)
        elif parser.eat(TokenKind.EQ):
            _expect_expr(parser)
    elif parse_pattern(parser) and parser.eat(TokenKind.EQ):
        _expect_expr(parser)

    return marker.complete(parser, TypstSyntaxKind.LET_BINDING)


def parse_set_rule(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()  # 'set'
    if not parse_expr(parser, atomic=True):
        parser.error(_expected_expression(parser))
    if parser.eat(TokenKind.IF):
        _expect_expr(parser)
    return marker.complete(parser, TypstSyntaxKind.SET_RULE)


def parse_show_rule(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()  # 'show'
    if not parser.at(TokenKind.COLON):
        _expect_expr(parser)
    if parser.expect(TokenKind.COLON, _expected_token(parser, TokenKind.COLON)):
        _expect_expr(parser)
    return marker.complete(parser, TypstSyntaxKind.SHOW_RULE)


def parse_conditional(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()  # 'if'
    _expect_expr(parser)
    parse_body(parser)

    # `else` may continue a conditional on the next line.
    if parser.at_line_break and parser.lookahead().kind == TokenKind.ELSE:
        parser.eat_line_breaks()
    if parser.eat(TokenKind.ELSE):
        if parser.at(TokenKind.IF):
            parse_conditional(parser)
        else:
            parse_body(parser)
    return marker.complete(parser, TypstSyntaxKind.CONDITIONAL)


def parse_while_loop(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()  # 'while'
    _expect_expr(parser)
    parse_body(parser)
    return marker.complete(parser, TypstSyntaxKind.WHILE_LOOP)


def parse_for_loop(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()  # 'for'
    parse_pattern(parser)
    if parser.expect(TokenKind.IN, _expected_token(parser, TokenKind.IN)):
        _expect_expr(parser)
    parse_body(parser)
    return marker.complete(parser, TypstSyntaxKind.FOR_LOOP)


def parse_body(parser: Parser) -> bool:
    if parser.at(TokenKind.LBRACE):
        parse_code_block(parser)
        return True
    if parser.at(TokenKind.LBRACKET):
        parse_content_block(parser)
        return True
    parser.error(_expected_block(parser))
    return False


def parse_module_import(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()  # 'import'
    _expect_expr(parser)
    if parser.eat(TokenKind.AS):
        parser.expect(TokenKind.IDENT, _expected_token(parser, TokenKind.IDENT))

    if parser.eat(TokenKind.COLON):
        if parser.at(TokenKind.STAR):
            parser.bump()
        elif parser.at(TokenKind.LPAREN):
            with parser.lex_mode(LexMode.CODE):
                parser.bump()  # '('
                parse_import_items(parser)
            if not parser.eat(TokenKind.RPAREN):
                parser.error(_expected_token(parser, TokenKind.RPAREN))
        else:
            parse_import_items(parser)
    return marker.complete(parser, TypstSyntaxKind.MODULE_IMPORT)


def parse_import_items(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    if not parser.at(TokenKind.IDENT):
        parser.error(_expected_token(parser, TokenKind.IDENT))
    while parser.at(TokenKind.IDENT):
        parser.bump()
        while parser.directly_at(TokenKind.DOT) and parser.lookahead(skip_trivia=False).kind == TokenKind.IDENT:
            parser.bump()
            parser.bump()
        if parser.eat(TokenKind.AS):
            parser.expect(TokenKind.IDENT, _expected_token(parser, TokenKind.IDENT))
        if not parser.eat(TokenKind.COMMA):
            break
    return marker.complete(parser, TypstSyntaxKind.IMPORT_ITEMS)


def _parse_keyword_then_expr(
    parser: Parser,
    kind: TypstSyntaxKind,
    *,
    atomic: bool = False,
) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    if not parse_expr(parser, atomic=atomic):
        parser.error(_expected_expression(parser))
    return marker.complete(parser, kind)


def _parse_lone_keyword(parser: Parser, kind: TypstSyntaxKind) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    return marker.complete(parser, kind)


def _finish_closure(parser: Parser, checkpoint: int) -> CompletedMarker:
    marker = parser.start_at(checkpoint)
    parser.bump()  # '=>'
    _expect_expr(parser)
    return marker.complete(parser, TypstSyntaxKind.CLOSURE)


def _expect_expr(parser: Parser) -> bool:
    if parse_expr(parser):
        return True
    parser.error(_expected_expression(parser))
    return False


def _at_statement_end(parser: Parser) -> bool:
    return parser.at_line_break or parser.at_set(
        {
            TokenKind.EOF,
            TokenKind.SEMICOLON,
            TokenKind.RBRACE,
            TokenKind.RBRACKET,
        }
    )


# -------------------------
# Diagnostics
# -------------------------


def _expected_token(parser: Parser, kind: TokenKind) -> Diagnostic:
    return diagnostic_from_spec(
        PARSER_EXPECTED_TOKEN,
        parser.current_range,
        f"Expected token {kind.name}",
    )


def _expected_expression(parser: Parser) -> Diagnostic:
    return diagnostic_from_spec(PARSER_EXPECTED_EXPRESSION, parser.current_range)


def _expected_block(parser: Parser) -> Diagnostic:
    return diagnostic_from_spec(PARSER_EXPECTED_BLOCK, parser.current_range)


def _expected_statement_end(parser: Parser) -> Diagnostic:
    return diagnostic_from_spec(PARSER_EXPECTED_STATEMENT_END, parser.current_range)


def _unexpected_token(parser: Parser) -> Diagnostic:
    return diagnostic_from_spec(
        PARSER_UNEXPECTED_TOKEN,
        parser.current_range,
        f"Unexpected token {parser.current.name}",
    )


def _unexpected_closing_bracket(parser: Parser) -> Diagnostic:
    return diagnostic_from_spec(PARSER_UNEXPECTED_CLOSING_BRACKET, parser.current_range)
