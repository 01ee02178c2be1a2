"""Typst parser: mode-switching lexer driver, grammar and lossless tree sink."""

from typstfmt.parser.event import Event, FinishEvent, StartEvent, TokenEvent
from typstfmt.parser.grammar import parse_code_block, parse_content_block, parse_expr, parse_source_file
from typstfmt.parser.marker import CompletedMarker, Marker
from typstfmt.parser.parse_recovery import RecoverySet
from typstfmt.parser.parser import Parser, ParserProgress
from typstfmt.parser.tree_sink import LosslessTreeSink, ParsedGreenTree, build_lossless_tree
from typstfmt.parser.typst import parse, parse_result

__all__ = [
    "CompletedMarker",
    "Event",
    "FinishEvent",
    "LosslessTreeSink",
    "Marker",
    "ParsedGreenTree",
    "Parser",
    "ParserProgress",
    "RecoverySet",
    "StartEvent",
    "TokenEvent",
    "build_lossless_tree",
    "parse",
    "parse_code_block",
    "parse_content_block",
    "parse_expr",
    "parse_result",
    "parse_source_file",
]
