"""Notation package: PGN sanitizing, splitting, parsing and serialization."""

from pgnstudy.core.notation.complexity import analyze_complexity
from pgnstudy.core.notation.fallback import recover_game
from pgnstudy.core.notation.headers import parse_headers, resolve_result, starting_ply
from pgnstudy.core.notation.models import (
    RESULT_TOKENS,
    Collection,
    ComplexityReport,
    GameRecord,
    MoveNode,
    ParseError,
    ParserOptions,
    ValidationReport,
    Variation,
)
from pgnstudy.core.notation.movetext import build_move_tree, is_san_shaped
from pgnstudy.core.notation.pgn import (
    movetext_from_moves,
    parse_game,
    parse_multiple,
    sample_collection_pgn,
    serialize_collection,
    serialize_game,
    study_description,
    study_title,
    validate_pgn,
)
from pgnstudy.core.notation.sanitizer import sanitize_pgn
from pgnstudy.core.notation.splitter import split_games

__all__ = [
    "RESULT_TOKENS",
    "Collection",
    "ComplexityReport",
    "GameRecord",
    "MoveNode",
    "ParseError",
    "ParserOptions",
    "ValidationReport",
    "Variation",
    "sanitize_pgn",
    "split_games",
    "parse_headers",
    "resolve_result",
    "starting_ply",
    "build_move_tree",
    "is_san_shaped",
    "recover_game",
    "analyze_complexity",
    "parse_game",
    "parse_multiple",
    "validate_pgn",
    "movetext_from_moves",
    "serialize_game",
    "serialize_collection",
    "study_title",
    "study_description",
    "sample_collection_pgn",
]
