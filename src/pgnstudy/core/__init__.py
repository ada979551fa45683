"""Core domain layer: PGN parsing with zero external dependencies.

Quick start::

    from pgnstudy.core import parse_multiple

    collection = parse_multiple(open("studies.pgn", encoding="utf-8").read())
    for study in collection.studies:
        print(study.headers.get("Event"), study.mainline_sans())
"""

from pgnstudy.core.enums import Color
from pgnstudy.core.errors import IllegalMoveError, MoveGrammarError, PgnError
from pgnstudy.core.notation import (
    Collection,
    GameRecord,
    MoveNode,
    ParseError,
    ParserOptions,
    ValidationReport,
    Variation,
    parse_game,
    parse_multiple,
    serialize_collection,
    serialize_game,
    validate_pgn,
)

__all__ = [
    # Enums
    "Color",
    # Errors
    "PgnError",
    "MoveGrammarError",
    "IllegalMoveError",
    # Data model
    "Collection",
    "GameRecord",
    "MoveNode",
    "ParseError",
    "ParserOptions",
    "ValidationReport",
    "Variation",
    # Entry points
    "parse_game",
    "parse_multiple",
    "validate_pgn",
    "serialize_game",
    "serialize_collection",
]
