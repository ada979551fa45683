"""Tests for PGN entry points and serialization."""

from __future__ import annotations

import pytest

from pgnstudy.core.enums import Color
from pgnstudy.core.errors import MoveGrammarError
from pgnstudy.core.notation import (
    ParserOptions,
    parse_game,
    parse_multiple,
    sample_collection_pgn,
    serialize_collection,
    serialize_game,
    split_games,
    study_description,
    study_title,
    validate_pgn,
)

ANNOTATED = """[Event "Annotated"]
[Site "Club"]
[White "Alice"]
[Black "Bob \\"the Bishop\\""]
[Result "1/2-1/2"]

{Opening survey} 1. e4 {King's pawn} e5 (1... c5 {Sicilian} 2. Nf3 (2. c3 d5) d6)
2. Nf3!? Nc6 3. Bb5 a6 $6 (3... Nf6 4. O-O) 4. Ba4 {pin} Nf6 1/2-1/2
"""


class TestParseGame:
    def test_concrete_scenario(self) -> None:
        game = parse_game('[Event "Test"]\n[Result "1-0"]\n\n1.e4 e5 2.Nf3 Nc6 1-0')
        assert game.headers["Event"] == "Test"
        assert game.result == "1-0"
        assert game.mainline_sans() == ["e4", "e5", "Nf3", "Nc6"]
        assert [node.side for node in game.moves] == [
            Color.WHITE,
            Color.BLACK,
            Color.WHITE,
            Color.BLACK,
        ]
        assert game.fallback is False

    def test_header_result_beats_movetext_result(self) -> None:
        game = parse_game('[Result "0-1"]\n\n1. e4 e5 1-0')
        assert game.result == "0-1"

    def test_movetext_result_without_header(self) -> None:
        assert parse_game("1. e4 e5 1/2-1/2").result == "1/2-1/2"

    def test_result_defaults_to_unknown(self) -> None:
        assert parse_game("1. e4 e5").result == "*"

    def test_setup_position_starts_with_black(self) -> None:
        fen = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
        game = parse_game(f'[SetUp "1"]\n[FEN "{fen}"]\n\n1... e5 2. Nf3 *')
        assert [(node.ply, node.side) for node in game.moves] == [
            (2, Color.BLACK),
            (3, Color.WHITE),
        ]

    def test_unbalanced_parenthesis_raises(self) -> None:
        with pytest.raises(MoveGrammarError):
            parse_game("1. e4 (1. d4 e5")

    def test_html_in_comment_is_sanitized(self) -> None:
        game = parse_game("1. e4 {<i>strong</i> move} e5")
        assert game.moves[0].comment_after == "strong move"


class TestParseMultiple:
    def test_three_games_with_broken_middle(self, three_games: str) -> None:
        collection = parse_multiple(three_games)
        assert collection.total_studies == 3
        assert collection.errors == []

        first, second, third = collection.studies
        assert first.fallback is False
        assert first.mainline_sans() == ["e4", "e5", "Nf3", "Nc6"]
        assert first.moves[2].comment_after == "develops"
        assert first.complexity is not None

        assert second.fallback is True
        assert second.headers["Event"] == "Second"
        assert second.mainline_sans() == ["d4"]
        assert second.complexity is None

        assert third.fallback is False
        assert third.mainline_sans() == ["c4", "e5", "Nc3"]
        assert [v.moves[0].san for v in third.moves[1].variations] == ["c5"]
        assert third.moves[2].nags == ["$2"]
        assert third.result == "0-1"

    def test_unrecoverable_game_becomes_parse_error(self) -> None:
        text = (
            '[Event "Good"]\n\n1. e4 *\n\n'
            '[Event "Bad"]\n\n{nothing} (\n\n'
            '[Event "Also good"]\n\n1. d4 *\n'
        )
        collection = parse_multiple(text)
        assert [study.headers["Event"] for study in collection.studies] == ["Good", "Also good"]
        assert len(collection.errors) == 1
        error = collection.errors[0]
        assert error.study_index == 1
        assert "before any move" in error.message
        assert error.line == 3

    def test_empty_input(self) -> None:
        collection = parse_multiple("")
        assert collection.studies == []
        assert collection.errors == []
        assert collection.total_studies == 0

    def test_progress_callback_yields_every_k(self) -> None:
        text = "\n\n".join(f'[Event "G{idx}"]\n\n1. e4 *' for idx in range(7))
        calls: list[tuple[int, int]] = []
        parse_multiple(
            text,
            ParserOptions(yield_every=3),
            on_progress=lambda done, total: calls.append((done, total)),
        )
        assert calls == [(3, 7), (6, 7), (7, 7)]

    def test_mainline_only_move_count(self) -> None:
        text = '[Event "Count"]\n\n1. d4 Nf6 2. c4 g6 3. Nc3 Bg7 4. e4 d6 5. f3 O-O *'
        (game,) = parse_multiple(text).studies
        assert len(game.moves) == 10


class TestValidatePgn:
    def test_sample_collection_is_valid(self) -> None:
        report = validate_pgn(sample_collection_pgn())
        assert report.valid is True
        assert report.errors == []
        assert report.warnings == []
        assert report.study_count == 3
        assert report.complexity > 0

    def test_fallback_warning(self, three_games: str) -> None:
        report = validate_pgn(three_games)
        assert report.valid is True
        assert report.study_count == 3
        assert any("fallback" in warning for warning in report.warnings)

    def test_high_complexity_warning(self) -> None:
        report = validate_pgn(
            ANNOTATED,
            ParserOptions(complexity_warning_threshold=1.0),
        )
        assert "High complexity detected - may impact performance" in report.warnings

    def test_no_studies_is_an_error(self) -> None:
        report = validate_pgn("")
        assert report.valid is False
        assert report.errors == ["No valid studies found in PGN"]

    def test_parse_error_is_reported_per_study(self) -> None:
        report = validate_pgn('[Event "A"]\n\n1. e4 *\n\n[Event "B"]\n\n) *\n')
        assert report.valid is False
        assert report.errors[0].startswith("Study 2: ")


class TestSerializer:
    def test_mainline_serialization(self) -> None:
        game = parse_game('[Event "Test"]\n[Result "1-0"]\n\n1.e4 e5 2.Nf3 Nc6 1-0')
        assert serialize_game(game) == (
            '[Event "Test"]\n[Result "1-0"]\n\n1. e4 e5 2. Nf3 Nc6 1-0\n'
        )

    def test_annotations_and_variations(self) -> None:
        game = parse_game("1. e4 {best} e5 (1... c5 2. Nf3) 2. Nf3! Nc6 *")
        assert serialize_game(game) == (
            "1. e4 {best} 1... e5 (1... c5 2. Nf3) 2. Nf3 $1 Nc6 *\n"
        )

    def test_comment_before_is_emitted_after_move_number(self) -> None:
        game = parse_game("1. e4 e5 2. {develop} Nf3 *")
        assert "2. {develop} Nf3" in serialize_game(game)

    def test_header_round_trip(self) -> None:
        game = parse_game(ANNOTATED)
        again = parse_game(serialize_game(game))
        assert again.headers == game.headers
        assert again.headers["Black"] == 'Bob "the Bishop"'

    def test_tree_round_trip(self) -> None:
        game = parse_game(ANNOTATED)
        again = parse_game(serialize_game(game))
        assert again.moves == game.moves
        assert again.result == game.result

    def test_round_trip_from_black_start(self) -> None:
        fen = "8/8/8/8/8/8/4k3/4K3 b - - 0 40"
        game = parse_game(f'[FEN "{fen}"]\n\n40... Kd2 {{only move}} 41. Kf2 (41. Kf1) *')
        text = serialize_game(game)
        assert "40... Kd2" in text
        assert parse_game(text).moves == game.moves

    def test_collection_round_trip(self) -> None:
        collection = parse_multiple(sample_collection_pgn())
        text = serialize_collection(collection)
        assert len(split_games(text)) == 3
        again = parse_multiple(text)
        assert [s.moves for s in again.studies] == [s.moves for s in collection.studies]


class TestParserOptions:
    def test_defaults(self) -> None:
        options = ParserOptions()
        assert options.max_comment_length == 2000
        assert options.yield_every == 25
        assert options.complexity_warning_threshold == 50.0

    @pytest.mark.parametrize(
        "kwargs",
        [{"max_comment_length": -1}, {"yield_every": 0}],
    )
    def test_rejects_invalid_values(self, kwargs: dict[str, int]) -> None:
        with pytest.raises(ValueError):
            ParserOptions(**kwargs)


class TestStudyPresentation:
    def test_title_and_description(self) -> None:
        game = parse_game(
            '[Event "Club Championship"]\n[Round "3"]\n[White "Alice"]\n'
            '[Black "Bob"]\n[Date "2024.05.01"]\n[Site "?"]\n\n1. e4 *'
        )
        assert study_title(game) == "Club Championship (Round 3)"
        assert study_title(game, 0) == "1. Club Championship (Round 3)"
        assert study_description(game) == "Alice vs Bob • 2024.05.01"

    def test_title_without_event(self) -> None:
        assert study_title(parse_game("1. e4 *")) == "Unnamed Study"


class TestRobustness:
    def test_deeply_nested_game_does_not_stop_the_batch(self) -> None:
        depth = 1200
        text = (
            '[Event "Before"]\n\n1. e4 e5 *\n\n'
            f'[Event "Deep"]\n\n1. e4 {"(1. d4 " * depth}{")" * depth} *\n\n'
            '[Event "After"]\n\n1. d4 d5 *\n'
        )
        collection = parse_multiple(text)
        assert collection.errors == []
        assert [study.headers["Event"] for study in collection.studies] == [
            "Before",
            "Deep",
            "After",
        ]
        deep = collection.studies[1]
        assert deep.complexity is not None
        assert deep.complexity.variation_count == depth

        movetext = serialize_game(deep).split("\n\n", 1)[1]
        assert movetext.count("(") == depth
        assert movetext.count(")") == depth

    def test_unclosed_variation_after_malformed_move_goes_to_fallback(self) -> None:
        collection = parse_multiple('[Event "A"]\n\n1. e4 e5 2. Zz9 (2. Nf3 Nc6\n')
        assert collection.errors == []
        (study,) = collection.studies
        assert study.fallback is True
        assert study.mainline_sans() == ["e4", "e5"]

    def test_parse_game_attaches_complexity(self) -> None:
        text = '[Event "Same"]\n\n1. e4 {ok} e5 (1... c5) *'
        single = parse_game(text)
        (batched,) = parse_multiple(text).studies
        assert single.complexity is not None
        assert single.complexity == batched.complexity
