"""PGN parsing entry points and serialization."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field

from pgnstudy.core.enums import Color
from pgnstudy.core.errors import MoveGrammarError
from pgnstudy.core.notation.complexity import analyze_complexity
from pgnstudy.core.notation.fallback import recover_game
from pgnstudy.core.notation.headers import (
    escape_tag_value,
    parse_headers,
    resolve_result,
    starting_ply,
)
from pgnstudy.core.notation.models import (
    Collection,
    GameRecord,
    MoveNode,
    ParseError,
    ParserOptions,
    ValidationReport,
)
from pgnstudy.core.notation.movetext import build_move_tree
from pgnstudy.core.notation.sanitizer import sanitize_pgn
from pgnstudy.core.notation.splitter import split_games

_LOGGER = logging.getLogger(__name__)

_ERROR_LINE_RE = re.compile(r"line (\d+)", re.IGNORECASE)

ProgressCallback = Callable[[int, int], None]


# ── Parsing ──────────────────────────────────────────────────────────────────


def _parse_fragment(fragment: str) -> GameRecord:
    block = parse_headers(fragment)
    tree = build_move_tree(
        block.movetext,
        start_ply=starting_ply(block.headers),
        first_line=block.movetext_line,
    )
    record = GameRecord(
        headers=block.headers,
        moves=tree.moves,
        result=resolve_result(block.headers, tree.trailing_result),
    )
    record.complexity = analyze_complexity(record)
    return record


def _extract_error_line(message: str) -> int | None:
    match = _ERROR_LINE_RE.search(message)
    if match is None:
        return None
    return int(match.group(1))


def parse_game(pgn_text: str, options: ParserOptions | None = None) -> GameRecord:
    """Parse a single PGN game into a move tree.

    The record carries its complexity report. Raises
    :class:`MoveGrammarError` when the movetext is structurally broken.
    """
    opts = options or ParserOptions()
    clean = sanitize_pgn(pgn_text, max_comment_length=opts.max_comment_length)
    return _parse_fragment(clean.strip())


def parse_multiple(
    pgn_text: str,
    options: ParserOptions | None = None,
    *,
    on_progress: ProgressCallback | None = None,
) -> Collection:
    """Parse concatenated games; one bad game never affects the others.

    Games rejected by the tree builder are retried with the flat fallback
    scan. Games that yield nothing at all are reported in
    ``Collection.errors``. *on_progress* receives ``(done, total)`` every
    ``options.yield_every`` games and once at the end.
    """
    opts = options or ParserOptions()
    clean = sanitize_pgn(pgn_text, max_comment_length=opts.max_comment_length)
    fragments = split_games(clean)
    collection = Collection()
    total = len(fragments)

    for index, fragment in enumerate(fragments):
        try:
            record = _parse_fragment(fragment)
        except MoveGrammarError as exc:
            message = str(exc)
            _LOGGER.warning("Parse error in study %d: %s", index + 1, message)
            recovered = recover_game(fragment)
            if recovered is None:
                collection.errors.append(
                    ParseError(
                        study_index=index,
                        message=message,
                        line=_extract_error_line(message),
                    )
                )
            else:
                collection.studies.append(recovered)
        else:
            collection.studies.append(record)

        done = index + 1
        if on_progress is not None and (done % opts.yield_every == 0 or done == total):
            on_progress(done, total)

    return collection


def validate_pgn(pgn_text: str, options: ParserOptions | None = None) -> ValidationReport:
    """Pre-flight check of an upload: hard errors separated from warnings."""
    opts = options or ParserOptions()
    collection = parse_multiple(pgn_text, opts)
    errors = [f"Study {error.study_index + 1}: {error.message}" for error in collection.errors]
    warnings: list[str] = []

    if collection.total_studies == 0:
        errors.append("No valid studies found in PGN")

    for index, study in enumerate(collection.studies):
        if not study.moves:
            warnings.append(f"Study {index + 1}: No moves found")

    if any(study.fallback for study in collection.studies):
        warnings.append("Some studies parsed with fallback parser - quality may be reduced")

    total_complexity = sum(
        study.complexity.complexity
        for study in collection.studies
        if study.complexity is not None
    )
    if total_complexity > opts.complexity_warning_threshold:
        warnings.append("High complexity detected - may impact performance")

    return ValidationReport(
        valid=not errors,
        errors=errors,
        warnings=warnings,
        study_count=collection.total_studies,
        complexity=round(total_complexity, 1),
    )


# ── Serialization ────────────────────────────────────────────────────────────


def _comment(text: str) -> str:
    # PGN comments cannot contain a closing brace.
    return "{" + text.replace("}", "]") + "}"


@dataclass(slots=True)
class _LineWriter:
    nodes: list[MoveNode]
    parts: list[str] = field(default_factory=list)
    index: int = 0
    next_variation: int = 0
    needs_number: bool = True


def _write_move(writer: _LineWriter, node: MoveNode) -> None:
    parts = writer.parts
    if node.side == Color.WHITE:
        parts.append(f"{node.move_number}.")
    elif writer.needs_number or node.comment_before:
        parts.append(f"{node.move_number}...")
    if node.comment_before:
        parts.append(_comment(node.comment_before))
    parts.append(node.san)
    parts.extend(node.nags)
    writer.needs_number = False
    if node.comment_after:
        parts.append(_comment(node.comment_after))
        writer.needs_number = True


def _line_parts(nodes: list[MoveNode]) -> list[str]:
    root = _LineWriter(nodes)
    stack = [root]
    while stack:
        writer = stack[-1]
        if writer.index:
            node = writer.nodes[writer.index - 1]
            if writer.next_variation < len(node.variations):
                variation = node.variations[writer.next_variation]
                writer.next_variation += 1
                writer.needs_number = True
                stack.append(_LineWriter(variation.moves))
                continue
        if writer.index == len(writer.nodes):
            stack.pop()
            if stack:
                stack[-1].parts.append("(" + " ".join(writer.parts) + ")")
            continue
        _write_move(writer, writer.nodes[writer.index])
        writer.index += 1
        writer.next_variation = 0
    return root.parts


def movetext_from_moves(moves: list[MoveNode], result_token: str) -> str:
    """Build movetext with variations, comments and ``$n`` NAGs."""
    parts = _line_parts(moves)
    parts.append(result_token)
    return " ".join(parts)


def serialize_game(game: GameRecord) -> str:
    """Render *game* as a single PGN document."""
    lines = [f'[{key} "{escape_tag_value(value)}"]' for key, value in game.headers.items()]
    if lines:
        lines.append("")
    lines.append(movetext_from_moves(game.moves, game.result))
    lines.append("")
    return "\n".join(lines)


def serialize_collection(collection: Collection) -> str:
    return "\n".join(serialize_game(study) for study in collection.studies)


# ── Study presentation helpers ───────────────────────────────────────────────


def study_title(game: GameRecord, index: int | None = None) -> str:
    event = game.headers.get("Event") or "Unnamed Study"
    round_name = game.headers.get("Round")
    prefix = f"{index + 1}. " if index is not None else ""
    if round_name and round_name not in ("1", "?", "-"):
        return f"{prefix}{event} (Round {round_name})"
    return f"{prefix}{event}"


def study_description(game: GameRecord) -> str:
    """Short "White vs Black • date • site" line; unknown fields are left out."""
    headers = game.headers
    parts: list[str] = []
    if headers.get("White") and headers.get("Black"):
        parts.append(f"{headers['White']} vs {headers['Black']}")
    date = headers.get("Date")
    if date and date != "????.??.??":
        parts.append(date)
    site = headers.get("Site")
    if site and site != "?":
        parts.append(site)
    return " • ".join(parts)


def sample_collection_pgn() -> str:
    """Three short demo studies for first-run and upload previews."""
    return """[Event "Italian Game Study"]
[Site "pgnstudy"]
[Date "2024.12.25"]
[Round "1"]
[White "Student"]
[Black "Engine"]
[Result "*"]

1. e4 {King's pawn, claims the centre} e5 2. Nf3 {Natural development} Nc6
3. Bc4 {Eyes the weak f7 square} Bc5 (3... Nf6 {Two Knights Defence} 4. Ng5 d5)
4. c3 {Prepares d4} Nf6 5. d3 d6 6. O-O O-O 7. Re1 a6 8. Bb3 Ba7 *

[Event "Sicilian Defence Study"]
[Site "pgnstudy"]
[Date "2024.12.25"]
[Round "2"]
[White "Student"]
[Black "Engine"]
[Result "*"]

1. e4 c5 {The Sicilian} 2. Nf3 d6 3. d4! cxd4 4. Nxd4 Nf6 5. Nc3 a6
{Najdorf} 6. Be3 (6. Bg5 {Main line} e6) e6 7. f3 Be7 *

[Event "French Defence Study"]
[Site "pgnstudy"]
[Date "2024.12.25"]
[Round "3"]
[White "Student"]
[Black "Engine"]
[Result "*"]

1. e4 e6 {The French} 2. d4 d5 3. Nc3 Bb4 {Winawer} 4. e5 c5 5. a3 Bxc3+
6. bxc3 Ne7 $1 *
"""
