"""Advisory complexity metrics over a parsed game tree."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from pgnstudy.core.notation.models import ComplexityReport, GameRecord, MoveNode

_MOVE_WEIGHT = 0.1
_VARIATION_WEIGHT = 2.0
_COMMENT_WEIGHT = 0.5
_NAG_WEIGHT = 0.3


def _walk(nodes: Iterable[MoveNode]) -> Iterator[MoveNode]:
    """Yield every node of a line and, depth first, of its variations."""
    # Explicit stack: nesting depth is bounded only by the input.
    pending: list[Iterator[MoveNode]] = [iter(nodes)]
    while pending:
        node = next(pending[-1], None)
        if node is None:
            pending.pop()
            continue
        yield node
        for variation in reversed(node.variations):
            pending.append(iter(variation.moves))


def analyze_complexity(game: GameRecord) -> ComplexityReport:
    """Count variations, comments and NAGs at every depth of *game*."""
    variation_count = 0
    comment_count = 0
    nag_count = 0
    for node in _walk(game.moves):
        variation_count += len(node.variations)
        comment_count += (node.comment_before is not None) + (node.comment_after is not None)
        nag_count += len(node.nags)

    total_moves = len(game.moves)
    score = (
        total_moves * _MOVE_WEIGHT
        + variation_count * _VARIATION_WEIGHT
        + comment_count * _COMMENT_WEIGHT
        + nag_count * _NAG_WEIGHT
    )
    return ComplexityReport(
        total_moves=total_moves,
        variation_count=variation_count,
        comment_count=comment_count,
        nag_count=nag_count,
        has_variations=variation_count > 0,
        complexity=round(score, 1),
    )
