"""Replay of parsed move trees through an injected rules engine.

The parser never checks legality. Callers that need board positions plug
in any object satisfying :class:`RulesEngine` and walk the tree here.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Generic, Protocol, TypeVar

from pgnstudy.core.errors import IllegalMoveError
from pgnstudy.core.notation.models import MoveNode

PositionT = TypeVar("PositionT")


class RulesEngine(Protocol[PositionT]):
    """Legality collaborator: applies one SAN move to a position."""

    def apply_move(self, position: PositionT, san: str) -> PositionT:
        """Return the position after *san*; raise :class:`IllegalMoveError` if illegal."""
        ...


@dataclass(slots=True)
class ReplayResult(Generic[PositionT]):
    """Positions after each replayed ply, up to the first illegal move."""

    positions: list[PositionT]
    illegal_index: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.illegal_index is None


@dataclass(slots=True, frozen=True)
class IllegalMove:
    ply: int
    san: str
    message: str


@dataclass(slots=True)
class TreeCheck:
    """Outcome of replaying every line of a game tree."""

    illegal_moves: list[IllegalMove] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.illegal_moves


def replay_line(
    engine: RulesEngine[PositionT],
    start: PositionT,
    moves: Sequence[MoveNode],
) -> ReplayResult[PositionT]:
    """Apply *moves* in order starting from *start*."""
    positions: list[PositionT] = []
    position = start
    for index, node in enumerate(moves):
        try:
            position = engine.apply_move(position, node.san)
        except IllegalMoveError as exc:
            return ReplayResult(positions=positions, illegal_index=index, error=str(exc))
        positions.append(position)
    return ReplayResult(positions=positions)


def check_tree(
    engine: RulesEngine[PositionT],
    start: PositionT,
    moves: Sequence[MoveNode],
) -> TreeCheck:
    """Replay the mainline and every variation, collecting illegal moves.

    A line is abandoned at its first illegal move; variations branching
    from moves before that point are still checked.
    """
    report = TreeCheck()
    _check_line(engine, start, moves, report)
    return report


def _check_line(
    engine: RulesEngine[PositionT],
    start: PositionT,
    moves: Sequence[MoveNode],
    report: TreeCheck,
) -> None:
    replay = replay_line(engine, start, moves)
    reachable = len(moves) if replay.ok else replay.illegal_index + 1
    for index in range(reachable):
        node = moves[index]
        before = start if index == 0 else replay.positions[index - 1]
        for variation in node.variations:
            _check_line(engine, before, variation.moves, report)
    if not replay.ok:
        bad = moves[replay.illegal_index]
        report.illegal_moves.append(
            IllegalMove(ply=bad.ply, san=bad.san, message=replay.error or "")
        )
