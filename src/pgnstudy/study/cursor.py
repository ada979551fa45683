"""Move-by-move playback state over an immutable game tree."""

from __future__ import annotations

from dataclasses import dataclass

from pgnstudy.core.notation.models import GameRecord, MoveNode


@dataclass(slots=True)
class _Frame:
    moves: list[MoveNode]
    index: int  # last played move in ``moves``; -1 before the first one


class StudyCursor:
    """Navigation cursor for a study.

    The cursor only keeps a path into the tree; the :class:`GameRecord` it
    walks is never modified. Entering a variation plays the variation's
    first move in place of the next move of the current line.
    """

    __slots__ = ("_game", "_frames")

    def __init__(self, game: GameRecord) -> None:
        self._game = game
        self._frames: list[_Frame] = [_Frame(game.moves, -1)]

    @property
    def game(self) -> GameRecord:
        return self._game

    @property
    def depth(self) -> int:
        """Number of variations entered (0 on the mainline)."""
        return len(self._frames) - 1

    @property
    def current(self) -> MoveNode | None:
        """Last played move, ``None`` at the start of the game."""
        for frame in reversed(self._frames):
            if frame.index >= 0:
                return frame.moves[frame.index]
        return None

    def next_move(self) -> MoveNode | None:
        frame = self._frames[-1]
        if frame.index + 1 < len(frame.moves):
            return frame.moves[frame.index + 1]
        return None

    def alternatives(self) -> list[str]:
        """SAN of the next move followed by the first move of each of its variations."""
        upcoming = self.next_move()
        if upcoming is None:
            return []
        return [upcoming.san] + [variation.moves[0].san for variation in upcoming.variations]

    def forward(self) -> MoveNode | None:
        upcoming = self.next_move()
        if upcoming is not None:
            self._frames[-1].index += 1
        return upcoming

    def back(self) -> MoveNode | None:
        """Undo one move, leaving a variation when stepping back past its first move."""
        frame = self._frames[-1]
        if frame.index > 0 or (frame.index == 0 and len(self._frames) == 1):
            frame.index -= 1
        elif len(self._frames) > 1:
            self._frames.pop()
        return self.current

    def enter_variation(self, variation_index: int) -> MoveNode:
        upcoming = self.next_move()
        if upcoming is None or not 0 <= variation_index < len(upcoming.variations):
            raise IndexError(f"No variation {variation_index} at this position")
        variation = upcoming.variations[variation_index]
        self._frames.append(_Frame(variation.moves, 0))
        return variation.moves[0]

    def exit_variation(self) -> MoveNode | None:
        """Return to the position the current variation branched from."""
        if len(self._frames) > 1:
            self._frames.pop()
        return self.current

    def to_start(self) -> None:
        self._frames = [_Frame(self._game.moves, -1)]

    def line(self) -> list[str]:
        """SAN moves from the game start up to the cursor."""
        sans: list[str] = []
        for frame in self._frames:
            sans.extend(node.san for node in frame.moves[: frame.index + 1])
        return sans
