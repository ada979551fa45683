"""Game-tree data models produced by the PGN parser."""

from __future__ import annotations

import weakref
from dataclasses import dataclass, field

from pgnstudy.core.enums import Color
from pgnstudy.core.notation.sanitizer import DEFAULT_MAX_COMMENT_LENGTH

RESULT_TOKENS = ("1-0", "0-1", "1/2-1/2", "*")


@dataclass(slots=True, frozen=True)
class ParserOptions:
    """Tunables for a parse call."""

    max_comment_length: int = DEFAULT_MAX_COMMENT_LENGTH
    yield_every: int = 25
    complexity_warning_threshold: float = 50.0

    def __post_init__(self) -> None:
        if self.max_comment_length < 0:
            raise ValueError("max_comment_length must be >= 0")
        if self.yield_every <= 0:
            raise ValueError("yield_every must be >= 1")


@dataclass(slots=True, weakref_slot=True)
class MoveNode:
    """A single half-move with its annotations and alternatives."""

    ply: int
    side: Color
    san: str
    nags: list[str] = field(default_factory=list)
    comment_before: str | None = None
    comment_after: str | None = None
    variations: list[Variation] = field(default_factory=list)

    @property
    def move_number(self) -> int:
        """Full-move number as written in movetext."""
        return (self.ply + 1) // 2


@dataclass(slots=True)
class Variation:
    """Alternative continuation replacing its branch-point move.

    The first move has the same ply as the branch point. The branch point
    is held weakly: it is a lookup aid for navigation, the owning edge
    runs from ``MoveNode.variations`` down to this object.
    """

    moves: list[MoveNode] = field(default_factory=list)
    _branch_ref: weakref.ReferenceType[MoveNode] | None = field(
        default=None, repr=False, compare=False
    )

    @classmethod
    def branching_from(cls, branch_point: MoveNode, moves: list[MoveNode]) -> Variation:
        return cls(moves=moves, _branch_ref=weakref.ref(branch_point))

    @property
    def branch_point(self) -> MoveNode | None:
        if self._branch_ref is None:
            return None
        return self._branch_ref()


@dataclass(slots=True, frozen=True)
class ComplexityReport:
    """Advisory size metrics of a parsed game."""

    total_moves: int
    variation_count: int
    comment_count: int
    nag_count: int
    has_variations: bool
    complexity: float


@dataclass(slots=True)
class GameRecord:
    """One parsed study: headers, result and mainline move tree."""

    headers: dict[str, str]
    moves: list[MoveNode]
    result: str = "*"
    fallback: bool = False
    complexity: ComplexityReport | None = None

    def mainline_sans(self) -> list[str]:
        return [node.san for node in self.moves]


@dataclass(slots=True, frozen=True)
class ParseError:
    """A game fragment that produced no record at all."""

    study_index: int
    message: str
    line: int | None = None


@dataclass(slots=True)
class Collection:
    """Result of a batch parse over concatenated games."""

    studies: list[GameRecord] = field(default_factory=list)
    errors: list[ParseError] = field(default_factory=list)

    @property
    def total_studies(self) -> int:
        return len(self.studies)


@dataclass(slots=True)
class ValidationReport:
    """Pre-flight summary used before importing a PGN file."""

    valid: bool
    errors: list[str]
    warnings: list[str]
    study_count: int
    complexity: float
