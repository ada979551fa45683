"""Exception hierarchy for PGN parsing and replay."""

from __future__ import annotations


class PgnError(ValueError):
    """Base class for data-quality errors raised by this package."""


class MoveGrammarError(PgnError):
    """Movetext could not be turned into a well-formed move tree.

    Raised for structural problems (unbalanced parentheses, malformed
    tokens inside a variation). Scoped to a single game fragment.
    """

    def __init__(self, message: str, line: int | None = None) -> None:
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)
        self.line = line


class IllegalMoveError(PgnError):
    """Raised by a rules engine when a SAN move cannot be applied."""
