"""Core enumerations shared by the notation and study layers."""

from __future__ import annotations

from enum import IntEnum


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    @classmethod
    def for_ply(cls, ply: int) -> Color:
        """Side that plays half-move *ply* (ply 1 is White's first move)."""
        return cls.WHITE if ply % 2 == 1 else cls.BLACK

    def __str__(self) -> str:
        return self.name.lower()
