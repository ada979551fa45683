"""Consumers of parsed studies: playback cursor and rules-engine replay."""

from pgnstudy.study.cursor import StudyCursor
from pgnstudy.study.rules import (
    IllegalMove,
    ReplayResult,
    RulesEngine,
    TreeCheck,
    check_tree,
    replay_line,
)

__all__ = [
    "IllegalMove",
    "ReplayResult",
    "RulesEngine",
    "StudyCursor",
    "TreeCheck",
    "check_tree",
    "replay_line",
]
