"""Tag-pair extraction and header-derived game facts."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from pgnstudy.core.notation.models import RESULT_TOKENS

_LOGGER = logging.getLogger(__name__)

_TAG_RE = re.compile(r'\[(\w+)\s+"((?:[^"\\]|\\.)*)"\s*\]')
_TAG_LINE_RE = re.compile(r'^(?:\s*\[\w+\s+"(?:[^"\\]|\\.)*"\s*\])+\s*$')
_ESCAPE_RE = re.compile(r"\\(.)")


@dataclass(slots=True)
class HeaderBlock:
    """Headers of one fragment plus the movetext that follows them."""

    headers: dict[str, str]
    movetext: str
    movetext_line: int = 1
    malformed: list[str] = field(default_factory=list)


def unescape_tag_value(raw_value: str) -> str:
    return _ESCAPE_RE.sub(r"\1", raw_value)


def escape_tag_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def parse_headers(fragment: str) -> HeaderBlock:
    """Split *fragment* into its tag pairs and movetext.

    Malformed tag lines are skipped. Repeated keys keep the last value.
    """
    headers: dict[str, str] = {}
    malformed: list[str] = []
    lines = fragment.splitlines()
    body_start = len(lines)

    for index, raw_line in enumerate(lines):
        line = raw_line.strip()
        if not line:
            if headers or malformed:
                body_start = index + 1
                break
            continue
        if not line.startswith("["):
            body_start = index
            break

        if _TAG_LINE_RE.match(line) is None:
            _LOGGER.warning("Skipping malformed PGN header line %d: %s", index + 1, line)
            malformed.append(line)
            continue
        for match in _TAG_RE.finditer(line):
            key, raw_value = match.groups()
            headers[key] = unescape_tag_value(raw_value)

    move_lines = [
        line if not line.startswith("%") else ""
        for line in lines[body_start:]
    ]
    return HeaderBlock(
        headers=headers,
        movetext="\n".join(move_lines),
        movetext_line=body_start + 1,
        malformed=malformed,
    )


def resolve_result(headers: dict[str, str], trailing_token: str | None) -> str:
    """Pick the game result: the ``Result`` tag wins over the movetext token."""
    header_result = headers.get("Result")
    if header_result in RESULT_TOKENS:
        return header_result
    if trailing_token in RESULT_TOKENS:
        return trailing_token
    return "*"


def starting_ply(headers: dict[str, str]) -> int:
    """Ply of the first move, read from the side-to-move and move-number FEN fields."""
    fen = headers.get("FEN")
    if not fen:
        return 1
    fields = fen.split()
    side = fields[1] if len(fields) > 1 else "w"
    fullmove = 1
    if len(fields) > 5:
        try:
            fullmove = max(1, int(fields[5]))
        except ValueError:
            fullmove = 1
    return (fullmove - 1) * 2 + (2 if side == "b" else 1)
